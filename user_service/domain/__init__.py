# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""
领域层：

- models: ORM 实体（User）
- schemas: Pydantic 请求/响应模型
- value_objects: 值对象（Email）
- repositories: 仓储接口
"""
from . import models, repositories, schemas, value_objects  # noqa: F401

__all__ = ["models", "repositories", "schemas", "value_objects"]
