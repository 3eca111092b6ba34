# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""通用基础设施（错误/日志/request id/埋点）

约定：
- Router 不写业务逻辑：业务错误统一通过 AppError 抛出，由全局异常处理转为标准错误响应
- 只有 exception_handlers 负责组装对外错误结构，其他层只抛异常
- request id 通过 middleware 注入，并写入每一行日志，便于线上排障
"""

from __future__ import annotations
