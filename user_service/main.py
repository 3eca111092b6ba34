# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from user_service.api import health as health_api, users as users_api
from user_service.common.exception_handlers import error_response, register_exception_handlers
from user_service.common.instrumentation import LoggingHook, PerformanceHook
from user_service.common.logging import get_logger, setup_logging
from user_service.common.middlewares import RequestIdMiddleware, RequestInstrumentationMiddleware
from user_service.infra.config import Settings, settings

logger = get_logger("Bootstrap")


def create_app(cfg: Settings = settings) -> FastAPI:
    setup_logging(cfg.logging_config)

    docs_url = cfg.SWAGGER_PATH if cfg.SWAGGER_ENABLED else None
    app = FastAPI(
        title=cfg.SWAGGER_TITLE,
        description=cfg.SWAGGER_DESCRIPTION,
        version=cfg.SWAGGER_VERSION,
        docs_url=docs_url,
        redoc_url=None,
        openapi_url=f"{cfg.API_PREFIX}/openapi.json" if cfg.SWAGGER_ENABLED else None,
    )

    # ---------- middlewares / handlers ----------
    # 后加的在外层：RequestId -> Instrumentation -> 路由
    # 未识别的异常在 Instrumentation 里就转成 500 响应，不再抛给 server
    app.add_middleware(
        RequestInstrumentationMiddleware,
        hooks=[LoggingHook(), PerformanceHook()],
        on_error=error_response,
    )
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_api.router, prefix=cfg.API_PREFIX)
    app.include_router(users_api.router, prefix=cfg.API_PREFIX)

    if docs_url:
        logger.info(f"Swagger documentation available at: {docs_url}")
    logger.info(f"{cfg.APP_NAME} initialized, routes mounted under {cfg.API_PREFIX}")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
