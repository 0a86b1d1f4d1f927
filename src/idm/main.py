"""
Application factory and console entry point.

`create_app` wires everything exactly once: engine, session factory,
repositories, services and the token verifier are built here and parked on
`app.state`. Endpoints reach them through `idm.api.dependencies`.
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from idm.api.auth import TokenVerifier
from idm.api.internal import internal_router
from idm.api.v1 import api_router
from idm.api.v1.error_handlers import register_exception_handlers
from idm.config.settings import Settings, get_settings
from idm.core.logging import RequestIDMiddleware, setup_logging
from idm.database.session import create_engine_from_settings, create_session_factory
from idm.repositories import EmployeeRepository, RoleRepository
from idm.services import EmployeeService, RoleService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, *, engine: AsyncEngine | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Defaults to the cached environment settings.
        engine: Pre-built engine (tests); otherwise one is created from settings.
            The engine is disposed when the application shuts down.
    """
    settings = settings or get_settings()
    engine = engine or create_engine_from_settings(settings)
    session_factory = create_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("app.startup", extra={"app_name": settings.APP_NAME, "version": settings.APP_VERSION, "env": settings.ENV})
        yield
        await engine.dispose()
        logger.info("app.shutdown")

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

    app.state.settings = settings
    app.state.engine = engine
    app.state.token_verifier = TokenVerifier.from_settings(settings)
    app.state.employee_service = EmployeeService(
        EmployeeRepository(
            session_factory,
            find_all_timeout=settings.FIND_ALL_TIMEOUT,
            find_page_timeout=settings.FIND_PAGE_TIMEOUT,
        )
    )
    app.state.role_service = RoleService(
        RoleRepository(session_factory, find_all_timeout=settings.FIND_ALL_TIMEOUT)
    )

    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router)
    app.include_router(internal_router)
    return app


def run() -> None:
    """Console entry point: configure logging and serve with uvicorn (TLS when configured)."""
    settings = get_settings()
    setup_logging(settings)
    app = create_app(settings)

    ssl_options = {}
    if settings.ssl_enabled:
        ssl_options = {"ssl_certfile": str(settings.SSL_CERTFILE), "ssl_keyfile": str(settings.SSL_KEYFILE)}

    # log_config=None keeps the dictConfig installed by setup_logging.
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None, **ssl_options)


if __name__ == "__main__":
    run()
