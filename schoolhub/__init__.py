# schoolhub/__init__.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from schoolhub.core.config import settings
from schoolhub.core.database import close_db, get_db_context, init_db
from schoolhub.core.errors import register_exception_handlers
from schoolhub.core.logging import logger
from schoolhub.middleware import RequestIDMiddleware
from schoolhub.routes import routers
from schoolhub.services.administration_service import create_super_admin


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Multi-tenant school management API",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    for router in routers:
        app.include_router(router)

    @app.get("/api/health", tags=["Health"])
    async def health():
        return {"status": "ok", "version": settings.VERSION}

    @app.on_event("startup")
    async def startup_event():
        await init_db()
        async with get_db_context() as db:
            await create_super_admin(db)
        logger.info("Application startup completed")

    @app.on_event("shutdown")
    async def shutdown_event():
        await close_db()
        logger.info("Application shutdown completed")

    return app
