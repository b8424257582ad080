import structlog
from fastapi import FastAPI

from bbbank_api.api.observability import router as observability_router
from bbbank_api.api.transactions import router as transactions_router
from bbbank_api.config import get_settings
from bbbank_api.db.seed import seed_demo_data
from bbbank_api.db.session import get_sessionmaker, init_db
from bbbank_api.observability.logging import configure_logging
from bbbank_api.observability.middleware import RequestContextMiddleware


def create_app() -> FastAPI:
    settings = get_settings()
    docs_kwargs = {} if settings.enable_docs else {"docs_url": None, "redoc_url": None, "openapi_url": None}
    application = FastAPI(title=settings.app_name, version="0.1.0", **docs_kwargs)
    application.add_middleware(RequestContextMiddleware)
    application.include_router(transactions_router)
    application.include_router(observability_router)

    @application.on_event("startup")
    def _startup() -> None:
        settings = get_settings()
        configure_logging(settings.log_level_value, access_level=settings.access_log_level_value)
        logger = structlog.get_logger("startup")
        try:
            init_db()
            if settings.seed_demo_data:
                with get_sessionmaker()() as db:
                    seed_demo_data(db)
        except Exception:
            logger.critical("Error Starting BBBank API", exc_info=True)
            raise
        logger.info("startup.complete", app_name=settings.app_name)

    @application.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
