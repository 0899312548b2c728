from typing import Optional

from fastapi import FastAPI
from .core.config import Settings, settings as default_settings
from .core.log import configure_logging
from .db.session import create_db_engine, init_db
from .api.errors import register_error_handlers
from .api.v1 import events, health

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME)
    app.state.settings = settings
    app.state.engine = create_db_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
    register_error_handlers(app)
    app.include_router(health.router, prefix=settings.API_V1_PREFIX)
    app.include_router(events.router, prefix=settings.API_V1_PREFIX)

    @app.on_event("startup")
    def on_startup():
        init_db(app.state.engine)

    @app.on_event("shutdown")
    def on_shutdown():
        app.state.engine.dispose()

    return app

app = create_app()
