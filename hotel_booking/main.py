"""
Application entry point
The app owns the engine, session factory and room lock registry; services get them injected.
"""
from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from hotel_booking import __version__
from hotel_booking.config import Settings, settings as default_settings
from hotel_booking.database import create_db_engine, create_session_factory, init_db
from hotel_booking.routers import bookings, rooms
from hotel_booking.services.room_locks import RoomLockRegistry

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None,
               engine: Optional[Engine] = None) -> FastAPI:
    """Application factory"""
    app_settings = app_settings or default_settings
    logging.basicConfig(
        level=app_settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(app.state.engine)
        logger.info(f"{app_settings.APP_NAME} started")
        yield
        if owns_engine:
            app.state.engine.dispose()
        logger.info(f"{app_settings.APP_NAME} stopped")

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Room inventory lookup and overlap-free reservations",
        version=__version__,
        debug=app_settings.DEBUG,
        lifespan=lifespan
    )

    owns_engine = engine is None
    app.state.settings = app_settings
    app.state.engine = engine or create_db_engine(app_settings.DATABASE_URL)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.room_locks = RoomLockRegistry()

    app.include_router(rooms.router)
    app.include_router(bookings.router)

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
