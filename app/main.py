"""FastAPI application factory for the PawCare notifications service."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.use_cases.notifications import NotificationStore
from app.config import get_settings
from app.infrastructure.database import engine, initialize_database
from app.infrastructure.notifications import notification_publisher
from app.interfaces.api.dependencies import build_notification_store
from app.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Inicializa la base de datos y conecta el almacén de notificaciones al websocket."""

    initialize_database()
    store: NotificationStore = app.state.notification_store
    unsubscribe = store.subscribe(notification_publisher.notify_updated)
    try:
        yield
    finally:
        unsubscribe()
        engine.dispose()


def create_app(notification_store: NotificationStore | None = None) -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI."""

    settings = get_settings()
    app = FastAPI(title="PawCare Notifications", lifespan=lifespan)
    app.state.notification_store = notification_store or build_notification_store(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app
