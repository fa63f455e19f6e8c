"""API routes package."""

from .health import router as health_router
from .mqtt import router as mqtt_router

__all__ = [
    "health_router",
    "mqtt_router",
]
