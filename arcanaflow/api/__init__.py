from arcanaflow.api.draw import router as draw_router
from arcanaflow.api.health import router as health_router
from arcanaflow.api.readings import router as readings_router
from arcanaflow.api.ws import router as ws_router

__all__ = [
    "draw_router",
    "health_router",
    "readings_router",
    "ws_router",
]
