"""FastAPI routes package."""

from docgate.routes.admin import router as admin_router
from docgate.routes.health import router as health_router
from docgate.routes.questions import router as questions_router

__all__ = ["admin_router", "health_router", "questions_router"]
