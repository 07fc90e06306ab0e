"""
API Routes Module
"""
from .health import router as health_router
from .auth import router as auth_router
from .messages import router as messages_router
from .feedback import router as feedback_router
from .sales import router as sales_router

__all__ = [
    "health_router",
    "auth_router",
    "messages_router",
    "feedback_router",
    "sales_router",
]
