"""
API Module
"""
from .main import create_api_app
from .errors import ApiError
from .middleware import RequestLoggingMiddleware

__all__ = [
    "create_api_app",
    "ApiError",
    "RequestLoggingMiddleware",
]
