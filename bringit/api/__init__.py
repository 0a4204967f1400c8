"""FastAPI applications and routes."""
from .main import create_app
from .test_server import create_test_app

__all__ = ["create_app", "create_test_app"]
