"""
FastAPI dependencies for dependency injection.

Settings, the link service and the access queue are attached to app.state
by the application lifespan; these functions hand them to routes.

Pattern: Dependency Injection
- No module-level store instance
- Easy to test (build an app with its own settings and data file)
"""

from fastapi import Request

from shortlink_app.config import Settings
from shortlink_app.queue.strategies import AccessEventQueue
from shortlink_app.services.link_service import LinkService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_link_service(request: Request) -> LinkService:
    """LinkService created at startup"""
    return request.app.state.link_service


def get_queue(request: Request) -> AccessEventQueue:
    """Access event queue created at startup"""
    return request.app.state.access_queue
