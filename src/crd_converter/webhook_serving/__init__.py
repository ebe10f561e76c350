"""Webhook serving exports."""

from .webhook_app import (
    build_review_handlers,
    create_app,
    create_app_from_configuration,
    serve_webhook,
)

__all__ = [
    "build_review_handlers",
    "create_app",
    "create_app_from_configuration",
    "serve_webhook",
]
