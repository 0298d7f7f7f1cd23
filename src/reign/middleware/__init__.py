"""Middleware registration."""

from fastapi import FastAPI

from reign.config import Settings
from reign.middleware.cors import setup_cors
from reign.middleware.error_handler import setup_error_handlers
from reign.middleware.logging import setup_logging
from reign.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Install logging, exception handlers, request ids and CORS on ``app``.

    Starlette wraps in reverse-add order, so CORS (added last) sees every
    response, including error envelopes and preflights.
    """
    setup_logging(settings)
    setup_error_handlers(app, settings)
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
