"""CORS for the mobile and web clients."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reign.config import Settings
from reign.middleware.request_id import REQUEST_ID_HEADER

# Every route is a GET, POST or PUT.
ALLOWED_METHODS = ["GET", "POST", "PUT", "OPTIONS"]


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Allow ``settings.cors_origins``. A ``*`` entry opens the API to any origin without credentials."""
    any_origin = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if any_origin else settings.cors_origins,
        allow_credentials=not any_origin,
        allow_methods=ALLOWED_METHODS,
        allow_headers=["Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
