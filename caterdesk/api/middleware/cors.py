"""
CORS for the admin panel.

The panel is normally opened from the same origin the API serves. A separate
front-end dev server (or an origin listed in ``CORS_ALLOWED_ORIGINS``) has to
be allowed explicitly; multipart uploads and the request id header are the
only non-simple parts of the requests it sends.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


LOCAL_PANEL_ORIGINS = ["http://localhost:8000", "http://127.0.0.1:8000"]
VITE_DEV_ORIGINS = ["http://localhost:5173", "http://127.0.0.1:5173"]


@dataclass
class CORSConfig:
    origins: List[str] = field(default_factory=lambda: list(LOCAL_PANEL_ORIGINS))
    methods: List[str] = field(
        default_factory=lambda: ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    headers: List[str] = field(default_factory=lambda: ["Accept", "Content-Type", "X-Request-ID"])
    max_age: int = 3600
    # Any origin, without credentials; development only
    wildcard: bool = False

    def middleware_options(self) -> dict:
        return {
            "allow_origins": ["*"] if self.wildcard else self.origins,
            "allow_credentials": not self.wildcard,
            "allow_methods": self.methods,
            "allow_headers": self.headers,
            "expose_headers": ["X-Request-ID"],
            "max_age": self.max_age,
        }


CORS_CONFIGS = {
    "development": {"origins": LOCAL_PANEL_ORIGINS + VITE_DEV_ORIGINS, "wildcard": True},
    "test": {"origins": LOCAL_PANEL_ORIGINS},
    "production": {"origins": LOCAL_PANEL_ORIGINS, "max_age": 7200},
}


def get_cors_config(environment: Optional[str] = None) -> CORSConfig:
    """CORS settings for ``environment`` plus any ``CORS_ALLOWED_ORIGINS``."""
    environment = environment or os.getenv("CATERDESK_ENV", "development")
    options = CORS_CONFIGS.get(environment, CORS_CONFIGS["production"])
    config = CORSConfig(**{k: list(v) if isinstance(v, list) else v for k, v in options.items()})

    for origin in os.getenv("CORS_ALLOWED_ORIGINS", "").split(","):
        if origin.strip() and origin.strip() not in config.origins:
            config.origins.append(origin.strip())

    return config


def setup_cors(app: FastAPI, config: Optional[CORSConfig] = None) -> None:
    config = config or get_cors_config()
    app.add_middleware(CORSMiddleware, **config.middleware_options())
