# industrin/main.py
from __future__ import annotations

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

# ---------------------------
# Env loading (root .env first, then industrin/.env as fallback)
# ---------------------------
load_dotenv(find_dotenv(usecwd=True))
load_dotenv(Path(__file__).resolve().parent / ".env", override=False)

from industrin.core.errors import register_exception_handlers  # noqa: E402
from industrin.core.logging import configure_logging  # noqa: E402
from industrin.db.session import engine  # noqa: E402
from industrin.middleware.request_logging import RequestLoggingMiddleware  # noqa: E402
from industrin.models import Base  # noqa: E402  (registers every table)

from industrin.api import (  # noqa: E402
    admin,
    admin_auth,
    catalog,
    claims,
    companies,
    company_auth,
    health,
    quotes,
)

configure_logging()

# ---------------------------
# CREATE TABLES (dev-only; migrations otherwise)
# ---------------------------
ENABLE_CREATE_ALL = os.getenv("ENABLE_CREATE_ALL", "1") == "1"

if ENABLE_CREATE_ALL:
    Base.metadata.create_all(bind=engine)


def _cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "")
    return [o.strip() for o in raw.split(",") if o.strip()]


# ---------------------------
# APP
# ---------------------------
app = FastAPI(title="Industrin")

register_exception_handlers(app)
app.add_middleware(RequestLoggingMiddleware)

if _cors_origins():
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

# ---------------------------
# ROUTER MOUNT
# ---------------------------
app.include_router(companies.router, prefix="/api", tags=["companies"])
app.include_router(catalog.router, prefix="/api", tags=["catalog"])
app.include_router(claims.router, prefix="/api", tags=["claims"])
app.include_router(quotes.router, prefix="/api", tags=["quotes"])
app.include_router(company_auth.router, prefix="/api", tags=["company"])
app.include_router(admin_auth.router, prefix="/api", tags=["admin"])
app.include_router(admin.router, prefix="/api", tags=["admin"])
app.include_router(health.router, prefix="/api", tags=["health"])


# ---------------------------
# OpenAPI (bearer auth for the Authorize button)
# ---------------------------
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title="Industrin",
        version="1.0.0",
        description="Directory of Swedish industrial service companies",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {})
    openapi_schema["components"]["securitySchemes"]["HTTPBearer"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi
