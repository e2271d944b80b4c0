"""OpenAPI metadata and customization utilities.

Enriches the generated schema with:
- Tags metadata
- ``PrincipalHeader`` (``X-User-Id``) and ``RoleHeader`` (``X-User-Role``)
  security schemes applied to the user-mutating operations
- A shared 429 response on rate limited operations

This keeps documentation concerns decoupled from the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_TAGS = [
    {"name": "Users", "description": "User directory CRUD."},
    {"name": "Auth", "description": "Credential registration and login."},
    {"name": "Payments", "description": "Payment provider ping, checkout and webhook."},
    {"name": "Health", "description": "Liveness and server time."},
]

_RATE_LIMITED_PATHS = {"/api/auth/register", "/api/stripe/checkout"}
_PRINCIPAL_METHODS = {"post", "put", "delete"}

_RATE_LIMITED_RESPONSE = {
    "description": "Too many requests; see Retry-After.",
    "headers": {
        "Retry-After": {"schema": {"type": "integer"}},
        "X-RateLimit-Limit": {"schema": {"type": "integer"}},
        "X-RateLimit-Remaining": {"schema": {"type": "integer"}},
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags, security and 429 docs."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        security_schemes = schema.setdefault("components", {}).setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "PrincipalHeader",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-User-Id",
                "description": "Caller user id asserted by the upstream gateway.",
            },
        )
        security_schemes.setdefault(
            "RoleHeader",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-User-Role",
                "description": "Caller role (ADMIN or USER); required together with X-User-Id.",
            },
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        tags.extend(t for t in _TAGS if t["name"] not in existing_tag_names)

        for path, methods in schema.get("paths", {}).items():
            for method, operation in methods.items():
                if not isinstance(operation, dict):
                    continue
                if path.startswith("/api/users") and method in _PRINCIPAL_METHODS:
                    operation["security"] = [{"PrincipalHeader": [], "RoleHeader": []}]
                if path in _RATE_LIMITED_PATHS:
                    operation.setdefault("responses", {})["429"] = _RATE_LIMITED_RESPONSE

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
