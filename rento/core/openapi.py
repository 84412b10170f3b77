"""OpenAPI customization for the Rento API.

Adds the ``X-API-Key`` security scheme, requires it on every operation except
the public ones listed in ``PUBLIC_PATHS``, and attaches tag descriptions.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

SECURITY_SCHEME_NAME = "ApiKeyAuth"

PUBLIC_PATHS: frozenset[str] = frozenset({"/health"})

TAGS_METADATA: list[dict[str, str]] = [
    {"name": "Applications", "description": "Rental applications and their review workflow."},
    {"name": "Tours", "description": "Property tour requests and status changes."},
    {"name": "Messages", "description": "Tenant and landlord conversations."},
    {"name": "Favorites", "description": "Saved properties."},
    {"name": "Health", "description": "Liveness checks."},
]


def _exempt_public_paths(schema: Dict[str, Any]) -> None:
    for path, operations in schema.get("paths", {}).items():
        if path not in PUBLIC_PATHS:
            continue
        for operation in operations.values():
            if isinstance(operation, dict):
                operation["security"] = []


def apply_openapi_customizations(app: FastAPI) -> None:
    """Wrap ``app.openapi`` so the generated schema documents caller auth.

    The schema is built once by FastAPI and cached on ``app.openapi_schema``;
    the wrapper only patches that cached document.
    """

    generate = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = generate()

        schemes = schema.setdefault("components", {}).setdefault("securitySchemes", {})
        schemes.setdefault(
            SECURITY_SCHEME_NAME,
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-API-Key",
                "description": "API key mapped to the calling user (see APP_API_KEYS).",
            },
        )
        schema.setdefault("security", [{SECURITY_SCHEME_NAME: []}])

        tags = schema.setdefault("tags", [])
        known = {tag.get("name") for tag in tags}
        tags.extend(tag for tag in TAGS_METADATA if tag["name"] not in known)

        _exempt_public_paths(schema)
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
