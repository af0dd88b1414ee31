"""OpenAPI schema customization for the OAuth2 client registry API."""

from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from oauth2_registry.models import ProblemDetail

API_DESCRIPTION = """
# OAuth2 Client Registry API

Stores the OAuth2 identity-provider clients of a platform and decides which
of them an unauthenticated caller is offered on the login page.

## Client discovery

`POST /oauth2-clients?pkgName=&platform=` returns the ordered login options
for the caller:

- With `pkgName`, the clients bound to that mobile application.
- Otherwise, the clients bound to the request domain. The domain is the
  forwarded or requested host, with `:port` only for non-default ports.
- `platform` (`WEB`, `ANDROID`, `IOS`) keeps the clients allowed on that
  platform. Any other value is ignored.

## Administration

Requires `Authorization: Bearer <token>`.

- `/oauth2/client` manages client registrations (system administrators).
- `/domain` manages domains and their client bindings.
- `/mobile/app` manages mobile applications and their client bindings.

## Error Handling

All errors follow [RFC 7807 Problem Details](https://datatracker.ietf.org/doc/html/rfc7807) format:

```json
{
  "type": "https://datatracker.ietf.org/doc/html/rfc7231#section-6.5.4",
  "title": "Not Found",
  "status": 404,
  "detail": "Requested Domain with id [...] was not found",
  "instance": "/domain/info/..."
}
```
"""


def custom_openapi(app: FastAPI) -> dict[str, Any]:
    """Generate customized OpenAPI schema for the API.

    Args:
        app: The FastAPI application instance.

    Returns:
        Customized OpenAPI schema dictionary.
    """
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=API_DESCRIPTION,
        routes=app.routes,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    openapi_schema["tags"] = [
        {
            "name": "Health",
            "description": "Health check endpoints for monitoring",
        },
        {
            "name": "OAuth2 Discovery",
            "description": "Login options offered to unauthenticated callers",
        },
        {
            "name": "OAuth2 Clients",
            "description": "OAuth2 client registration management",
        },
        {
            "name": "Domains",
            "description": "Domains and their OAuth2 client bindings",
        },
        {
            "name": "Mobile Apps",
            "description": "Mobile applications and their OAuth2 client bindings",
        },
    ]

    components = openapi_schema.setdefault("components", {})
    schemas = components.setdefault("schemas", {})
    schemas.setdefault(
        "ProblemDetail",
        ProblemDetail.model_json_schema(ref_template="#/components/schemas/{model}"),
    )
    for name, definition in schemas["ProblemDetail"].pop("$defs", {}).items():
        schemas.setdefault(name, definition)

    components.setdefault("securitySchemes", {}).setdefault(
        "BearerAuth",
        {
            "type": "http",
            "scheme": "bearer",
            "description": "Signed administrative access token",
        },
    )

    # Add RFC 7807 error response to all endpoints
    for path in openapi_schema["paths"].values():
        for operation in path.values():
            if isinstance(operation, dict) and "responses" in operation:
                operation["responses"]["500"] = {
                    "description": "Internal Server Error",
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/ProblemDetail"}
                        }
                    },
                }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


def configure_openapi(app: FastAPI) -> None:
    """Configure the FastAPI app to use custom OpenAPI schema.

    Args:
        app: The FastAPI application instance.
    """
    app.openapi = lambda: custom_openapi(app)  # type: ignore[method-assign]
