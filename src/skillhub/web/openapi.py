from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="SkillHub API",
            version="0.1.0",
            summary="Signup, password and Google login, bearer-token authorization",
            routes=app.routes,
        )

        components = openapi_schema.setdefault("components", {})
        components.setdefault("securitySchemes", {})["AuthorizationToken"] = {
            "type": "apiKey",
            "in": "header",
            "name": "Authorization",
            "description": "Token returned by /api/login or /api/federated-login, sent as-is (a 'Bearer ' prefix is accepted)",
        }

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid credentials", "type": "invalid_credentials"},
                {"message": "Email already exists", "type": "duplicate_email"},
                {"message": "Forbidden", "type": "access_denied"},
            ]
        }
    }
