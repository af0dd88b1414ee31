"""
Settings of the OAuth2 client registry service.

Values are read by pydantic-settings from the process environment first and
from ``.env`` second, matching field names case-insensitively
(``LOGIN_PROCESSING_URL`` fills ``login_processing_url``).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Tenant that owns every registration a system administrator saves.
SYS_TENANT_ID = "13814000-1dd2-11b2-8080-808080808080"

DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production-min-32-chars"
MIN_SECRET_KEY_LENGTH = 32


def split_csv(value: str, allow_wildcard: bool = False) -> list[str]:
    """Split a comma-separated setting, dropping blanks.

    With ``allow_wildcard`` a lone ``*`` stays ``["*"]``.
    """
    if allow_wildcard and value.strip() == "*":
        return ["*"]
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Service configuration.

    Example ``.env``::

        INFRASTRUCTURE_PROVIDER=aws
        AWS_REGISTRATIONS_TABLE=prod-oauth2-registrations
        LOGIN_PROCESSING_URL=/login/oauth2/code/
        LOG_SERIALIZE=true
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    project_name: str = Field(default="OAuth2 Client Registry")
    project_description: str = Field(
        default="Registry of OAuth2 identity-provider clients and their domain "
        "and mobile application bindings",
    )
    project_version: str = Field(default="1.0.0")
    environment: str = Field(
        default="development",
        description="development, staging or production",
    )
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    debug: bool = Field(default=False, description="Uvicorn auto-reload")
    enable_docs: bool = Field(
        default=False, description="Serve /docs, /redoc and /openapi.json"
    )

    # Administrative access tokens
    secret_key: str = Field(
        default=DEFAULT_SECRET_KEY,
        description="Key signing administrative access tokens",
    )
    access_token_max_age: int = Field(
        default=86400,
        gt=0,
        description="Seconds an administrative access token stays valid",
    )

    # Logging (loguru)
    log_level: str = Field(default="INFO")
    log_format: str = Field(
        default="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | trace_id={extra[trace_id]} | {name}:{function}:{line} - {message}",  # noqa: E501
    )
    log_serialize: bool = Field(
        default=False, description="Emit log records as JSON lines"
    )
    logger_enqueue: bool = Field(
        default=False, description="Write log records from a background queue"
    )

    # CORS, comma-separated
    allowed_origins: str = Field(default="http://localhost:3000,http://localhost:5173")
    cors_allowed_methods: str = Field(default="GET,POST,PUT,DELETE,OPTIONS")
    cors_allowed_headers: str = Field(
        default="Content-Type,Authorization,X-Forwarded-Host,X-Forwarded-Port,X-Forwarded-Proto",  # noqa: E501
    )

    # Registry store
    infrastructure_provider: Literal["local", "aws"] = Field(default="local")
    infrastructure_base_dir: str = Field(
        default="./.registry",
        description="Directory holding the JSON files of the local store",
    )
    aws_region: str = Field(default="eu-west-1")
    aws_registrations_table: str = Field(default="oauth2-registrations")
    aws_domains_table: str = Field(default="oauth2-domains")
    aws_domain_registrations_table: str = Field(default="oauth2-domain-registrations")
    aws_mobile_apps_table: str = Field(default="oauth2-mobile-apps")
    aws_mobile_app_registrations_table: str = Field(
        default="oauth2-mobile-app-registrations"
    )
    auto_create_resources: bool = Field(
        default=False, description="Create missing DynamoDB tables on first use"
    )

    # OAuth2 login flow
    login_processing_url: str = Field(
        default="/login/oauth2/code/",
        description="Path the identity provider redirects to after login",
    )
    oauth2_authorization_path: str = Field(
        default="/oauth2/authorization",
        description="Prefix of the authorization redirect of a registration",
    )
    system_tenant_id: str = Field(default=SYS_TENANT_ID)

    # OpenTelemetry
    otel_enabled: bool = Field(default=False)
    otel_service_name: str = Field(default="oauth2-registry")
    otel_exporter_otlp_endpoint: str = Field(default="http://otel-collector:4317")

    @field_validator("login_processing_url", "oauth2_authorization_path")
    @classmethod
    def ensure_leading_slash(cls, value: str) -> str:
        value = value.strip()
        return value if value.startswith("/") else f"/{value}"

    @model_validator(mode="after")
    def check_production_secret(self) -> "Settings":
        """Refuse to sign tokens with the development key in production."""
        if self.environment == "production" and (
            self.secret_key == DEFAULT_SECRET_KEY
            or len(self.secret_key) < MIN_SECRET_KEY_LENGTH
        ):
            raise ValueError(
                f"SECRET_KEY must be set to at least {MIN_SECRET_KEY_LENGTH} "
                "characters in production"
            )
        return self

    def get_allowed_origins(self) -> list[str]:
        return split_csv(self.allowed_origins)

    def get_cors_allowed_methods(self) -> list[str]:
        return split_csv(self.cors_allowed_methods, allow_wildcard=True)

    def get_cors_allowed_headers(self) -> list[str]:
        return split_csv(self.cors_allowed_headers, allow_wildcard=True)

    def get_authorization_url(self, registration_id: str) -> str:
        """Return the redirect path, e.g. ``/oauth2/authorization/<id>``."""
        return f"{self.oauth2_authorization_path.rstrip('/')}/{registration_id}"


@lru_cache
def get_settings() -> Settings:
    """
    Return the process-wide settings, reading ``.env`` once.

    Call ``get_settings.cache_clear()`` to pick up changed variables.
    """
    return Settings()


settings = get_settings()
