"""OAuth2 Client Request Models."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from oauth2_registry.domain.models import (
    ClientAuthenticationMethod,
    OAuth2MapperConfig,
    OAuth2Registration,
    PlatformType,
)


class OAuth2RegistrationRequest(BaseModel):
    """Request to create (no id) or update (with id) a registration."""

    id: UUID | None = Field(None, description="Registration id, set to update")
    title: str = Field(..., description="Administrative title")
    provider_name: str = Field(..., description="Identity provider name")
    platforms: list[PlatformType] = Field(
        default_factory=list, description="Allowed platforms, empty for all"
    )
    client_id: str = Field(..., description="OAuth2 client id")
    client_secret: str = Field(..., description="OAuth2 client secret")
    authorization_uri: str = Field(..., description="Authorization endpoint")
    access_token_uri: str = Field(..., description="Token endpoint")
    scope: list[str] = Field(default_factory=list, description="Requested scopes")
    user_info_uri: str | None = Field(None, description="User info endpoint")
    user_name_attribute_name: str = Field(
        default="email", description="User info attribute holding the user name"
    )
    jwk_set_uri: str | None = Field(None, description="JWK set endpoint")
    client_authentication_method: ClientAuthenticationMethod = Field(
        default=ClientAuthenticationMethod.POST,
        description="How the client authenticates at the token endpoint",
    )
    login_button_label: str = Field(..., description="Login button text")
    login_button_icon: str | None = Field(None, description="Login button icon")
    mapper: OAuth2MapperConfig | None = Field(None, description="User mapping")
    additional_info: dict[str, Any] = Field(default_factory=dict)

    def to_registration(self) -> OAuth2Registration:
        """Convert to a registration with no tenant or creation time yet."""
        return OAuth2Registration(**self.model_dump())
