"""
Domain models for OAuth2 client registrations and their bindings.

A registration describes one identity-provider client. It is offered to
callers through bindings: a domain binding (host[:port] + scheme) for web
logins and a mobile app binding (package name) for mobile logins.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class PlatformType(str, Enum):
    """Client platform a registration may be used from."""

    WEB = "WEB"
    ANDROID = "ANDROID"
    IOS = "IOS"

    @classmethod
    def parse(cls, value: "PlatformType | str | None") -> "PlatformType | None":
        """
        Parse a platform hint without ever failing.

        Matching is exact and case-sensitive. Absent, empty or unknown
        values mean "apply no platform filter" and return None.

        Args:
            value: Platform name, enum member or None

        Returns:
            The matching PlatformType or None
        """
        if isinstance(value, cls):
            return value
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class SchemeType(str, Enum):
    """Scheme accepted by a domain binding."""

    HTTP = "HTTP"
    HTTPS = "HTTPS"
    MIXED = "MIXED"

    def accepts(self, scheme: str | None) -> bool:
        """
        Check whether a request scheme is accepted.

        Args:
            scheme: Request scheme (``http`` / ``https``), any case

        Returns:
            True for MIXED, for a matching scheme, and for absent or unknown
            request schemes
        """
        if self is SchemeType.MIXED or not scheme:
            return True
        requested = scheme.upper()
        if requested not in (SchemeType.HTTP.value, SchemeType.HTTPS.value):
            return True
        return self.value == requested


class ClientAuthenticationMethod(str, Enum):
    BASIC = "BASIC"
    POST = "POST"


class MapperType(str, Enum):
    BASIC = "BASIC"
    CUSTOM = "CUSTOM"
    GITHUB = "GITHUB"
    APPLE = "APPLE"


class TenantNameStrategy(str, Enum):
    DOMAIN = "DOMAIN"
    EMAIL = "EMAIL"
    CUSTOM = "CUSTOM"


class OAuth2MapperConfig(BaseModel):
    """How an external user is mapped to a local user after login."""

    model_config = ConfigDict(frozen=True)

    type: MapperType = Field(default=MapperType.BASIC, description="Mapper type")
    allow_user_creation: bool = Field(
        default=True, description="Create the user on first login"
    )
    activate_user: bool = Field(default=False, description="Activate created users")
    email_attribute_key: str = Field(default="email")
    first_name_attribute_key: str | None = None
    last_name_attribute_key: str | None = None
    tenant_name_strategy: TenantNameStrategy = TenantNameStrategy.DOMAIN
    tenant_name_pattern: str | None = None
    customer_name_pattern: str | None = None
    default_dashboard_name: str | None = None
    always_full_screen: bool = False
    url: str | None = Field(default=None, description="Custom mapper endpoint")
    username: str | None = None
    password: str | None = None


class OAuth2Registration(BaseModel):
    """
    A configured OAuth2 identity-provider client.

    Attributes:
        id: Registration id (assigned on create)
        tenant_id: Owning tenant (forced to the caller's tenant on save)
        created_time: Creation time in epoch milliseconds
        title: Administrative title
        provider_name: Provider identifier shown to clients (Google, GitHub...)
        platforms: Platforms the client may be used from; empty means all
        login_button_label: Text of the login button
        login_button_icon: Icon of the login button
    """

    model_config = ConfigDict(frozen=True)

    id: UUID | None = None
    tenant_id: UUID | None = None
    created_time: int | None = None
    title: str
    provider_name: str
    platforms: list[PlatformType] = Field(default_factory=list)
    client_id: str
    client_secret: str
    authorization_uri: str
    access_token_uri: str
    scope: list[str] = Field(default_factory=list)
    user_info_uri: str | None = None
    user_name_attribute_name: str = "email"
    jwk_set_uri: str | None = None
    client_authentication_method: ClientAuthenticationMethod = (
        ClientAuthenticationMethod.POST
    )
    login_button_label: str
    login_button_icon: str | None = None
    mapper: OAuth2MapperConfig | None = None
    additional_info: dict[str, Any] = Field(default_factory=dict)

    def to_info(self) -> "OAuth2RegistrationInfo":
        """Project the registration to its public, secret-free view."""
        return OAuth2RegistrationInfo(
            id=self.id,
            created_time=self.created_time,
            title=self.title,
            provider_name=self.provider_name,
            platforms=list(self.platforms),
            login_button_label=self.login_button_label,
            login_button_icon=self.login_button_icon,
        )


class OAuth2RegistrationInfo(BaseModel):
    """Read-only projection of a registration used for listing and resolution."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    created_time: int | None = None
    title: str
    provider_name: str
    platforms: list[PlatformType] = Field(default_factory=list)
    login_button_label: str
    login_button_icon: str | None = None

    def allows_platform(self, platform: PlatformType | None) -> bool:
        """True when no platform filter applies or the platform is allowed."""
        return platform is None or not self.platforms or platform in self.platforms


class OAuth2ClientInfo(BaseModel):
    """Login option presented to an unauthenticated caller."""

    name: str = Field(..., description="Login button label")
    icon: str | None = Field(None, description="Login button icon")
    provider: str = Field(..., description="Identity provider name")
    url: str = Field(..., description="Authorization redirect path")


class Domain(BaseModel):
    """
    A domain web logins can come from.

    ``name`` is the host, or ``host:port`` when the port is not the default
    one for the scheme.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID | None = None
    tenant_id: UUID | None = None
    created_time: int | None = None
    name: str
    scheme: SchemeType = SchemeType.MIXED
    oauth2_enabled: bool = True
    propagate_to_edge: bool = False


class DomainInfo(Domain):
    """Domain with the ordered registrations bound to it."""

    oauth2_client_infos: list[OAuth2RegistrationInfo] = Field(default_factory=list)


class MobileApp(BaseModel):
    """A mobile application identified by its package name."""

    model_config = ConfigDict(frozen=True)

    id: UUID | None = None
    tenant_id: UUID | None = None
    created_time: int | None = None
    pkg_name: str
    app_secret: str | None = None
    platform: PlatformType | None = None
    oauth2_enabled: bool = True


class MobileAppInfo(MobileApp):
    """Mobile app with the ordered registrations bound to it."""

    oauth2_client_infos: list[OAuth2RegistrationInfo] = Field(default_factory=list)


@dataclass(frozen=True)
class DomainOAuth2Registration:
    """
    Binding of a registration to a domain.

    Attributes:
        domain_id: Bound domain
        registration_id: Bound registration
        position: Display order within the domain
    """

    domain_id: UUID
    registration_id: UUID
    position: int = 0


@dataclass(frozen=True)
class MobileAppOAuth2Registration:
    """
    Binding of a registration to a mobile application.

    Attributes:
        mobile_app_id: Bound mobile application
        registration_id: Bound registration
        position: Display order within the application
    """

    mobile_app_id: UUID
    registration_id: UUID
    position: int = 0
