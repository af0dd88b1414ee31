"""Mobile Application Request Models."""

from uuid import UUID

from pydantic import BaseModel, Field

from oauth2_registry.domain.models import MobileApp, PlatformType


class MobileAppRequest(BaseModel):
    """Request to create (no id) or update (with id) a mobile application."""

    id: UUID | None = Field(None, description="Mobile app id, set to update")
    pkg_name: str = Field(..., description="Application package name")
    app_secret: str | None = Field(
        None,
        description="Secret, generated on create and kept on update when absent",
    )
    platform: PlatformType | None = Field(
        None, description="Platform the application runs on"
    )
    oauth2_enabled: bool = Field(default=True, description="Offer OAuth2 login")

    def to_mobile_app(self) -> MobileApp:
        return MobileApp(**self.model_dump())
