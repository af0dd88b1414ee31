"""Domain Request Models."""

from uuid import UUID

from pydantic import BaseModel, Field

from oauth2_registry.domain.models import Domain, SchemeType


class DomainRequest(BaseModel):
    """Request to create (no id) or update (with id) a domain."""

    id: UUID | None = Field(None, description="Domain id, set to update")
    name: str = Field(..., description="Host, or host:port for a non-default port")
    scheme: SchemeType = Field(
        default=SchemeType.MIXED, description="Accepted request scheme"
    )
    oauth2_enabled: bool = Field(default=True, description="Offer OAuth2 login")
    propagate_to_edge: bool = Field(
        default=False, description="Propagate the domain to edge instances"
    )

    def to_domain(self) -> Domain:
        return Domain(**self.model_dump())
