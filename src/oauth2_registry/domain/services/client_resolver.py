"""
OAuth2 client resolution.

Given the network identity of an unauthenticated request (host[:port],
scheme, optional mobile package name, optional platform hint) and an
already-loaded snapshot of the registry, produce the ordered list of
registrations whose login buttons the caller should see.

Resolution is a pure read: it never mutates the snapshot and never raises.
Unknown domains, unknown packages and unknown platform names all degrade
to "no filter" or "no results" so the public endpoint does not reveal the
shape of the configuration.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import UUID

from oauth2_registry.domain.models import (
    Domain,
    DomainOAuth2Registration,
    MobileApp,
    MobileAppOAuth2Registration,
    OAuth2RegistrationInfo,
    PlatformType,
)


def _creation_order(entity: Domain | MobileApp) -> tuple[int, str]:
    return (entity.created_time or 0, str(entity.id))


@dataclass(frozen=True)
class RegistrationSnapshot:
    """
    Immutable view of the registry used for one resolution pass.

    Attributes:
        registrations: Registration infos keyed by id
        domains: Domains in creation order
        domain_registrations: Domain bindings
        mobile_apps: Mobile applications in creation order
        mobile_app_registrations: Mobile app bindings
    """

    registrations: dict[UUID, OAuth2RegistrationInfo] = field(default_factory=dict)
    domains: tuple[Domain, ...] = ()
    domain_registrations: tuple[DomainOAuth2Registration, ...] = ()
    mobile_apps: tuple[MobileApp, ...] = ()
    mobile_app_registrations: tuple[MobileAppOAuth2Registration, ...] = ()

    @classmethod
    def build(
        cls,
        registrations: Iterable[OAuth2RegistrationInfo],
        domains: Iterable[Domain],
        domain_registrations: Iterable[DomainOAuth2Registration],
        mobile_apps: Iterable[MobileApp],
        mobile_app_registrations: Iterable[MobileAppOAuth2Registration],
    ) -> "RegistrationSnapshot":
        """Build a snapshot, ordering domains and apps by creation time."""
        return cls(
            registrations={info.id: info for info in registrations},
            domains=tuple(sorted(domains, key=_creation_order)),
            domain_registrations=tuple(domain_registrations),
            mobile_apps=tuple(sorted(mobile_apps, key=_creation_order)),
            mobile_app_registrations=tuple(mobile_app_registrations),
        )


class OAuth2ClientResolver:
    """Stateless lookup of OAuth2 registrations over a snapshot."""

    def __init__(self, snapshot: RegistrationSnapshot) -> None:
        self.snapshot = snapshot

    def resolve(
        self,
        pkg_name: str | None,
        domain_and_port: str | None,
        platform: PlatformType | str | None = None,
        scheme: str | None = None,
    ) -> list[OAuth2RegistrationInfo]:
        """
        Dispatch to package or domain resolution.

        A non-empty package name always wins: the domain is not looked at,
        even when the package matches nothing.

        Args:
            pkg_name: Mobile application package name
            domain_and_port: Request host, with the port when not default
            platform: Platform hint (enum, name or None)
            scheme: Request scheme

        Returns:
            Ordered registration infos, possibly empty
        """
        if pkg_name:
            return self.resolve_for_mobile_package(pkg_name, platform)
        return self.resolve_for_domain(domain_and_port or "", platform, scheme)

    def resolve_for_domain(
        self,
        domain_and_port: str,
        platform: PlatformType | str | None = None,
        scheme: str | None = None,
    ) -> list[OAuth2RegistrationInfo]:
        """
        Registrations bound to an OAuth2-enabled domain.

        Args:
            domain_and_port: ``host`` or ``host:port`` (compared case-insensitively)
            platform: Platform hint; unknown values apply no filter
            scheme: Request scheme; domains must accept it

        Returns:
            Ordered registration infos, possibly empty
        """
        wanted = (domain_and_port or "").strip().lower()
        if not wanted:
            return []

        domain_ids = [
            domain.id
            for domain in self.snapshot.domains
            if domain.oauth2_enabled
            and domain.name.strip().lower() == wanted
            and domain.scheme.accepts(scheme)
        ]
        bindings = self._ordered_bindings(
            domain_ids,
            self.snapshot.domain_registrations,
            lambda binding: binding.domain_id,
        )
        return self._collect(bindings, PlatformType.parse(platform))

    def resolve_for_mobile_package(
        self,
        pkg_name: str,
        platform: PlatformType | str | None = None,
    ) -> list[OAuth2RegistrationInfo]:
        """
        Registrations bound to an OAuth2-enabled mobile application.

        An application that declares its own platform contributes nothing
        when a different, recognized platform is requested.

        Args:
            pkg_name: Exact package name
            platform: Platform hint; unknown values apply no filter

        Returns:
            Ordered registration infos, possibly empty
        """
        if not pkg_name:
            return []

        platform_type = PlatformType.parse(platform)
        app_ids = [
            app.id
            for app in self.snapshot.mobile_apps
            if app.oauth2_enabled
            and app.pkg_name == pkg_name
            and (
                platform_type is None
                or app.platform is None
                or app.platform == platform_type
            )
        ]
        bindings = self._ordered_bindings(
            app_ids,
            self.snapshot.mobile_app_registrations,
            lambda binding: binding.mobile_app_id,
        )
        return self._collect(bindings, platform_type)

    @staticmethod
    def _ordered_bindings(owner_ids, bindings, owner_of) -> list[UUID]:
        # Owners in creation order, bindings by position within each owner.
        ordered: list[UUID] = []
        for owner_id in owner_ids:
            owned = sorted(
                (binding for binding in bindings if owner_of(binding) == owner_id),
                key=lambda binding: binding.position,
            )
            ordered.extend(binding.registration_id for binding in owned)
        return ordered

    def _collect(
        self, registration_ids: list[UUID], platform: PlatformType | None
    ) -> list[OAuth2RegistrationInfo]:
        seen: set[UUID] = set()
        result: list[OAuth2RegistrationInfo] = []
        for registration_id in registration_ids:
            if registration_id in seen:
                continue
            seen.add(registration_id)
            info = self.snapshot.registrations.get(registration_id)
            if info is not None and info.allows_platform(platform):
                result.append(info)
        return result
