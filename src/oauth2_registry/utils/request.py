"""
Helpers deriving the network identity of a request behind proxies.

The public client discovery endpoint keys domains on ``host`` or
``host:port``; the port is only part of the key when it is not the default
one for the scheme.
"""

from uuid import UUID

from fastapi import Request

from oauth2_registry.domain.exceptions import RegistryValidationError

DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443}


def _first_header_value(request: Request, name: str) -> str | None:
    # Proxies chain values as "client, proxy1, proxy2"; the first one wins.
    value = request.headers.get(name)
    if not value:
        return None
    return value.split(",")[0].strip() or None


def get_scheme(request: Request) -> str:
    """
    Scheme of the original request.

    Args:
        request: Incoming request

    Returns:
        ``X-Forwarded-Proto`` when present, otherwise the URL scheme
    """
    forwarded_proto = _first_header_value(request, "x-forwarded-proto")
    if forwarded_proto:
        return forwarded_proto.lower()
    return request.url.scheme


def get_domain_name(request: Request) -> str:
    """
    Host name of the original request, without port.

    Args:
        request: Incoming request

    Returns:
        Lower-cased host from ``X-Forwarded-Host``, ``Host`` or the URL
    """
    host = (
        _first_header_value(request, "x-forwarded-host")
        or request.headers.get("host")
        or request.url.hostname
        or ""
    )
    if host.startswith("["):
        # IPv6 literal: keep the brackets, drop the port.
        return host[: host.index("]") + 1].lower() if "]" in host else host.lower()
    return host.split(":")[0].lower()


def get_port(request: Request) -> int:
    """
    Port of the original request.

    Resolution order: ``X-Forwarded-Port``, the default port of
    ``X-Forwarded-Proto``, the port of the URL, the default port of the
    URL scheme.

    Args:
        request: Incoming request

    Returns:
        Port number
    """
    forwarded_port = _first_header_value(request, "x-forwarded-port")
    if forwarded_port and forwarded_port.isdigit():
        return int(forwarded_port)

    forwarded_proto = _first_header_value(request, "x-forwarded-proto")
    if forwarded_proto and forwarded_proto.lower() in DEFAULT_PORTS:
        return DEFAULT_PORTS[forwarded_proto.lower()]

    if request.url.port is not None:
        return request.url.port

    return DEFAULT_PORTS.get(request.url.scheme, 80)


def get_domain_name_and_port(request: Request) -> str:
    """
    Domain key of the request.

    Args:
        request: Incoming request

    Returns:
        ``host`` when the port is the scheme default, ``host:port`` otherwise
    """
    domain_name = get_domain_name(request)
    port = get_port(request)
    if DEFAULT_PORTS.get(get_scheme(request)) == port:
        return domain_name
    return f"{domain_name}:{port}"


def parse_id_list(value: str | None) -> list[UUID] | None:
    """
    Parse a comma-separated list of ids from a query parameter.

    Args:
        value: ``id1,id2``; None when the parameter is absent

    Returns:
        Ids in the given order, or None when the parameter is absent

    Raises:
        RegistryValidationError: If an element is not a UUID
    """
    if value is None:
        return None

    ids = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        try:
            ids.append(UUID(item))
        except ValueError as e:
            raise RegistryValidationError(f"Invalid id [{item}]") from e
    return ids
