"""
API v1 endpoints.

Route prefix constants for consistent API versioning.
"""

# Base API prefix, the registry is served at the root of its host
API_V1_PREFIX: str = ""

# Module-specific prefixes
OAUTH2_PREFIX: str = f"{API_V1_PREFIX}/oauth2"
DOMAIN_PREFIX: str = f"{API_V1_PREFIX}/domain"
MOBILE_APP_PREFIX: str = f"{API_V1_PREFIX}/mobile/app"

__all__ = [
    "API_V1_PREFIX",
    "OAUTH2_PREFIX",
    "DOMAIN_PREFIX",
    "MOBILE_APP_PREFIX",
]
