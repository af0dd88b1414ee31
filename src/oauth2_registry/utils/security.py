"""
Security utilities for administrative bearer tokens.

Tokens are itsdangerous signatures of the caller identity:
- user id
- tenant id
- granted authority

They carry a timestamp and are rejected once older than
``settings.access_token_max_age`` seconds.
"""

from typing import Any
from uuid import UUID

from itsdangerous import BadSignature, URLSafeTimedSerializer

from oauth2_registry.config import get_settings
from oauth2_registry.domain.services.access_control import Authority, SecurityUser

TOKEN_SALT = "oauth2-registry-access-token"


def create_serializer() -> URLSafeTimedSerializer:
    """
    Create a URLSafeTimedSerializer with the application secret key.

    Returns:
        URLSafeTimedSerializer: Configured serializer for signing/verifying tokens
    """
    settings = get_settings()
    return URLSafeTimedSerializer(settings.secret_key, salt=TOKEN_SALT)


def issue_access_token(user: SecurityUser) -> str:
    """
    Sign the identity of a caller.

    Args:
        user: Caller to encode

    Returns:
        str: Signed token (URL-safe base64 string)

    Example:
        >>> token = issue_access_token(
        ...     SecurityUser("admin", tenant_id, Authority.TENANT_ADMIN)
        ... )
    """
    serializer = create_serializer()
    return serializer.dumps(
        {
            "user_id": user.user_id,
            "tenant_id": str(user.tenant_id),
            "authority": user.authority.value,
        }
    )


def verify_access_token(token: str, max_age: int | None = None) -> SecurityUser | None:
    """
    Verify a token and rebuild the caller it was issued for.

    Args:
        token: Token from issue_access_token()
        max_age: Maximum token age in seconds (default: settings.access_token_max_age)

    Returns:
        SecurityUser | None: The caller if valid, None if tampered, expired or malformed
    """
    if max_age is None:
        max_age = get_settings().access_token_max_age

    serializer = create_serializer()
    try:
        data: dict[str, Any] = serializer.loads(token, max_age=max_age)
    except BadSignature:
        return None

    try:
        return SecurityUser(
            user_id=str(data["user_id"]),
            tenant_id=UUID(data["tenant_id"]),
            authority=Authority(data["authority"]),
        )
    except (KeyError, TypeError, ValueError):
        return None
