"""
Unit tests for security utilities.

Tests access token issuing and verification.
"""

from uuid import uuid4

from itsdangerous import URLSafeTimedSerializer

from oauth2_registry.domain.services import Authority, SecurityUser
from oauth2_registry.utils.security import (
    TOKEN_SALT,
    issue_access_token,
    verify_access_token,
)


def test_issue_and_verify_access_token():
    """Test a freshly issued token yields the same caller."""
    # Arrange
    user = SecurityUser("admin@example.com", uuid4(), Authority.TENANT_ADMIN)

    # Act
    token = issue_access_token(user)
    verified = verify_access_token(token)

    # Assert
    assert isinstance(token, str)
    assert verified == user


def test_verify_tampered_token():
    """Test a modified token is rejected."""
    token = issue_access_token(SecurityUser("admin", uuid4(), Authority.SYS_ADMIN))

    assert verify_access_token(token[:-2] + "xx") is None


def test_verify_garbage_token():
    assert verify_access_token("not-a-token") is None


def test_verify_token_signed_with_other_key():
    """Test a token signed with another secret is rejected."""
    foreign = URLSafeTimedSerializer("another-secret", salt=TOKEN_SALT).dumps(
        {"user_id": "x", "tenant_id": str(uuid4()), "authority": "SYS_ADMIN"}
    )

    assert verify_access_token(foreign) is None


def test_verify_expired_token():
    """Test max_age is enforced."""
    token = issue_access_token(SecurityUser("admin", uuid4(), Authority.SYS_ADMIN))

    assert verify_access_token(token, max_age=-1) is None


def test_verify_token_with_unknown_authority():
    """Test a correctly signed token with a bad payload is rejected."""
    from oauth2_registry.utils.security import create_serializer

    token = create_serializer().dumps(
        {"user_id": "x", "tenant_id": str(uuid4()), "authority": "ROOT"}
    )

    assert verify_access_token(token) is None
