"""
Models package.

Contains shared Pydantic models used across multiple modules.
Module-specific models are located in their respective module directories.
"""

from oauth2_registry.models.errors import ProblemDetail, ValidationErrorDetail
from oauth2_registry.models.shared import HealthResponse

__all__ = [
    "HealthResponse",
    # RFC 7807 Error models
    "ProblemDetail",
    "ValidationErrorDetail",
]
