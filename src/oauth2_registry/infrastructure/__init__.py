"""
Infrastructure abstraction layer for the OAuth2 client registry.

This module provides repository interfaces and implementations for:
- OAuth2 client registrations
- Domains and their registration bindings
- Mobile applications and their registration bindings

Supports multiple providers via factory pattern:
- local: File-based storage for development
- aws: DynamoDB tables
"""

from oauth2_registry.infrastructure.factory import InfrastructureFactory

__all__ = ["InfrastructureFactory"]
