"""
Domain layer - business logic and rules.

This package contains:
- Models: registrations, domains, mobile apps and their bindings
- Services: client resolution and access control
- Exceptions: Domain-specific exceptions
"""
