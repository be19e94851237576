"""
Domain layer - business rules.

This package contains:
- Custom domain validation, normalization and status lifecycle
- Services: contracts for external providers
"""
