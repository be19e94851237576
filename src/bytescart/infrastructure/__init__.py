"""
Infrastructure layer: persistence, caching and external providers.

This module provides:
- Repository interfaces and their SQLAlchemy implementations
- The tag-keyed read-through cache
- HTTP clients for the auth, payment and hosting providers

Repositories are built through InfrastructureFactory.
"""

from bytescart.infrastructure.factory import InfrastructureFactory

__all__ = ["InfrastructureFactory"]
