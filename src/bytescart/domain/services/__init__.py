"""
Domain services - contracts for external providers.

Contains abstract base classes for the auth provider, the payment processor
and the custom domain hosting provider.
"""
