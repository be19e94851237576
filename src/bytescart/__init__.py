"""ByteScart storefront and admin backend."""

__version__ = "1.0.0"
