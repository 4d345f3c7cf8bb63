"""dega - multi-tenant content backend."""

__version__ = "0.1.0"
