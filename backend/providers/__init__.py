from providers.base import StorageProvider
from providers.registry import resolve_provider

__all__ = ["StorageProvider", "resolve_provider"]
