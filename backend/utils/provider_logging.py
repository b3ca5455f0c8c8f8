"""
Provider logging utilities with Protocol + Mixin pattern.

Each storage provider defines its type and context format, the mixin provides
consistent log_info/log_warning/log_error methods.

Usage:
    class HostedProvider(ProviderLoggerMixin):
        provider_type = ProviderType.HOSTED

        def _log_context(self) -> str:
            return f"user={self.owner_id}"

    provider.log_info("Created job 5")  # [HostedProvider:user=abc] Created job 5
"""

import logging
from enum import Enum
from typing import Protocol

logger = logging.getLogger("providers")


class ProviderType(Enum):
    """Provider type enum for log prefix identification."""
    MOCK = "MockProvider"
    RELATIONAL = "RelationalProvider"
    HOSTED = "HostedProvider"


class ProviderLoggerProtocol(Protocol):
    """
    Protocol defining what classes using ProviderLoggerMixin must provide.

    mypy will error if a class uses the mixin but doesn't define
    provider_type or _log_context().
    """
    provider_type: ProviderType

    def _log_context(self) -> str:
        """Return context string like 'user=abc', or '' for none."""
        ...


class ProviderLoggerMixin:
    """
    Mixin providing log_info/log_warning/log_error methods.

    Log format: [ProviderType:context] message, or [ProviderType] message
    when the context is empty.
    """

    def _log_context(self) -> str:
        return ""

    def _log_prefix(self: ProviderLoggerProtocol) -> str:
        """Build log prefix from provider type and context."""
        context = self._log_context()
        if context:
            return f"[{self.provider_type.value}:{context}]"
        return f"[{self.provider_type.value}]"

    def log_info(self: ProviderLoggerProtocol, message: str) -> None:
        logger.info(f"{self._log_prefix()} {message}")

    def log_warning(self: ProviderLoggerProtocol, message: str) -> None:
        logger.warning(f"{self._log_prefix()} {message}")

    def log_error(self: ProviderLoggerProtocol, message: str) -> None:
        logger.error(f"{self._log_prefix()} {message}")
