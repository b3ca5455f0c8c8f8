"""
Process-wide provider session.

Holds the provider preference shared by anonymous callers, persists it and
publishes every change to subscribers (the client cache uses this to
invalidate reads).

Signed-in state is never stored here. Whether a caller is authenticated is
decided per request from its Bearer token, so one caller signing in does
not change the provider other callers get.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

from config.settings import settings
from errors import ConfigurationError
from models.enums import ProviderKind
from session.policy import (
    ProviderState,
    initial_state,
    on_sign_in,
    on_sign_out,
    request_provider,
    selectable_providers,
)
from session.preferences import PreferenceStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderChange:
    previous: ProviderKind
    current: ProviderKind


Listener = Callable[[ProviderChange], None]


class ProviderSession:
    def __init__(
        self,
        store: PreferenceStore,
        default: ProviderKind = ProviderKind.MOCK,
        deployment: Optional[ProviderKind] = None,
    ):
        self._store = store
        self.deployment = deployment
        self.default = default
        self._state = initial_state(default, deployment, store.load())
        self._listeners: list[Listener] = []
        logger.info(f"Provider session started with '{self._state.provider.value}'")

    @property
    def state(self) -> ProviderState:
        return self._state

    @property
    def selectable(self) -> list[ProviderKind]:
        return selectable_providers(self.deployment)

    def resolve(self, authenticated: bool) -> ProviderKind:
        """Effective provider for a request with or without a verified identity."""
        if authenticated:
            return ProviderKind.HOSTED
        return self._state.provider

    def select(self, requested: ProviderKind, authenticated: bool = False) -> ProviderState:
        """
        Raises:
            ProviderSelectionError: If the policy refuses the switch
        """
        state = ProviderState(provider=self._state.provider, authenticated=authenticated)
        new_state = request_provider(state, requested, self.deployment)
        if authenticated:
            # Signed-in callers are pinned to hosted; the shared preference stays as is
            return new_state
        return self._transition(new_state)

    def sign_in(self) -> ProviderState:
        """State of the caller that just signed in. The shared preference is not touched."""
        return on_sign_in(self._state)

    def sign_out(self) -> ProviderState:
        return self._transition(on_sign_out(self._state))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, new_state: ProviderState) -> ProviderState:
        previous = self._state
        self._state = new_state
        if new_state.provider != previous.provider:
            self._store.save(new_state.provider)
            logger.info(f"Provider changed: {previous.provider.value} -> {new_state.provider.value}")
            self._publish(ProviderChange(previous=previous.provider, current=new_state.provider))
        return new_state

    def _publish(self, change: ProviderChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception as e:
                logger.error(f"Provider change listener {listener!r} failed: {e}")


def _configured_kind(value: Optional[str], setting_name: str) -> Optional[ProviderKind]:
    if not value:
        return None
    try:
        return ProviderKind.from_string(value)
    except ValueError as e:
        raise ConfigurationError(f"{setting_name}: {e}")


@lru_cache(maxsize=1)
def get_provider_session() -> ProviderSession:
    """Shared session built from settings (FastAPI dependency)."""
    deployment = _configured_kind(settings.get_deployment_provider(), "DATA_PROVIDER")
    default = _configured_kind(settings.get_default_provider(), "DEFAULT_PROVIDER")
    return ProviderSession(
        store=PreferenceStore(settings.PROVIDER_PREFERENCE_FILE),
        default=default or ProviderKind.MOCK,
        deployment=deployment,
    )
