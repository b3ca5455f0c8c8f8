"""
Provider selection policy.

Explicit state machine over {mock, relational, hosted} x {authenticated, anonymous}:

    authenticated                  -> effective provider is hosted; switching
                                      to mock/relational is refused
    anonymous                      -> stored preference, else configured default
    sign in                        -> hosted, authenticated
    sign out while hosted active   -> mock, anonymous

Which providers can be selected at all depends on the deployment:

    DATA_PROVIDER=hosted           -> mock, hosted
    DATA_PROVIDER=relational       -> mock, relational
    unset                          -> mock, relational, hosted

All functions are pure; ProviderSession applies them and persists the result.
"""

from dataclasses import dataclass, replace
from typing import Optional

from errors import ProviderSelectionError
from models.enums import ProviderKind


@dataclass(frozen=True)
class ProviderState:
    provider: ProviderKind
    authenticated: bool = False

    @property
    def effective_provider(self) -> ProviderKind:
        """Provider requests are served by in this state."""
        if self.authenticated:
            return ProviderKind.HOSTED
        return self.provider


def selectable_providers(deployment: Optional[ProviderKind]) -> list[ProviderKind]:
    if deployment is None:
        return [ProviderKind.MOCK, ProviderKind.RELATIONAL, ProviderKind.HOSTED]
    if deployment == ProviderKind.MOCK:
        return [ProviderKind.MOCK]
    return [ProviderKind.MOCK, deployment]


def initial_state(
    default: ProviderKind,
    deployment: Optional[ProviderKind],
    preference: Optional[ProviderKind] = None,
) -> ProviderState:
    """
    Anonymous state at startup.

    A stored preference outside the selectable set (e.g. left over from a
    different deployment) is ignored in favour of the default.
    """
    allowed = selectable_providers(deployment)
    if preference is not None and preference in allowed:
        return ProviderState(provider=preference)
    if default in allowed:
        return ProviderState(provider=default)
    return ProviderState(provider=ProviderKind.MOCK)


def request_provider(
    state: ProviderState,
    requested: ProviderKind,
    deployment: Optional[ProviderKind],
) -> ProviderState:
    """
    Switch provider on user request.

    Raises:
        ProviderSelectionError: If signed in and requesting a non-hosted
            provider, or if the provider is not selectable in this deployment
    """
    if state.authenticated and requested != ProviderKind.HOSTED:
        raise ProviderSelectionError(
            f"Cannot switch to '{requested.value}' while signed in; sign out first"
        )
    if requested not in selectable_providers(deployment):
        raise ProviderSelectionError(
            f"Provider '{requested.value}' is not available in this deployment"
        )
    return replace(state, provider=requested)


def on_sign_in(state: ProviderState) -> ProviderState:
    return ProviderState(provider=ProviderKind.HOSTED, authenticated=True)


def on_sign_out(state: ProviderState) -> ProviderState:
    if state.provider == ProviderKind.HOSTED:
        return ProviderState(provider=ProviderKind.MOCK, authenticated=False)
    return replace(state, authenticated=False)
