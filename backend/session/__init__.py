from session.context import ProviderChange, ProviderSession, get_provider_session
from session.policy import ProviderState, selectable_providers
from session.preferences import PreferenceStore

__all__ = [
    "ProviderChange",
    "ProviderSession",
    "ProviderState",
    "PreferenceStore",
    "get_provider_session",
    "selectable_providers",
]
