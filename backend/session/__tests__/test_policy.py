"""
Provider selection policy (pure state transitions).

Run: python3 -m pytest session/__tests__/test_policy.py -v
"""
import pytest

from errors import ProviderSelectionError
from models.enums import ProviderKind
from session.policy import (
    ProviderState,
    initial_state,
    on_sign_in,
    on_sign_out,
    request_provider,
    selectable_providers,
)

MOCK, RELATIONAL, HOSTED = ProviderKind.MOCK, ProviderKind.RELATIONAL, ProviderKind.HOSTED


class TestSelectableProviders:

    def test_unconfigured_deployment_allows_all(self):
        assert selectable_providers(None) == [MOCK, RELATIONAL, HOSTED]

    def test_hosted_deployment(self):
        assert selectable_providers(HOSTED) == [MOCK, HOSTED]

    def test_relational_deployment(self):
        assert selectable_providers(RELATIONAL) == [MOCK, RELATIONAL]


class TestInitialState:

    def test_default_when_no_preference(self):
        assert initial_state(RELATIONAL, None) == ProviderState(provider=RELATIONAL)

    def test_stored_preference_wins(self):
        assert initial_state(MOCK, None, preference=HOSTED).provider == HOSTED

    def test_preference_outside_deployment_falls_back_to_default(self):
        state = initial_state(MOCK, RELATIONAL, preference=HOSTED)
        assert state.provider == MOCK

    def test_default_outside_deployment_falls_back_to_mock(self):
        assert initial_state(HOSTED, RELATIONAL).provider == MOCK

    def test_starts_anonymous(self):
        assert initial_state(MOCK, None, preference=HOSTED).authenticated is False


class TestRequestProvider:

    def test_anonymous_switch(self):
        state = request_provider(ProviderState(MOCK), RELATIONAL, None)
        assert state == ProviderState(RELATIONAL)

    @pytest.mark.parametrize("requested", [MOCK, RELATIONAL])
    def test_authenticated_cannot_leave_hosted(self, requested):
        with pytest.raises(ProviderSelectionError, match="sign out first"):
            request_provider(ProviderState(HOSTED, authenticated=True), requested, None)

    def test_authenticated_may_request_hosted(self):
        state = ProviderState(HOSTED, authenticated=True)
        assert request_provider(state, HOSTED, None) == state

    def test_not_selectable_in_deployment(self):
        with pytest.raises(ProviderSelectionError, match="not available"):
            request_provider(ProviderState(MOCK), RELATIONAL, HOSTED)


class TestSignInOut:

    @pytest.mark.parametrize("provider", [MOCK, RELATIONAL, HOSTED])
    def test_sign_in_selects_hosted(self, provider):
        assert on_sign_in(ProviderState(provider)) == ProviderState(HOSTED, authenticated=True)

    def test_sign_out_from_hosted_selects_mock(self):
        assert on_sign_out(ProviderState(HOSTED, authenticated=True)) == ProviderState(MOCK)

    def test_sign_out_keeps_non_hosted_provider(self):
        assert on_sign_out(ProviderState(RELATIONAL, authenticated=True)) == ProviderState(RELATIONAL)

    def test_effective_provider(self):
        assert ProviderState(RELATIONAL, authenticated=True).effective_provider == HOSTED
        assert ProviderState(RELATIONAL).effective_provider == RELATIONAL
