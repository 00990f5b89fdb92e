import pytest

from modules.auth.state import AuthPhase, LOADING_PHASES, TRANSITIONS, can_transition


class TestTransitions:
    def test_every_phase_has_an_entry(self):
        assert set(TRANSITIONS) == set(AuthPhase)

    @pytest.mark.parametrize(
        "current,target",
        [
            (AuthPhase.BOOTSTRAPPING, AuthPhase.UNAUTHENTICATED),
            (AuthPhase.BOOTSTRAPPING, AuthPhase.LOADING_PROFILE),
            (AuthPhase.UNAUTHENTICATED, AuthPhase.SIGNING_IN),
            (AuthPhase.SIGNING_IN, AuthPhase.AUTHENTICATED),
            (AuthPhase.SIGNING_IN, AuthPhase.SIGNING_IN),
            (AuthPhase.LOADING_PROFILE, AuthPhase.AUTHENTICATED),
            (AuthPhase.AUTHENTICATED, AuthPhase.LOADING_PROFILE),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (AuthPhase.UNAUTHENTICATED, AuthPhase.AUTHENTICATED),
            (AuthPhase.SIGNING_IN, AuthPhase.LOADING_PROFILE),
            (AuthPhase.AUTHENTICATED, AuthPhase.BOOTSTRAPPING),
            (AuthPhase.BOOTSTRAPPING, AuthPhase.AUTHENTICATED),
        ],
    )
    def test_forbidden(self, current, target):
        assert not can_transition(current, target)

    def test_nothing_returns_to_bootstrapping(self):
        for targets in TRANSITIONS.values():
            assert AuthPhase.BOOTSTRAPPING not in targets

    def test_loading_phases(self):
        assert LOADING_PHASES == {AuthPhase.BOOTSTRAPPING, AuthPhase.LOADING_PROFILE}
