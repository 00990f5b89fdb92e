"""
Auth state machine phases and their legal transitions.

SIGNING_IN is the "manual sign-in in progress" state. It lasts for the whole
manual flow (credential check, blocked-worker gate and profile load), and
ambient session events consult it before acting.
"""

from enum import Enum


class AuthPhase(str, Enum):
    BOOTSTRAPPING = "bootstrapping"
    UNAUTHENTICATED = "unauthenticated"
    SIGNING_IN = "signing_in"
    LOADING_PROFILE = "loading_profile"
    AUTHENTICATED = "authenticated"


TRANSITIONS: dict[AuthPhase, frozenset[AuthPhase]] = {
    AuthPhase.BOOTSTRAPPING: frozenset({
        AuthPhase.UNAUTHENTICATED,
        AuthPhase.SIGNING_IN,
        AuthPhase.LOADING_PROFILE,
    }),
    AuthPhase.UNAUTHENTICATED: frozenset({
        AuthPhase.UNAUTHENTICATED,
        AuthPhase.SIGNING_IN,
        AuthPhase.LOADING_PROFILE,
    }),
    # Two racing manual sign-ins: the later one supersedes the earlier
    AuthPhase.SIGNING_IN: frozenset({
        AuthPhase.SIGNING_IN,
        AuthPhase.UNAUTHENTICATED,
        AuthPhase.AUTHENTICATED,
    }),
    AuthPhase.LOADING_PROFILE: frozenset({
        AuthPhase.LOADING_PROFILE,
        AuthPhase.UNAUTHENTICATED,
        AuthPhase.SIGNING_IN,
        AuthPhase.AUTHENTICATED,
    }),
    AuthPhase.AUTHENTICATED: frozenset({
        AuthPhase.UNAUTHENTICATED,
        AuthPhase.SIGNING_IN,
        AuthPhase.LOADING_PROFILE,
    }),
}

# Phases in which navigation decisions wait for a cached profile
LOADING_PHASES = frozenset({AuthPhase.BOOTSTRAPPING, AuthPhase.LOADING_PROFILE})


def can_transition(current: AuthPhase, target: AuthPhase) -> bool:
    return target in TRANSITIONS[current]
