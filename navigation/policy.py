"""
Purpose: Central configuration for the live navigation loop.
What it does:

Stores the tunable thresholds for route refreshing:

REFRESH_THRESHOLD_M = 50
REFRESH_INTERVAL_S = 10

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass

from common.settings import env_float


@dataclass(frozen=True)
class NavigationPolicy:
    """
    Central configuration for route refreshing.
    """

    # --- Movement gate ---
    # Distance the user must move (great-circle, meters) before the loop
    # asks the routing service again. Smaller = fresher route, more API calls.
    refresh_threshold_m: float = 50.0

    # --- Timer ---
    # How often the loop re-reads the tracker and evaluates the gate.
    refresh_interval_s: float = 10.0

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.refresh_threshold_m < 0:
            raise ValueError("refresh_threshold_m must be >= 0")

        if self.refresh_interval_s <= 0:
            raise ValueError("refresh_interval_s must be > 0")


def default_navigation_policy() -> NavigationPolicy:
    """
    Convenience factory for the default policy.
    """
    p = NavigationPolicy()
    p.validate()
    return p


def navigation_policy_from_env() -> NavigationPolicy:
    """
    Reads REFRESH_THRESHOLD_M / REFRESH_INTERVAL_S, keeping defaults for anything unset.
    """
    p = NavigationPolicy(
        refresh_threshold_m=env_float("REFRESH_THRESHOLD_M", NavigationPolicy.refresh_threshold_m),
        refresh_interval_s=env_float("REFRESH_INTERVAL_S", NavigationPolicy.refresh_interval_s),
    )
    p.validate()
    return p
