#Purpose: ETA estimation policy.
#Converts routing outputs (upstream duration in seconds) into the whole minutes
#shown next to the route.
#Rounds up so a route with any remaining travel time never reads "0 min".

import math


def eta_minutes(duration_s: float) -> int:
    """
    Whole minutes for an upstream duration in seconds, rounded up.

    125 s -> 3 min, 60 s -> 1 min, 0 s -> 0 min.
    """
    if duration_s is None or not math.isfinite(duration_s) or duration_s < 0:
        raise ValueError(f"duration must be a non-negative number of seconds, got {duration_s!r}")
    return math.ceil(duration_s / 60)
