#Expose the live navigation pieces:
#Position tracking (tracker + location sources)
#Refresh policy and scheduler
#RouteRefreshLoop (the control loop) and MapSession (the "one object" entry point)

from .location_sources import TraceLocationSource
from .policy import NavigationPolicy, default_navigation_policy, navigation_policy_from_env
from .position_tracker import LocationSource, PositionTracker, SubscriptionHandle
from .refresh_loop import NavigationState, RouteRefreshLoop, RouteRequest
from .scheduling import ManualClock, Scheduler, SystemClock, TimerHandle
from .session import MapSession

__all__ = [
    "LocationSource",
    "ManualClock",
    "MapSession",
    "NavigationPolicy",
    "NavigationState",
    "PositionTracker",
    "RouteRefreshLoop",
    "RouteRequest",
    "Scheduler",
    "SubscriptionHandle",
    "SystemClock",
    "TimerHandle",
    "TraceLocationSource",
    "default_navigation_policy",
    "navigation_policy_from_env",
]
