from __future__ import annotations

from hypothesis import HealthCheck, settings

# Hypothesis can get "flaky" on slow CI boxes. That is a performance
# healthcheck, not a functional bug: suppress it so the suite is stable.
settings.register_profile(
    "smartstock_stable",
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)

settings.load_profile("smartstock_stable")
