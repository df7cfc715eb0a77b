"""Test-only query flags that skip admission control.

``_bypass_rate_limit=true`` skips the rate limiter and
``_bypass_random_error=true`` skips fault injection. They are honored only
when ``APP_BYPASS_FLAGS_ENABLED`` is set: anyone who can reach the API can
send them, so production deployments must leave them off.
"""

from __future__ import annotations

from fastapi import Request

RATE_LIMIT_BYPASS_PARAM = "_bypass_rate_limit"
FAULT_INJECTION_BYPASS_PARAM = "_bypass_random_error"


def bypass_requested(request: Request, param: str) -> bool:
    """Return True if the bypass flag is present, set to "true", and allowed.

    Args:
        request: Incoming request.
        param: One of the reserved bypass parameter names.
    """
    if not request.app.state.app_settings.bypass_flags_enabled:
        return False
    return request.query_params.get(param) == "true"
