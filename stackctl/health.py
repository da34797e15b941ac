"""
HTTP health probe for the gateway and backend services.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

# (label, path) pairs probed on the stack's public port
HEALTH_ENDPOINTS: List[Tuple[str, str]] = [
    ("Gateway", "/health"),
    ("Backend", "/api/health"),
]

DEFAULT_TIMEOUT = 5


@dataclass
class HealthCheckResult:
    """Outcome of probing one endpoint."""
    name: str
    url: str
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def label(self) -> str:
        return "OK" if self.ok else "FAIL"


def check_endpoint(name: str, url: str, session=None, timeout: float = DEFAULT_TIMEOUT) -> HealthCheckResult:
    """
    Probe a single endpoint with a GET request.

    Args:
        name: Label shown to the operator
        url: Full URL to request
        session: Optional requests session (module-level requests when None)
        timeout: Request timeout in seconds

    Returns:
        HealthCheckResult: ok is True only for a 2xx response
    """
    client = session or requests
    try:
        response = client.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logger.debug(f"{name} probe failed: {e}")
        return HealthCheckResult(name=name, url=url, ok=False, error=str(e))

    ok = 200 <= response.status_code < 300
    if not ok:
        logger.debug(f"{name} probe returned {response.status_code}")
    return HealthCheckResult(name=name, url=url, ok=ok, status_code=response.status_code)


def probe_endpoints(
    base_url: str,
    endpoints: List[Tuple[str, str]] = None,
    session=None,
    timeout: float = DEFAULT_TIMEOUT,
) -> List[HealthCheckResult]:
    """Probe every endpoint independently; one failure never skips the rest."""
    base_url = base_url.rstrip("/")
    return [
        check_endpoint(name, f"{base_url}{path}", session=session, timeout=timeout)
        for name, path in (endpoints or HEALTH_ENDPOINTS)
    ]
