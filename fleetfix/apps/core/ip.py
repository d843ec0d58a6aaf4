"""Client IP address utilities."""

from __future__ import annotations

from django.http import HttpRequest
from ipware import get_client_ip


def get_real_ip(request: HttpRequest) -> str | None:
    """
    Extract the real client IP address from a request.

    Uses django-ipware so reports submitted through a reverse proxy are
    attributed to the operator's device, not the proxy.

    Returns None if the IP cannot be determined.
    """
    ip, _ = get_client_ip(request)
    return ip
