"""Caller context extracted from public requests.

The service sits behind proxies, so the client IP is taken from forwarding
headers first. Both values are used for logging and rate limiting only.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from starlette.requests import Request

UNKNOWN = "unknown"
USER_AGENT_MAX_LENGTH = 255


@dataclass(frozen=True)
class RequestContext:
    correlation_id: UUID
    client_ip: str
    user_agent: str


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For entry, else X-Real-IP, else the socket peer."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("X-Real-IP", "").strip()
    if real_ip:
        return real_ip

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN


def get_user_agent(request: Request) -> str:
    user_agent = request.headers.get("User-Agent", "").strip()
    return user_agent[:USER_AGENT_MAX_LENGTH] if user_agent else UNKNOWN
