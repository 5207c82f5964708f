"""CORS policy, driven by configuration.

Each route names a policy. ``trip_parsing`` echoes the caller's origin
when it is on the allow-list (else the first allowed origin) and allows
credentials; ``default`` answers with the configured wildcard list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from ..config import CorsConfig

TRIP_PARSING = "trip_parsing"
DEFAULT = "default"


@dataclass(frozen=True)
class CorsPolicy:
    """Headers to attach for one family of routes."""

    allowed_origins: tuple[str, ...]
    allow_headers: str
    allow_methods: str = "POST, OPTIONS"

    @property
    def is_wildcard(self) -> bool:
        return "*" in self.allowed_origins

    def headers_for(self, origin: Optional[str]) -> dict[str, str]:
        if self.is_wildcard:
            return {
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Headers": self.allow_headers,
            }
        allowed = (
            origin
            if origin and origin in self.allowed_origins
            else self.allowed_origins[0]
        )
        return {
            "Access-Control-Allow-Origin": allowed,
            "Access-Control-Allow-Headers": self.allow_headers,
            "Access-Control-Allow-Methods": self.allow_methods,
            "Access-Control-Allow-Credentials": "true",
            "Vary": "Origin",
        }


def build_policies(config: CorsConfig) -> dict[str, CorsPolicy]:
    return {
        TRIP_PARSING: CorsPolicy(
            allowed_origins=tuple(config.allowed_origins) or ("*",),
            allow_headers=config.allow_headers,
        ),
        DEFAULT: CorsPolicy(
            allowed_origins=tuple(config.default_origins) or ("*",),
            allow_headers=config.allow_headers,
        ),
    }


class CorsPolicyMiddleware(BaseHTTPMiddleware):
    """Answer preflights and decorate responses for the mapped routes.

    Paths not in ``route_policies`` are left untouched.
    """

    def __init__(
        self,
        app: ASGIApp,
        policies: Mapping[str, CorsPolicy],
        route_policies: Mapping[str, str],
    ) -> None:
        super().__init__(app)
        self.policies = dict(policies)
        self.route_policies = dict(route_policies)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        policy_name = self.route_policies.get(request.url.path.rstrip("/") or "/")
        if policy_name is None:
            return await call_next(request)

        headers = self.policies[policy_name].headers_for(request.headers.get("origin"))
        if request.method == "OPTIONS":
            return PlainTextResponse("ok", headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
