"""
Static routing table for the API gateway.

Each route maps a public path template to an upstream path template on the
backend API. Templates use Starlette's path syntax: ``{name}`` matches one
path segment, ``{name:path}`` matches the rest of the path.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Pattern, Tuple

from starlette.routing import compile_path


@dataclass(frozen=True)
class GatewayRoute:
    """One public → upstream mapping."""
    downstream_path: str
    upstream_path: str
    methods: FrozenSet[str]
    requires_auth: bool = True
    _pattern: Pattern[str] = field(init=False, repr=False, compare=False)
    _upstream_format: str = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        pattern, _, _ = compile_path(self.downstream_path)
        _, upstream_format, _ = compile_path(self.upstream_path)
        object.__setattr__(self, "_pattern", pattern)
        object.__setattr__(self, "_upstream_format", upstream_format)

    def match(self, method: str, path: str) -> Optional[Dict[str, str]]:
        """Return the captured placeholders if method and path match, else None."""
        if method.upper() not in self.methods:
            return None
        found = self._pattern.match(path)
        if found is None:
            return None
        params = found.groupdict()
        # {name:path} also matches an empty remainder
        if not all(params.values()):
            return None
        return params

    def upstream_for(self, params: Dict[str, str]) -> str:
        """Build the upstream path from captured placeholders."""
        return self._upstream_format.format(**params)


ALL_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})

ROUTES: Tuple[GatewayRoute, ...] = (
    GatewayRoute("/auth/login", "/api/auth/login", frozenset({"POST"}), requires_auth=False),
    GatewayRoute("/patients", "/api/patients", frozenset({"GET", "POST"})),
    GatewayRoute("/patients/{everything:path}", "/api/patients/{everything:path}", ALL_METHODS),
)


def resolve(method: str, path: str) -> Optional[Tuple[GatewayRoute, str]]:
    """
    Find the first route matching a request.

    Returns:
        (route, upstream path), or None when no route matches
    """
    for route in ROUTES:
        params = route.match(method, path)
        if params is not None:
            return route, route.upstream_for(params)
    return None
