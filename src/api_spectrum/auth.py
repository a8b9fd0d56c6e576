"""Detects authentication requirements from route middleware and configuration."""

import fnmatch
import logging

from pydantic import BaseModel

from api_spectrum.analysis.base import RouteDescriptor
from api_spectrum.config import AuthenticationConfig
from api_spectrum.generator.security import AuthenticationScheme, RouteAuthentication

logger = logging.getLogger(__name__)

SANCTUM = AuthenticationScheme(
    name="sanctumAuth", type="http", scheme="bearer", bearerFormat="JWT",
    description="Laravel Sanctum token authentication",
)
PASSPORT = AuthenticationScheme(
    name="passportAuth",
    type="oauth2",
    flows={
        "authorizationCode": {
            "authorizationUrl": "/oauth/authorize",
            "tokenUrl": "/oauth/token",
            "scopes": {},
        },
        "password": {"tokenUrl": "/oauth/token", "scopes": {}},
    },
    description="Laravel Passport OAuth2 authentication",
)
API_TOKEN = AuthenticationScheme(
    name="apiAuth", type="http", scheme="bearer", bearerFormat="API Token",
    description="API token authentication",
)
BASIC = AuthenticationScheme(
    name="basicAuth", type="http", scheme="basic", description="Basic HTTP authentication",
)
BEARER = AuthenticationScheme(
    name="bearerAuth", type="http", scheme="bearer", bearerFormat="JWT",
    description="Bearer token authentication",
)
API_KEY = AuthenticationScheme(
    name="apiKeyAuth", type="apiKey", **{"in": "header"}, headerName="X-API-Key",
    description="API Key authentication",
)
CUSTOM_TOKEN = AuthenticationScheme(
    name="customTokenAuth", type="apiKey", **{"in": "header"}, headerName="Authorization-Token",
    description="Custom authorization token",
)

MIDDLEWARE_SCHEMES = {
    "auth:sanctum": SANCTUM,
    "passport": PASSPORT,
    "auth:api": API_TOKEN,
    "auth.basic": BASIC,
    "auth": BEARER,
}

KNOWN_GUARDS = {"sanctum": SANCTUM, "api": API_TOKEN, "web": BEARER}

# substring of a middleware name -> scheme
API_KEY_PATTERNS = {
    "api-key": API_KEY,
    "api_key": API_KEY,
    "authorization-token": CUSTOM_TOKEN,
}


def route_scopes(middleware: list[str]) -> list[str]:
    """OAuth2 scopes from Passport's ``scope:a,b`` and ``scopes:a,b`` middleware."""
    scopes = []
    for name in middleware:
        prefix, _, values = name.partition(":")
        if prefix in ("scope", "scopes") and values:
            scopes.extend(v.strip() for v in values.split(",") if v.strip())
    return scopes


class AuthenticationDetector:
    """Maps middleware names to authentication schemes.

    Custom schemes are held per instance, so two generators never see each
    other's registrations.
    """

    def __init__(self, custom_schemes: dict[str, AuthenticationScheme] | None = None):
        self.schemes = dict(MIDDLEWARE_SCHEMES)
        self.schemes.update(custom_schemes or {})

    def add_custom_scheme(self, middleware: str, scheme: AuthenticationScheme) -> None:
        self.schemes[middleware] = scheme

    def detect_from_middleware(self, middleware: list[str]) -> AuthenticationScheme | None:
        for name in middleware:
            if name in self.schemes:
                return self.schemes[name]
            if name.startswith("auth:"):
                return self.detect_from_guard(name[len("auth:"):])
            for pattern, scheme in API_KEY_PATTERNS.items():
                if pattern in name:
                    return scheme
        return None

    def detect_from_guard(self, guard: str) -> AuthenticationScheme:
        if guard in KNOWN_GUARDS:
            return KNOWN_GUARDS[guard]
        return AuthenticationScheme(
            name=f"{guard}Auth",
            type="http",
            scheme="bearer",
            bearerFormat="JWT",
            description=f"Authentication using {guard} guard",
        )

    def detect_multiple_schemes(self, middleware: list[str]) -> list[AuthenticationScheme]:
        schemes = []
        seen = set()
        for name in middleware:
            scheme = self.detect_from_middleware([name])
            if scheme is not None and scheme.name not in seen:
                schemes.append(scheme)
                seen.add(scheme.name)
        return schemes


class AuthenticationAnalysis(BaseModel):
    schemes: dict[str, AuthenticationScheme] = {}
    routes: dict[int, RouteAuthentication] = {}  # route index -> authentication
    global_auth: RouteAuthentication | None = None


class AuthenticationAnalyzer:
    def __init__(self, config: AuthenticationConfig | None = None):
        self.config = config or AuthenticationConfig()
        self.detector = AuthenticationDetector(self.config.custom_schemes)

    def analyze(self, routes: list[RouteDescriptor]) -> AuthenticationAnalysis:
        """Collect every scheme in use and each route's own authentication."""
        analysis = AuthenticationAnalysis(global_auth=self.get_global_authentication())
        if analysis.global_auth is not None:
            scheme = analysis.global_auth.scheme
            analysis.schemes[scheme.name] = scheme

        for index, route in enumerate(routes):
            authentication = self.analyze_route(route)
            if authentication is None:
                continue
            analysis.routes[index] = authentication
            analysis.schemes.setdefault(authentication.scheme.name, authentication.scheme)
            logger.debug("Route %s uses %s", route.uri, authentication.scheme.name)
        return analysis

    def analyze_route(self, route: RouteDescriptor) -> RouteAuthentication | None:
        scheme = self.detector.detect_from_middleware(route.middleware)
        if scheme is not None:
            return RouteAuthentication(
                scheme=scheme, middleware=route.middleware, required=True, scopes=route_scopes(route.middleware),
            )
        return self.get_pattern_based_authentication(route.uri)

    def get_global_authentication(self) -> RouteAuthentication | None:
        global_auth = self.config.global_auth
        if not global_auth.enabled:
            return None
        if global_auth.scheme is None:
            logger.warning("Global authentication is enabled but has no scheme, ignoring it")
            return None
        return RouteAuthentication(scheme=global_auth.scheme, required=global_auth.required)

    def get_pattern_based_authentication(self, uri: str) -> RouteAuthentication | None:
        for pattern, scheme in self.config.patterns.items():
            if fnmatch.fnmatchcase(uri.strip("/"), pattern.strip("/")):
                return RouteAuthentication(scheme=scheme, required=True)
        return None
