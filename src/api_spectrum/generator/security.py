"""Security schemes and per-operation security requirements."""

from pydantic import BaseModel, ConfigDict, Field


class AuthenticationScheme(BaseModel):
    """One authentication mechanism, named as it appears in ``components.securitySchemes``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: str  # http / apiKey / oauth2 / openIdConnect
    scheme: str | None = None
    bearer_format: str | None = Field(default=None, alias="bearerFormat")
    location: str | None = Field(default=None, alias="in")
    header_name: str | None = Field(default=None, alias="headerName")
    flows: dict | None = None
    open_id_connect_url: str | None = Field(default=None, alias="openIdConnectUrl")
    description: str | None = None

    @property
    def is_oauth2(self) -> bool:
        return self.type == "oauth2"

    def to_openapi_security_scheme(self) -> dict:
        result: dict = {"type": self.type}
        if self.type == "http":
            if self.scheme is not None:
                result["scheme"] = self.scheme
            if self.bearer_format is not None:
                result["bearerFormat"] = self.bearer_format
        if self.type == "apiKey":
            if self.location is not None:
                result["in"] = self.location
            if self.header_name is not None:
                result["name"] = self.header_name
        if self.is_oauth2 and self.flows is not None:
            result["flows"] = self.flows
        if self.type == "openIdConnect" and self.open_id_connect_url is not None:
            result["openIdConnectUrl"] = self.open_id_connect_url
        if self.description is not None:
            result["description"] = self.description
        return result


class RouteAuthentication(BaseModel):
    scheme: AuthenticationScheme
    middleware: list[str] = []
    required: bool = True
    scopes: list[str] = []


class SecuritySchemeGenerator:
    def generate_security_schemes(self, schemes: dict[str, AuthenticationScheme]) -> dict:
        return {name: scheme.to_openapi_security_scheme() for name, scheme in schemes.items()}

    def generate_endpoint_security(self, authentication: RouteAuthentication | None) -> list[dict]:
        """``[{scheme name: scopes}]``; scopes are only listed for OAuth2."""
        if authentication is None or not authentication.required:
            return []
        scheme = authentication.scheme
        return [{scheme.name: list(authentication.scopes) if scheme.is_oauth2 else []}]

    def generate_multiple_auth_security(self, authentications: list[RouteAuthentication]) -> list[dict]:
        """Alternative requirements: any one of them satisfies the operation."""
        security = []
        for authentication in authentications:
            security.extend(self.generate_endpoint_security(authentication))
        return security
