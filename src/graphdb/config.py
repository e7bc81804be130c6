"""GraphDB server configuration."""

import base64
from dataclasses import dataclass
from urllib.parse import urlsplit

from pydantic import AliasChoices, Field

from src.shared.config import BaseServerSettings


class GraphDBSettings(BaseServerSettings):
    """Settings specific to the GraphDB MCP server."""

    server_name: str = "mcp-server-graphdb"
    endpoint: str = "http://localhost:7200"
    repository: str = ""
    username: str = ""
    password: str = ""
    # Cloudflare Access service token, read without the GRAPHDB_ prefix
    cf_access_client_id: str = Field(
        default="",
        validation_alias=AliasChoices("CF_ACCESS_CLIENT_ID", "cf_access_client_id"),
    )
    cf_access_client_secret: str = Field(
        default="",
        validation_alias=AliasChoices("CF_ACCESS_CLIENT_SECRET", "cf_access_client_secret"),
    )
    request_timeout: float = 30.0
    resource_scheme: str = "graphdb"

    class Config(BaseServerSettings.Config):
        env_prefix = "GRAPHDB_"


@dataclass(frozen=True)
class RepositoryRef:
    """Immutable reference to the remote repository every component targets.

    Built once at startup and handed to each component's constructor.
    """

    endpoint: str
    repository: str
    username: str = ""
    password: str = ""
    access_client_id: str = ""
    access_client_secret: str = ""
    resource_scheme: str = "graphdb"

    @classmethod
    def from_settings(cls, settings: GraphDBSettings) -> "RepositoryRef":
        return cls(
            endpoint=settings.endpoint,
            repository=settings.repository,
            username=settings.username,
            password=settings.password,
            access_client_id=settings.cf_access_client_id,
            access_client_secret=settings.cf_access_client_secret,
            resource_scheme=settings.resource_scheme,
        )

    @property
    def repository_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/repositories/{self.repository}"

    @property
    def resource_base(self) -> str:
        """Base of every resource URI, e.g. ``graphdb://localhost:7200``."""
        host = urlsplit(self.endpoint).netloc or "localhost"
        return f"{self.resource_scheme}://{host}"

    @property
    def has_auth(self) -> bool:
        return bool(self.username and self.password)

    @property
    def has_access_credentials(self) -> bool:
        return bool(self.access_client_id and self.access_client_secret)

    def credential_headers(self) -> dict[str, str]:
        """Headers carrying whichever credentials are fully configured."""
        headers: dict[str, str] = {}
        if self.has_auth:
            token = base64.b64encode(
                f"{self.username}:{self.password}".encode("utf-8")
            ).decode("ascii")
            headers["Authorization"] = f"Basic {token}"
        if self.has_access_credentials:
            headers["CF-Access-Client-Id"] = self.access_client_id
            headers["CF-Access-Client-Secret"] = self.access_client_secret
        return headers
