"""Application configuration helpers."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from menubot.errors import ConfigurationError
from menubot.models.site import SiteConfig

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))

DEFAULT_AUTH_URL = "https://login.microsoftonline.com/botframework.com/oauth2/v2.0/token"


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    sites_path: Path = Field(
        default=Path("./sites.json"),
        description="JSON file listing the menu sites and their weekday selectors.",
    )
    server_endpoint: str = Field(
        default="/api/messages",
        description="Webhook path registered with the chat connector.",
    )
    auth_url: str = Field(
        default=DEFAULT_AUTH_URL,
        description="OAuth2 token endpoint used for the client-credentials grant.",
    )
    auth_scope: str = Field(
        default="https://graph.microsoft.com/.default",
        description="Scope requested with the client-credentials grant.",
    )
    api_url: Optional[str] = Field(
        default=None,
        description="Connector API base URL replies are posted to.",
    )
    activity_endpoint: str = Field(
        default="/v3/conversations/<conversationId>/activities",
        description="Activity path appended to api_url; <conversationId> is substituted.",
    )
    bot_id: Optional[str] = Field(default=None, description="Bot application (client) id.")
    bot_secret: Optional[str] = Field(default=None, description="Bot application secret.")
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token required for the menu preview endpoint.",
    )
    port: int = Field(default=8443, description="HTTPS listen port.")
    http_port: int = Field(default=8080, description="Plain HTTP listen port.")
    tls_cert_path: Path = Field(default=Path("cert.crt"), description="TLS certificate.")
    tls_key_path: Path = Field(default=Path("key.key"), description="TLS private key.")
    fetch_timeout: float = Field(
        default=10.0,
        description="Seconds allowed for fetching a single menu page.",
    )
    auth_timeout: float = Field(
        default=10.0,
        description="Seconds allowed for a token refresh call.",
    )
    send_timeout: float = Field(
        default=10.0,
        description="Seconds allowed for posting a reply activity.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )

    model_config = ConfigDict(frozen=True)

    def secrets(self) -> list[str]:
        """Values the log filter must never print."""

        return [self.bot_secret or "", self.api_token or ""]


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip()
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


_STRING_FIELDS = {
    "MENUBOT_SERVER_ENDPOINT": "server_endpoint",
    "MENUBOT_AUTH_URL": "auth_url",
    "MENUBOT_AUTH_SCOPE": "auth_scope",
    "MENUBOT_API_URL": "api_url",
    "MENUBOT_ACTIVITY_ENDPOINT": "activity_endpoint",
    "MENUBOT_BOT_ID": "bot_id",
    "MENUBOT_BOT_SECRET": "bot_secret",
    "MENUBOT_API_TOKEN": "api_token",
    "MENUBOT_LOG_LEVEL": "log_level",
    "MENUBOT_LOG_FORMAT": "log_format",
}

_PATH_FIELDS = {
    "MENUBOT_SITES_PATH": "sites_path",
    "MENUBOT_TLS_CERT": "tls_cert_path",
    "MENUBOT_TLS_KEY": "tls_key_path",
}

_INT_FIELDS = {
    "MENUBOT_PORT": "port",
    "MENUBOT_HTTP_PORT": "http_port",
}

_FLOAT_FIELDS = {
    "MENUBOT_FETCH_TIMEOUT": "fetch_timeout",
    "MENUBOT_AUTH_TIMEOUT": "auth_timeout",
    "MENUBOT_SEND_TIMEOUT": "send_timeout",
}


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    for key, field in _STRING_FIELDS.items():
        if (value := _env(key)):
            payload[field] = value
    for key, field in _PATH_FIELDS.items():
        if (value := _env(key)):
            payload[field] = Path(value)
    for key, field in _INT_FIELDS.items():
        if (value := _env(key)):
            try:
                payload[field] = int(value)
            except ValueError:
                pass
    for key, field in _FLOAT_FIELDS.items():
        if (value := _env(key)):
            try:
                payload[field] = float(value)
            except ValueError:
                pass
    if (log_requests := _env("MENUBOT_LOG_REQUESTS")):
        payload["log_requests"] = _coerce_bool(log_requests)
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())


def load_sites(path: Path) -> list[SiteConfig]:
    """Read the ordered site list from a JSON array file."""

    try:
        with Path(path).open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Sites file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Sites file {path} is not valid JSON: {exc}") from exc

    if not isinstance(payload, list):
        raise ConfigurationError(f"Sites file {path} must contain a JSON array")

    sites: list[SiteConfig] = []
    seen: set[str] = set()
    for position, entry in enumerate(payload):
        try:
            site = SiteConfig.model_validate(entry)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid site #{position} in {path}: {exc.errors()}"
            ) from exc
        # menu buckets are keyed by site name
        if site.name in seen:
            raise ConfigurationError(f"Duplicate site name {site.name!r} in {path}")
        seen.add(site.name)
        sites.append(site)
    return sites
