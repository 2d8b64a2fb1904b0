"""Bearer token acquisition and caching."""

from menubot.auth.client_credentials import ClientCredentialsAuth, build_client_credentials_auth
from menubot.auth.token_cache import TokenCache, TokenRefresher

__all__ = [
    "ClientCredentialsAuth",
    "TokenCache",
    "TokenRefresher",
    "build_client_credentials_auth",
]
