"""Helper for running the menubot ASGI application."""

from __future__ import annotations

import os
from typing import Optional

import uvicorn

from menubot.config import get_settings

APP_PATH = "menubot.server.app:app"


def serve(*, http: bool = False, host: Optional[str] = None) -> None:
    """Run the webhook over TLS, or over plain HTTP when ``http`` is set."""

    settings = get_settings()
    bind_host = host or os.environ.get("MENUBOT_SERVER_HOST", "0.0.0.0")

    if http:
        uvicorn.run(APP_PATH, host=bind_host, port=settings.http_port)
        return

    missing = [str(path) for path in (settings.tls_cert_path, settings.tls_key_path) if not path.exists()]
    if missing:
        raise SystemExit(
            f"TLS files not found: {', '.join(missing)}. Configure MENUBOT_TLS_CERT/MENUBOT_TLS_KEY "
            "or start with --http."
        )
    uvicorn.run(
        APP_PATH,
        host=bind_host,
        port=settings.port,
        ssl_certfile=str(settings.tls_cert_path),
        ssl_keyfile=str(settings.tls_key_path),
    )


def main() -> None:
    """Entry point used by `python -m menubot.server.run`."""

    serve(http=os.environ.get("MENUBOT_HTTP") == "1")


if __name__ == "__main__":
    main()
