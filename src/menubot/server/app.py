"""ASGI application for menubot."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Optional, Sequence
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from menubot import __version__, metrics
from menubot.auth.client_credentials import build_client_credentials_auth
from menubot.auth.token_cache import TokenCache
from menubot.config import Settings, get_settings
from menubot.errors import AuthFailure, ConfigurationError, DeliveryFailure
from menubot.logging_utils import configure_logging as configure_app_logging
from menubot.menu.query import MenuAnswerer, parse_menu_query
from menubot.messaging.sender import ActivitySender
from menubot.models.activity import InboundActivity, build_reply
from menubot.models.site import SiteConfig
from menubot.server import deps

logger = logging.getLogger(__name__)


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    return repr(value)


def _normalize_validation_errors(errors: Sequence[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{key: _json_safe(value) for key, value in error.items()} for error in errors]


def _configure_logging(settings: Settings) -> None:
    configure_app_logging(settings.log_level, settings.log_format, settings.secrets())


def _observe_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    metrics.REQUEST_COUNT.labels(method=method, path=path, status=str(status_code)).inc()
    metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)


def _request_log_kwargs(request: Request) -> dict[str, Any]:
    request_id = getattr(request.state, "request_id", None)
    return {"extra": {"request_id": request_id}} if request_id else {}


def create_app(
    *,
    sites: Optional[Sequence[SiteConfig]] = None,
    token_cache: Optional[TokenCache] = None,
) -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="Menubot", version=__version__)
    application.state.sites = list(sites) if sites is not None else None
    application.state.token_cache = token_cache or TokenCache(
        build_client_credentials_auth(settings)
    )
    logger.debug("Application created with log level %s", settings.log_level)

    if settings.log_requests:
        access_logger = logging.getLogger("menubot.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details without leaking sensitive data."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            path = request.url.path
            method = request.method
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                _observe_request(method, path, 500, duration_ms)
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
            _observe_request(method, path, response.status_code, duration_ms)
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
            **_request_log_kwargs(request),
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": _normalize_validation_errors(exc.errors())},
        )

    @application.exception_handler(ConfigurationError)
    async def configuration_exception_handler(request: Request, exc: ConfigurationError):
        logger.error("Configuration error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc)},
        )

    @application.post(
        settings.server_endpoint,
        status_code=status.HTTP_201_CREATED,
        summary="Receive chat activity",
    )
    async def receive_activity(
        request: Request,
        activity: InboundActivity,
        answerer: MenuAnswerer = Depends(deps.get_answerer),
        sender: ActivitySender = Depends(deps.get_sender),
    ) -> Response:
        """Answer menu queries by posting the rendered menu back to the conversation."""

        query = parse_menu_query(activity.text)
        if query is None:
            logger.debug("Ignoring activity type=%s without menu keyword", activity.type)
            return Response(status_code=status.HTTP_201_CREATED)

        answer = await answerer.answer(query.want_tomorrow)
        reply = build_reply(activity, answer)
        try:
            await sender.send(reply, activity.conversation.id)
        except AuthFailure as exc:
            logger.error(
                "No bearer token for conversation %s; reply not sent: %s",
                activity.conversation.id,
                exc,
                **_request_log_kwargs(request),
            )
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Messaging credential unavailable",
            ) from exc
        except DeliveryFailure as exc:
            logger.error(
                "Reply delivery failed for conversation %s: %s",
                activity.conversation.id,
                exc,
                **_request_log_kwargs(request),
            )
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Reply delivery failed",
            ) from exc
        return Response(status_code=status.HTTP_201_CREATED)

    @application.get("/menu", response_class=PlainTextResponse, summary="Preview menu answer")
    async def menu_preview(
        tomorrow: bool = Query(default=False),
        auth: None = Depends(deps.require_api_token),
        answerer: MenuAnswerer = Depends(deps.get_answerer),
    ) -> str:
        return await answerer.answer(tomorrow)

    @application.get("/healthz", summary="Liveness probe")
    async def healthz() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @application.get("/metrics", include_in_schema=False)
    async def metrics_endpoint() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return application


app = create_app()

__all__ = ["app", "create_app"]
