from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx

from .config import Config, get_config
from .constants import ANONYMOUS_SIGNING_TOKEN, AUTH_PATH, AUTH_TIMEOUT
from .exceptions import UpstreamError
from .headers import build_browser_headers
from .log import debug_log
from .network import client_scope
from .signature import legacy_signature_headers

T = TypeVar("T")


async def with_fallback(
    primary: Callable[[], Awaitable[T]],
    fallback: T,
    *,
    label: str,
    config: Optional[Config] = None,
) -> T:
    """Await ``primary()``; on any error log it and return ``fallback``."""
    try:
        return await primary()
    except Exception as e:
        debug_log("%s failed, using fallback: %r", label, e, config=config)
        return fallback


async def get_anonymous_token(client: Optional[httpx.AsyncClient] = None, *, config: Optional[Config] = None) -> str:
    """Fetch a guest token from ``<origin>/api/v1/auths/``.

    Raises:
        UpstreamError: on network failure, timeout, non-2xx status or a missing,
            empty or non-string token.
    """
    config = config or get_config()
    origin = config.client_origin

    headers = build_browser_headers(config=config)
    headers["Accept"] = "*/*"
    headers["Accept-Language"] = "zh-CN,zh;q=0.9"
    headers["Referer"] = f"{origin}/"
    headers.update(legacy_signature_headers(ANONYMOUS_SIGNING_TOKEN, "", "GET", config=config))

    url = f"{origin}{AUTH_PATH}"
    async with client_scope(client) as http:
        try:
            resp = await http.get(url, headers=headers, timeout=AUTH_TIMEOUT)
        except httpx.HTTPError as e:
            debug_log("Anonymous token request failed: %r", e, config=config)
            raise UpstreamError(f"anon token request failed: {e}") from e

        if not resp.is_success:
            debug_log("Anonymous token request returned %d", resp.status_code, config=config)
            raise UpstreamError(f"anon token status={resp.status_code}", status_code=resp.status_code)

        try:
            data: Any = resp.json()
        except ValueError as e:
            raise UpstreamError("anon token response is not JSON", status_code=resp.status_code) from e

    token = data.get("token") if isinstance(data, dict) else None
    if not isinstance(token, str) or not token:
        raise UpstreamError("anon token empty", status_code=resp.status_code)
    return token


async def get_auth_token(client: Optional[httpx.AsyncClient] = None, *, config: Optional[Config] = None) -> str:
    """Token for the chat call. Never raises; falls back to ``backup_token``."""
    config = config or get_config()
    if config.anonymous_mode:
        token = await with_fallback(
            lambda: get_anonymous_token(client, config=config),
            None,
            label="Anonymous token",
            config=config,
        )
        if token:
            debug_log("Anonymous token acquired: %s...", token[:10], config=config)
            return token
    return config.backup_token
