"""Model list: configured defaults overlaid with what chat.z.ai reports."""

import time
from typing import Any, Dict, Iterable, List, Optional

import httpx
from pydantic import ValidationError

from .auth import get_anonymous_token, with_fallback
from .config import Config, get_config
from .constants import MODEL_OWNER, MODELS_TIMEOUT, MODELS_URL, MODELS_USER_AGENT
from .headers import build_browser_headers
from .log import debug_log
from .network import client_scope
from .schemas import ZAIModel


def _now() -> int:
    return int(time.time())


def get_default_models(*, config: Optional[Config] = None, now: Optional[int] = None) -> List[ZAIModel]:
    config = config or get_config()
    created = now if now is not None else _now()
    return [
        ZAIModel(id=model_id, name=model_id, created=created, owned_by=MODEL_OWNER)
        for model_id in config.default_model_ids()
    ]


def _parse_models(entries: Any, config: Optional[Config] = None) -> List[ZAIModel]:
    if not isinstance(entries, list):
        return []
    models = []
    for entry in entries:
        try:
            models.append(ZAIModel.model_validate(entry))
        except ValidationError as e:
            debug_log("Skipping malformed model entry %r: %s", entry, e, config=config)
    return models


async def _fetch_models(client: Optional[httpx.AsyncClient], config: Config) -> List[ZAIModel]:
    try:
        auth_token = await get_anonymous_token(client, config=config)
    except Exception as e:
        debug_log("Could not get anonymous token for model list: %r", e, config=config)
        return []
    debug_log("Fetching models with anonymous token %s...", auth_token[:10], config=config)

    headers = build_browser_headers(config=config)
    headers["Accept"] = "application/json"
    headers["Authorization"] = f"Bearer {auth_token}"
    headers["User-Agent"] = MODELS_USER_AGENT

    async with client_scope(client) as http:
        resp = await http.get(MODELS_URL, headers=headers, timeout=MODELS_TIMEOUT)
        if not resp.is_success:
            debug_log("Model list request returned %d", resp.status_code, config=config)
            return []
        data = resp.json()

    models = _parse_models(data.get("data") if isinstance(data, dict) else None, config)
    debug_log("Fetched %d models", len(models), config=config)
    return models


async def fetch_latest_models(client: Optional[httpx.AsyncClient] = None, *, config: Optional[Config] = None) -> List[ZAIModel]:
    """Live model list, or [] if anything goes wrong."""
    config = config or get_config()
    return await with_fallback(lambda: _fetch_models(client, config), [], label="Model list fetch", config=config)


def merge_models(defaults: Iterable[ZAIModel], latest: Iterable[ZAIModel], *, now: Optional[int] = None) -> List[ZAIModel]:
    """Overlay ``latest`` on ``defaults`` by id.

    Missing ``name``/``created``/``owned_by`` are taken from ``info``
    (``name``, ``created_at``, ``user_id``), then from the id, the current
    time and ``z.ai``.
    """
    merged: Dict[str, ZAIModel] = {model.id: model for model in defaults}
    for model in latest:
        info = model.info
        created = model.created or (info.created_at if info else None) or (now if now is not None else _now())
        merged[model.id] = ZAIModel(
            id=model.id,
            name=model.name or (info.name if info else None) or model.id,
            created=created,
            owned_by=model.owned_by or (info.user_id if info else None) or MODEL_OWNER,
        )
    return list(merged.values())


async def get_available_models(client: Optional[httpx.AsyncClient] = None, *, config: Optional[Config] = None) -> List[ZAIModel]:
    """Defaults merged with the live list. Never raises."""
    config = config or get_config()
    default_models = get_default_models(config=config)
    latest_models = await with_fallback(
        lambda: fetch_latest_models(client, config=config), [], label="Latest models", config=config
    )
    if not latest_models:
        return default_models
    return merge_models(default_models, latest_models)
