import json
import re
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Iterable, Mapping, Optional, Tuple, Union

import httpx
from pydantic import BaseModel

from .config import Config, get_config
from .constants import UPSTREAM_TIMEOUT
from .headers import build_browser_headers
from .log import debug_log
from .schemas import Message, UpstreamRequest
from .signature import current_millis, generate_chat_signature


@asynccontextmanager
async def client_scope(client: Optional[httpx.AsyncClient] = None) -> AsyncIterator[httpx.AsyncClient]:
    """Yield ``client`` as is, or a throwaway client closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(follow_redirects=True) as owned:
        yield owned


def generate_request_ids() -> Tuple[str, str]:
    """Chat id and message id derived from the current second."""
    timestamp = int(time.time())
    chat_id = f"{timestamp * 1000}-{timestamp}"
    msg_id = str(timestamp * 1000000)
    return chat_id, msg_id


def _message_dict(message: Union[Message, Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(message, BaseModel):
        return message.model_dump()
    if isinstance(message, Mapping):
        return message
    return {}


def extract_message_text(message: Union[Message, Mapping[str, Any]]) -> str:
    message = _message_dict(message)
    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            text = part.get("text") if isinstance(part, Mapping) else None
            parts.append(text if isinstance(text, str) else "")
        return "".join(parts).strip()
    reasoning = message.get("reasoning_content")
    if isinstance(reasoning, str):
        return reasoning
    return ""


def get_last_user_message_content(messages: Iterable[Union[Message, Mapping[str, Any]]]) -> str:
    """Text of the most recent non-empty user message.

    Falls back to the text of the last message, or "" for no messages.
    """
    messages = list(messages)
    for message in reversed(messages):
        if _message_dict(message).get("role") == "user":
            content = extract_message_text(message)
            if content:
                return content
    if not messages:
        return ""
    return extract_message_text(messages[-1])


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_upstream_url(
    endpoint: str,
    *,
    request_id: str,
    timestamp: str,
    user_id: str,
    signature_timestamp: int,
    params: Optional[Mapping[str, Any]] = None,
) -> str:
    query = {
        "requestId": request_id,
        "timestamp": timestamp,
        "user_id": user_id,
        "signature_timestamp": str(signature_timestamp),
    }
    if isinstance(params, Mapping):
        for key, value in params.items():
            if value is not None:
                query[str(key)] = _query_value(value)
    return str(httpx.URL(endpoint).copy_merge_params(query))


def _messages_and_params(request: Union[UpstreamRequest, Mapping[str, Any]]) -> Tuple[list, Any]:
    if isinstance(request, BaseModel):
        messages, params = request.messages, request.params
    else:
        messages, params = request.get("messages"), request.get("params")
    return (messages if isinstance(messages, list) else []), params


def build_upstream_payload(request: Union[UpstreamRequest, Mapping[str, Any]]) -> Dict[str, Any]:
    """JSON body for the chat call: the request minus ``params``."""
    if not isinstance(request, BaseModel):
        return {k: v for k, v in request.items() if k != "params"}
    payload = request.model_dump(exclude={"params"}, exclude_unset=True)
    for key, value in (request.model_extra or {}).items():
        if key != "params":
            payload.setdefault(key, value)
    return payload


async def call_upstream_api(
    client: httpx.AsyncClient,
    request: Union[UpstreamRequest, Mapping[str, Any]],
    chat_id: str,
    auth_token: str,
    *,
    config: Optional[Config] = None,
) -> httpx.Response:
    """POST a signed chat request and return the open streaming response.

    The caller reads and closes the response. Transport errors and timeouts
    propagate unchanged.
    """
    config = config or get_config()
    messages, params = _messages_and_params(request)

    headers = build_browser_headers(chat_id, config=config)
    headers["Authorization"] = f"Bearer {auth_token}"

    request_id = str(uuid.uuid4())
    timestamp = str(current_millis())
    user_id = str(uuid.uuid4())

    last_message_content = get_last_user_message_content(messages)

    signature_source = f"requestId,{request_id},timestamp,{timestamp},user_id,{user_id}"
    signed = generate_chat_signature(signature_source, last_message_content, config=config)
    headers["X-Signature"] = signed.signature

    url = build_upstream_url(
        config.api_endpoint,
        request_id=request_id,
        timestamp=timestamp,
        user_id=user_id,
        signature_timestamp=signed.timestamp,
        params=params,
    )
    body_json = json.dumps(build_upstream_payload(request), ensure_ascii=False, separators=(",", ":"))

    debug_log("Calling upstream API: %s", url, config=config)
    debug_log("Upstream request body: %s", body_json, config=config)

    upstream_request = client.build_request(
        "POST",
        url,
        headers=headers,
        content=body_json.encode("utf-8"),
        timeout=UPSTREAM_TIMEOUT,
    )
    resp = await client.send(upstream_request, stream=True)
    debug_log("Upstream response status: %d", resp.status_code, config=config)
    return resp


def transform_thinking_content(content: str, mode: Optional[str] = None) -> str:
    """Clean up the reasoning markup chat.z.ai wraps around thinking output.

    ``mode`` is ``think`` (details become spans), ``strip`` (details removed)
    or ``raw``; defaults to ``thinking_processing`` from the config.
    """
    if mode is None:
        mode = get_config().thinking_processing

    content = re.sub(r"<summary>.*?</summary>", "", content, flags=re.DOTALL)
    content = content.replace("</thinking>", "").replace("<Full>", "").replace("</Full>", "")
    content = content.strip()

    if mode == "think":
        content = re.sub(r"<details[^>]*>", "<span>", content)
        content = content.replace("</details>", "</span>")
    elif mode == "strip":
        content = re.sub(r"<details[^>]*>", "", content)
        content = content.replace("</details>", "")

    content = re.sub(r"^> ", "", content, flags=re.MULTILINE)
    content = content.replace("\n> ", "\n")
    return content.strip()
