import hashlib
import hmac
import secrets
import time
from typing import Callable, Dict, Optional

from .config import Config
from .constants import CHAT_SIGNATURE_SECRET, CHAT_SIGNATURE_WINDOW_MS
from .log import debug_log
from .schemas import SignaturePayload


def current_millis() -> int:
    return int(time.time() * 1000)


def hmac_sha256_hex(key: str, message: str) -> str:
    return hmac.new(key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def legacy_signature_headers(
    token: str,
    body: str = "",
    method: str = "POST",
    *,
    random_bytes: Callable[[int], bytes] = secrets.token_bytes,
    now_ms: Optional[int] = None,
    config: Optional[Config] = None,
) -> Dict[str, str]:
    """X-Timestamp / X-Nonce / X-Signature headers of the old signing scheme.

    Only the anonymous auth endpoint still checks these.
    """
    timestamp = str(now_ms if now_ms is not None else current_millis())
    # 8 bytes is already 16 hex chars; the slice keeps the wire format pinned.
    nonce = random_bytes(8).hex()[:16]

    sign_string = f"{method}\n{timestamp}\n{nonce}\n{body}"
    signature = hmac_sha256_hex(token, sign_string)

    debug_log(
        "Legacy signature headers: timestamp=%s, nonce=%s..., signature=%s...",
        timestamp, nonce[:8], signature[:16],
        config=config,
    )
    return {
        "X-Timestamp": timestamp,
        "X-Nonce": nonce,
        "X-Signature": signature,
    }


def chat_signature_key(timestamp_ms: int) -> str:
    """Intermediate key for ``timestamp_ms``; constant within a 5 minute window."""
    bucket = timestamp_ms // CHAT_SIGNATURE_WINDOW_MS
    return hmac_sha256_hex(CHAT_SIGNATURE_SECRET, str(bucket))


def generate_chat_signature(
    e: str,
    t: str,
    *,
    now_ms: Optional[int] = None,
    config: Optional[Config] = None,
) -> SignaturePayload:
    """Sign a chat request.

    Args:
        e: request descriptor, ``requestId,<id>,timestamp,<ts>,user_id,<uid>``.
        t: text of the last user message.
        now_ms: signing time in epoch milliseconds, defaults to now.
    """
    timestamp_ms = now_ms if now_ms is not None else current_millis()
    intermediate_key = chat_signature_key(timestamp_ms)
    signature = hmac_sha256_hex(intermediate_key, f"{e}|{t}|{timestamp_ms}")

    debug_log(
        "Chat signature: e=%s, len(t)=%d, signature=%s..., ts=%d",
        e, len(t), signature[:16], timestamp_ms,
        config=config,
    )
    return SignaturePayload(signature=signature, timestamp=timestamp_ms)
