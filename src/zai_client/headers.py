"""Browser-like request headers for chat.z.ai.

Every outbound call gets a freshly built header set whose User-Agent and
``sec-ch-ua`` agree with each other, picked from a small pool of canned
desktop browsers.
"""

import random
from typing import Dict, Optional

from .config import Config, get_config
from .constants import (
    BASE_HEADERS,
    BROWSER_CHOICES,
    CHROMIUM_USER_AGENTS,
    DEFAULT_BROWSER_VERSION,
    FIREFOX_USER_AGENT,
    SAFARI_USER_AGENT,
)
from .log import debug_log

_system_random = random.SystemRandom()

_user_agents: Optional[Dict[str, str]] = None


def get_user_agents() -> Dict[str, str]:
    """Return the User-Agent pool, building it on first use.

    ``random`` is drawn once, when the pool is built, and serves as the
    fallback for unknown browser names.
    """
    global _user_agents
    if _user_agents is None:
        _user_agents = {
            "chrome": CHROMIUM_USER_AGENTS[0],
            "edge": CHROMIUM_USER_AGENTS[1],
            "firefox": FIREFOX_USER_AGENT,
            "safari": SAFARI_USER_AGENT,
            "random": _system_random.choice(CHROMIUM_USER_AGENTS),
        }
    return _user_agents


def parse_major_version(user_agent: str, marker: str, default: str = DEFAULT_BROWSER_VERSION) -> str:
    """Text between ``marker`` and the following dot, or ``default``."""
    if marker not in user_agent:
        return default
    try:
        version = user_agent.split(marker, 1)[1].split(".", 1)[0]
    except (IndexError, AttributeError):
        return default
    return version or default


def _chromium_sec_ch_ua(chrome_version: str) -> str:
    return f'"Not_A Brand";v="8", "Chromium";v="{chrome_version}", "Google Chrome";v="{chrome_version}"'


def build_sec_ch_ua(user_agent: str) -> Optional[str]:
    """``sec-ch-ua`` matching ``user_agent``; None for Firefox."""
    chrome_version = parse_major_version(user_agent, "Chrome/")
    if "Edg/" in user_agent:
        try:
            edge_version = user_agent.split("Edg/", 1)[1].split(".", 1)[0]
        except (IndexError, AttributeError):
            return _chromium_sec_ch_ua(chrome_version)
        if not edge_version:
            return _chromium_sec_ch_ua(chrome_version)
        return f'"Microsoft Edge";v="{edge_version}", "Chromium";v="{chrome_version}", "Not_A Brand";v="24"'
    if "Firefox/" in user_agent:
        return None
    return _chromium_sec_ch_ua(chrome_version)


def choose_user_agent(rng=None) -> str:
    rng = rng or _system_random
    user_agents = get_user_agents()
    browser_type = rng.choice(BROWSER_CHOICES)
    return user_agents.get(browser_type, user_agents["random"])


def build_browser_headers(referer_id: str = "", *, rng=None, config: Optional[Config] = None) -> Dict[str, str]:
    """Build the header set for one request.

    Args:
        referer_id: chat id used for ``Referer: <origin>/c/<id>``; omitted when empty.
        rng: object with a ``choice`` method used to pick the browser.
        config: defaults to the process config.
    """
    config = config or get_config()
    user_agent = choose_user_agent(rng)
    origin = config.client_origin

    headers = dict(BASE_HEADERS)
    headers["User-Agent"] = user_agent
    headers["Origin"] = origin

    sec_ch_ua = build_sec_ch_ua(user_agent)
    if sec_ch_ua:
        headers["sec-ch-ua"] = sec_ch_ua

    if referer_id:
        headers["Referer"] = f"{origin}/c/{referer_id}"

    debug_log("Using User-Agent: %s...", user_agent[:100], config=config)
    return headers
