DEFAULT_ORIGIN = "https://chat.z.ai"
DEFAULT_API_ENDPOINT = "https://chat.z.ai/api/chat/completions"
MODELS_URL = "https://chat.z.ai/api/models"
AUTH_PATH = "/api/v1/auths/"

FE_VERSION = "prod-fe-1.0.79"

AUTH_TIMEOUT = 10.0
MODELS_TIMEOUT = 10.0
UPSTREAM_TIMEOUT = 60.0

CHROMIUM_USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/139.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/139.0.0.0 Safari/537.36 Edg/139.0.0.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/139.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/139.0.0.0 Safari/537.36",
)
FIREFOX_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) Gecko/20100101 Firefox/121.0"
SAFARI_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15"

# Sent when listing models; not part of the rotating pool.
MODELS_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/140.0.0.0 Safari/537.36 Edg/140.0.0.0"

# Weighted toward Chrome and Edge.
BROWSER_CHOICES = ("chrome", "chrome", "chrome", "edge", "edge", "firefox", "safari")

DEFAULT_BROWSER_VERSION = "139"

BASE_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json, text/event-stream",
    "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8,en-US;q=0.7",
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"Windows"',
    "sec-fetch-dest": "empty",
    "sec-fetch-mode": "cors",
    "sec-fetch-site": "same-origin",
    "X-FE-Version": FE_VERSION,
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

# Shared secret for the time-bucketed chat signature key.
CHAT_SIGNATURE_SECRET = "junjie"
CHAT_SIGNATURE_WINDOW_MS = 5 * 60 * 1000

ANONYMOUS_SIGNING_TOKEN = "anonymous"
MODEL_OWNER = "z.ai"
