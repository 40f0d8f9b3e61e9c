from typing import Optional


class ZAIError(Exception):
    """Base class for errors raised by zai_client."""


class UpstreamError(ZAIError):
    """The chat.z.ai service failed, timed out or returned something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
