from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Message(BaseModel):
    """One chat message.

    ``content`` is a string or a list of parts; parts carry their text under
    ``text``. Anything else is passed through untouched.
    """
    model_config = ConfigDict(extra="allow")

    role: Any = None
    content: Any = None
    reasoning_content: Any = None


class UpstreamRequest(BaseModel):
    """Body of a chat request as chat.z.ai expects it.

    ``params`` is sent in the query string, everything else in the JSON body.
    """
    model_config = ConfigDict(extra="allow")

    messages: List[Message] = []
    params: Any = None


# The provider's model list is untyped; only ``id`` is relied upon.
class ZAIModelInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Any = None
    created_at: Any = None
    user_id: Any = None


class ZAIModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: Any = None
    display_name: Any = None
    created: Any = None
    owned_by: Any = None
    info: Optional[ZAIModelInfo] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("info", mode="before")
    @classmethod
    def _drop_non_mapping_info(cls, value):
        if isinstance(value, (dict, ZAIModelInfo)):
            return value
        return None


class SignaturePayload(BaseModel):
    signature: str
    timestamp: int
