import os
import json
import re
from typing import List, Optional, Any
from .constants import DEFAULT_ORIGIN, DEFAULT_API_ENDPOINT

_TRUE_VALUES = {"1", "true", "yes", "on"}

# field name -> environment variable
ENV_OVERRIDES = {
    "origin": "ZAI_ORIGIN",
    "api_endpoint": "ZAI_API_ENDPOINT",
    "anonymous_mode": "ZAI_ANONYMOUS_MODE",
    "backup_token": "ZAI_BACKUP_TOKEN",
    "debug_logging": "ZAI_DEBUG_LOGGING",
    "thinking_processing": "ZAI_THINKING_PROCESSING",
    "primary_model": "ZAI_PRIMARY_MODEL",
    "thinking_model": "ZAI_THINKING_MODEL",
    "search_model": "ZAI_SEARCH_MODEL",
    "air_model": "ZAI_AIR_MODEL",
    "primary_model_new": "ZAI_PRIMARY_MODEL_NEW",
    "thinking_model_new": "ZAI_THINKING_MODEL_NEW",
    "search_model_new": "ZAI_SEARCH_MODEL_NEW",
}

MODEL_FIELDS = (
    "primary_model",
    "thinking_model",
    "search_model",
    "air_model",
    "primary_model_new",
    "thinking_model_new",
    "search_model_new",
)

BOOL_FIELDS = ("anonymous_mode", "debug_logging")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


class Config:
    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or os.getenv("ZAI_CONFIG", "config.json")
        self.origin: str = DEFAULT_ORIGIN
        self.api_endpoint: str = DEFAULT_API_ENDPOINT
        self.anonymous_mode: bool = True
        self.backup_token: str = ""
        self.debug_logging: bool = False
        self.thinking_processing: str = "think"
        self.primary_model: str = "GLM-4.5"
        self.thinking_model: str = "GLM-4.5-Thinking"
        self.search_model: str = "GLM-4.5-Search"
        self.air_model: str = "GLM-4.5-Air"
        self.primary_model_new: str = "GLM-4.6"
        self.thinking_model_new: str = "GLM-4.6-Thinking"
        self.search_model_new: str = "GLM-4.6-Search"
        self.load()

    def load(self):
        # 1. Load local config if exists
        if os.path.exists(self.config_path):
            with open(self.config_path, "r", encoding="utf-8") as f:
                self._apply_config_data(json.load(f))

        # 2. Override with env vars
        self._apply_env()

    def _apply_config_data(self, data: dict):
        data = self._replace_env_vars(data)
        for field in ENV_OVERRIDES:
            if field in data and data[field] is not None:
                self._set(field, data[field])

    def _apply_env(self):
        for field, env_var in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value is not None:
                self._set(field, value)

    def _set(self, field: str, value: Any):
        if field in BOOL_FIELDS:
            value = _as_bool(value)
        else:
            value = str(value)
        setattr(self, field, value)

    def _replace_env_vars(self, data: Any) -> Any:
        """Recursively replace ${ENV_VAR} in config data."""
        if isinstance(data, dict):
            return {k: self._replace_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [self._replace_env_vars(i) for i in data]
        elif isinstance(data, str):
            # Match ${VAR_NAME}
            pattern = re.compile(r'\$\{([^}]+)\}')

            def replacer(match):
                env_var = match.group(1)
                return os.getenv(env_var, match.group(0)) # Fallback to original string if not found

            return pattern.sub(replacer, data)
        return data

    @property
    def client_origin(self) -> str:
        return self.origin.rstrip("/")

    def default_model_ids(self) -> List[str]:
        return [getattr(self, field) for field in MODEL_FIELDS]

_config_instance = None

def get_config() -> Config:
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance

def set_config(config: Config) -> None:
    global _config_instance
    _config_instance = config

def reset_config() -> None:
    global _config_instance
    _config_instance = None
