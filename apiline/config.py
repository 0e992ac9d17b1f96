"""Runtime configuration helpers for apiline."""
from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_FILES = [
    Path.cwd() / ".apiline.toml",
    Path.home() / ".config" / "apiline" / "config.toml",
]


class ApilineSettings(BaseModel):
    base_url: str = Field(default="http://localhost:8080", description="Server base URL")
    api_key: str = Field(default="", description="Default API key for admin authentication")
    jwt_variable: str = Field(default="jwt_token", min_length=1, description="Variable holding the JWT for auth: jwt")
    request_timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds")
    use_color: bool = Field(default=True, description="Use rich colors and styles")
    watch_interval: float = Field(default=0.5, gt=0, description="Definition file polling interval in seconds")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


def _load_toml(path: Path) -> Dict[str, Any]:
    with path.open("rb") as fh:
        return tomllib.load(fh)


def load_config(explicit_path: Optional[Path] = None) -> ApilineSettings:
    """Load configuration from the first available location."""
    candidates = []
    if explicit_path is not None:
        candidates.append(explicit_path.expanduser())
    candidates.extend(DEFAULT_CONFIG_FILES)

    config_data: Dict[str, Any] = {}
    for candidate in candidates:
        if candidate.is_file():
            config_data = _load_toml(candidate)
            break

    return ApilineSettings(**config_data)
