"""Environment-driven runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from ..exceptions import ConfigError

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class Settings:
    """
    Runtime settings shared by the CLI and the service clients.

    Loaded once from the environment and passed explicitly to whatever needs
    it; nothing reads the environment behind the caller's back.
    """

    openai_api_key: str = ""
    model: str = DEFAULT_MODEL
    template_base_url: Optional[str] = None
    template_dir: Optional[Path] = None
    layout_dir: Optional[Path] = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        template_dir = env.get("TEMPLIFY_TEMPLATE_DIR", "").strip()
        layout_dir = env.get("TEMPLIFY_LAYOUT_DIR", "").strip()
        timeout = env.get("TEMPLIFY_HTTP_TIMEOUT", "").strip()
        try:
            http_timeout = float(timeout) if timeout else DEFAULT_HTTP_TIMEOUT
        except ValueError:
            raise ConfigError("TEMPLIFY_HTTP_TIMEOUT must be a number of seconds", timeout) from None
        return cls(
            openai_api_key=env.get("OPENAI_API_KEY", "").strip(),
            model=env.get("TEMPLIFY_MODEL", "").strip() or DEFAULT_MODEL,
            template_base_url=env.get("TEMPLIFY_TEMPLATE_BASE_URL", "").strip() or None,
            template_dir=Path(template_dir) if template_dir else None,
            layout_dir=Path(layout_dir) if layout_dir else None,
            http_timeout=http_timeout,
        )

    @property
    def has_openai(self) -> bool:
        return bool(self.openai_api_key)
