from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


DEFAULT_MODEL = "claude-3-5-haiku-20241022"
DEFAULT_MAX_TOKENS = 4000
DEFAULT_TIMEOUT_SECONDS = 60.0


@dataclass
class Settings:
    anthropic_api_key: str | None
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


def _read_env_file() -> dict[str, str]:
    """Load minimal .env to support SV_* keys if not in the environment.

    We intentionally do not overwrite existing os.environ values.
    """
    env_path = Path.cwd() / ".env"
    env: dict[str, str] = {}
    if not env_path.exists():
        return env
    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip().strip('"').strip("'")
            env[k] = v
    except (OSError, UnicodeDecodeError):
        # Unreadable .env files are ignored so the CLI keeps working
        return {}
    return env


def _get_env(
    name: str,
    fallback_names: list[str] | None = None,
    env_file: dict[str, str] | None = None,
) -> str | None:
    # Priority: process env -> .env -> fallback names
    val = os.getenv(name)
    if val:
        return val
    if env_file and name in env_file:
        return env_file[name]
    if fallback_names:
        for fb in fallback_names:
            v = os.getenv(fb)
            if v:
                return v
            if env_file and fb in env_file:
                return env_file[fb]
    return None


def _as_number(raw: str | None, default: float) -> float:
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_settings() -> Settings:
    env_file = _read_env_file()
    api_key = _get_env("SV_ANTHROPIC_API_KEY", ["ANTHROPIC_API_KEY"], env_file)
    model = _get_env("SV_MODEL", None, env_file) or DEFAULT_MODEL
    max_tokens = int(_as_number(_get_env("SV_MAX_TOKENS", None, env_file), DEFAULT_MAX_TOKENS))
    timeout = _as_number(
        _get_env("SV_TIMEOUT_SECONDS", None, env_file), DEFAULT_TIMEOUT_SECONDS
    )
    return Settings(
        anthropic_api_key=api_key,
        model=model,
        max_tokens=max_tokens,
        timeout_seconds=timeout,
    )
