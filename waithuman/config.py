"""WaitHuman client configuration: explicit values first, then environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_ENDPOINT = "https://api.waithuman.com"
DEFAULT_POLL_INTERVAL_S = 3.0
DEFAULT_HTTP_TIMEOUT_S = 60.0


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_env(env_path: Path | None = None, *, override: bool = False) -> list[str]:
    """Read WaitHuman settings from a .env file into os.environ.

    Variables already set in the environment win unless `override` is true.
    Returns the names that were set.
    """
    if env_path is None:
        env_path = Path.cwd() / ".env"

    if not env_path.is_file():
        return []

    loaded: list[str] = []
    for line in env_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if not key or (key in os.environ and not override):
            continue
        os.environ[key] = value.strip('"').strip("'")
        loaded.append(key)
    return loaded


@dataclass(frozen=True)
class WaitHumanConfig:
    api_key: str | None = None
    endpoint: str | None = None

    # Delay between polls when no answer is available yet.
    poll_interval_s: float | None = None

    # Per-request HTTP timeout; the ask deadline is separate.
    http_timeout_s: float | None = None

    # Ask the service to hold the poll open. The local delay still applies.
    long_poll: bool | None = None

    def resolve_api_key(self) -> str:
        api_key = (self.api_key or os.getenv("WAITHUMAN_API_KEY") or "").strip()
        if not api_key:
            raise ValueError("apiKey is mandatory")
        return api_key

    def resolve_endpoint(self) -> str:
        endpoint = self.endpoint or os.getenv("WAITHUMAN_ENDPOINT") or DEFAULT_ENDPOINT
        if endpoint.endswith("/"):
            endpoint = endpoint[:-1]
        return endpoint

    def resolve_poll_interval_s(self) -> float:
        if self.poll_interval_s is not None:
            return float(self.poll_interval_s)
        return float(
            os.getenv("WAITHUMAN_POLL_INTERVAL_S", str(DEFAULT_POLL_INTERVAL_S))
        )

    def resolve_http_timeout_s(self) -> float:
        if self.http_timeout_s is not None:
            return float(self.http_timeout_s)
        return float(os.getenv("WAITHUMAN_HTTP_TIMEOUT_S", str(DEFAULT_HTTP_TIMEOUT_S)))

    def resolve_long_poll(self) -> bool:
        if self.long_poll is not None:
            return self.long_poll
        return _env_flag("WAITHUMAN_LONG_POLL")
