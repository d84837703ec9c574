from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from jqcal.exceptions import ConfigError

logger = logging.getLogger(__name__)

API_URL = "https://api.jquants.com/v1"
DEFAULT_TIMEOUT = 30.0

MAIL_ADDRESS_KEY = "JQ_MAIL_ADDRESS"
PASSWORD_KEY = "JQ_PASSWORD"
API_URL_KEY = "JQ_API_URL"
TIMEOUT_KEY = "JQ_TIMEOUT"


def _parse_env_line(line: str) -> tuple[str, str] | None:
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    return key.strip(), value.strip().strip('"').strip("'")


def load_env_file_if_present(path: str | Path = ".env", override: bool = False) -> dict[str, str]:
    """Load ``KEY=VALUE`` pairs from a .env file into ``os.environ``.

    Blank lines, ``#`` comments and lines without ``=`` are skipped and quoted
    values are unquoted. Variables already present in the environment are
    kept unless ``override`` is true. Returns every pair read from the file,
    whether or not it was applied. A missing file yields an empty dict.
    """
    env_path = Path(path)
    if not env_path.exists():
        return {}

    loaded: dict[str, str] = {}
    for raw in env_path.read_text(encoding="utf-8").splitlines():
        pair = _parse_env_line(raw)
        if pair is None:
            continue
        key, value = pair
        if override or key not in os.environ:
            os.environ[key] = value
        loaded[key] = value
    logger.debug(f"Loaded {len(loaded)} variables from {env_path}")
    return loaded


def load_credentials(
    mail_key: str = MAIL_ADDRESS_KEY,
    password_key: str = PASSWORD_KEY,
    dotenv: bool = True,
    env_file: str | Path = ".env",
) -> tuple[str, str]:
    """Return ``(mail_address, password)`` from the environment or .env.

    Raises ConfigError if either value is missing.
    """
    if dotenv:
        load_env_file_if_present(env_file)
    mail_address = os.getenv(mail_key)
    password = os.getenv(password_key)
    pairs = ((mail_key, mail_address), (password_key, password))
    missing = [key for key, value in pairs if not value]
    if missing:
        raise ConfigError(f"Missing credentials. Set {', '.join(missing)} in environment or .env")
    return mail_address, password  # type: ignore[return-value]


@dataclass(frozen=True)
class Settings:
    api_url: str = API_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``JQ_API_URL`` and ``JQ_TIMEOUT``, falling back to defaults."""
        api_url = os.getenv(API_URL_KEY) or API_URL
        raw_timeout = os.getenv(TIMEOUT_KEY)
        if not raw_timeout:
            return cls(api_url=api_url.rstrip("/"))
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigError(f"{TIMEOUT_KEY} must be a number, got {raw_timeout!r}") from e
        if timeout <= 0:
            raise ConfigError(f"{TIMEOUT_KEY} must be positive, got {raw_timeout!r}")
        return cls(api_url=api_url.rstrip("/"), timeout=timeout)
