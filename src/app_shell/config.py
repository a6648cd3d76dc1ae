import os
from collections.abc import Mapping
from pathlib import Path

from src.rules.loader import load_assignments_file, parse_assignments_json
from src.rules.models import QueryAssignments

REQUIRED_ENV = ("MEALIE_RETRIEVAL_URL", "MEALIE_TOKEN")
DEFAULT_STARTUP_GRACE_SECS = 30
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SettingsError(ValueError):
    """Raised when required environment configuration is missing or malformed."""


def read_token(value: str) -> str:
    """
    Resolve the API token.

    If the value names a readable file (e.g. a docker secret) the file's
    trimmed content is the token, otherwise the value itself is.
    """
    token = value.strip()
    if not token:
        return token
    try:
        candidate = Path(token)
        if candidate.is_file():
            return candidate.read_text().strip()
    except OSError:
        # not a usable path, e.g. a long JWT exceeding the file name limit
        pass
    return token


def _log_level(env: Mapping[str, str]) -> str:
    level = env.get("MA_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if level not in LOG_LEVELS:
        raise SettingsError(
            f"MA_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {level!r}"
        )
    return level


def _int_env(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise SettingsError(f"{key} must be an integer, got {raw!r}") from e


def load_query_assignments(env: Mapping[str, str]) -> QueryAssignments:
    """MA_QUERY_ASSIGNMENTS_FILE (YAML) wins over inline MA_QUERY_ASSIGNMENTS (JSON)."""
    file_path = env.get("MA_QUERY_ASSIGNMENTS_FILE", "")
    if file_path:
        return load_assignments_file(Path(file_path))
    return parse_assignments_json(env.get("MA_QUERY_ASSIGNMENTS", ""))


class Settings:
    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        env = os.environ if env is None else env

        missing = [key for key in REQUIRED_ENV if not env.get(key)]
        if missing:
            raise SettingsError(
                f"environment variable(s) not defined or empty: {', '.join(missing)}"
            )

        self.mealie_url = env["MEALIE_RETRIEVAL_URL"].rstrip("/")
        self.mealie_token = read_token(env["MEALIE_TOKEN"])
        self.startup_grace_secs = _int_env(
            env, "MA_STARTUP_GRACE_SECS", DEFAULT_STARTUP_GRACE_SECS
        )
        self.log_level = _log_level(env)
        self.assignments = load_query_assignments(env)

    def __repr__(self) -> str:
        return (
            f"Settings(mealie_url={self.mealie_url!r}, mealie_token='***', "
            f"startup_grace_secs={self.startup_grace_secs}, log_level={self.log_level!r}, "
            f"assignments={len(self.assignments.assignments)}, "
            f"repeat_secs={self.assignments.repeat_secs}, "
            f"timeout_secs={self.assignments.timeout_secs})"
        )
