"""
Application settings.

Defaults live in the dataclass; any field can be overridden with a CHESS_<FIELD NAME> environment variable,
e.g. CHESS_SEARCH_DEPTH=4 or CHESS_CORS_ORIGINS="http://localhost:3000,http://localhost:5173".
"""

import os
from dataclasses import dataclass, field, fields
from typing import Mapping, Self

ENV_PREFIX = "CHESS_"


@dataclass(frozen=True)
class Settings:
    # depth of the computer-move search (plies)
    search_depth: int = 3
    # NOTE: games only live as long as the process. Default is an in-memory SQLite database.
    database_url: str = "sqlite:///:memory:"
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = field(default=("*",))
    static_dir: str = "static"
    host: str = "0.0.0.0"
    port: int = 8080

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        """Build the settings, letting environment variables override the defaults."""
        environ = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for setting in fields(cls):
            raw = environ.get(f"{ENV_PREFIX}{setting.name.upper()}")
            if raw is None:
                continue
            overrides[setting.name] = _parse(setting.name, raw, setting.default)
        return cls(**overrides)  # type: ignore[arg-type]


def _parse(name: str, raw: str, default: object) -> object:
    """Convert the raw environment string into the type of the default value"""
    if isinstance(default, int):
        try:
            return int(raw)
        except ValueError as exc:
            raise ValueError(f"{ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}") from exc
    if isinstance(default, tuple):
        return tuple(part.strip() for part in raw.split(",") if part.strip())
    return raw


SETTINGS = Settings.from_env()
