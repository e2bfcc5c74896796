"""Environment helpers used by the settings module."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, unquote, urlparse

TRUE_VALUES = {"1", "true", "t", "yes", "y", "on"}


def load_env_file(base_dir: Path) -> None:
    """Load KEY=VALUE lines from ``base_dir/.env`` without overriding the real environment."""

    env_path = base_dir / ".env"
    if not env_path.exists():
        return
    for raw in env_path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export "):].strip()
        os.environ.setdefault(key, value.strip().strip('"').strip("'"))


def env(key: str, default: Optional[str] = None, *aliases: str) -> Optional[str]:
    for name in (key, *aliases):
        value = os.environ.get(name)
        if value not in (None, ""):
            return value
    return default


def env_bool(key: str, default: bool = False) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


def env_int(key: str, default: int) -> int:
    value = os.environ.get(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}.") from exc


def env_list(key: str, default: List[str]) -> List[str]:
    value = os.environ.get(key)
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


def database_from_url(url: str, base_dir: Path) -> Dict[str, Any]:
    """Translate a DATABASE_URL into a Django ``DATABASES['default']`` entry.

    Supported schemes are ``mysql://`` / ``mariadb://`` and ``sqlite://``.
    ``sqlite:///relative.db`` resolves against ``base_dir``; ``sqlite://:memory:``
    and a bare ``sqlite://`` give an in-memory database.
    """

    parsed = urlparse(url)
    if parsed.scheme == "sqlite":
        raw_path = unquote(url[len("sqlite://"):])
        if raw_path in ("", "/", ":memory:", "/:memory:"):
            name: Any = ":memory:"
        elif raw_path.startswith("//"):
            name = raw_path[1:]
        else:
            name = base_dir / raw_path.lstrip("/")
        return {"ENGINE": "django.db.backends.sqlite3", "NAME": name}

    if parsed.scheme in {"mysql", "mariadb"}:
        qs = parse_qs(parsed.query)
        charset = (qs.get("charset", ["utf8mb4"]) or ["utf8mb4"])[0]
        return {
            "ENGINE": "django.db.backends.mysql",
            "NAME": (parsed.path or "/").lstrip("/"),
            "USER": unquote(parsed.username or ""),
            "PASSWORD": unquote(parsed.password or ""),
            "HOST": parsed.hostname or "localhost",
            "PORT": str(parsed.port or 3306),
            "OPTIONS": {"charset": charset},
            "CONN_MAX_AGE": 60,
        }

    raise ValueError("Only mysql://, mariadb:// or sqlite:// DATABASE_URLs are supported.")
