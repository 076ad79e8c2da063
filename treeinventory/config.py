"""Run options and persistent JSON defaults.

``InventoryOptions`` is built once at startup and passed explicitly into the
collector. Defaults for the hashing flags live in a small JSON file in the
platform config directory; reads are forgiving and fall back to built-ins.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .hashing import DEFAULT_CHUNK_SIZE

logger = logging.getLogger(__name__)

APP_NAME = "treeinventory"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

HASH_FAILURE_SKIP = "skip"
HASH_FAILURE_EMPTY = "empty"
HASH_FAILURE_POLICIES = (HASH_FAILURE_SKIP, HASH_FAILURE_EMPTY)

DEFAULT_JOBS = 1


@dataclass(frozen=True)
class InventoryOptions:
    """Immutable configuration for one inventory run."""

    root: Path
    output: Path | None = None
    md5: bool = False
    hash_failure_policy: str = HASH_FAILURE_SKIP
    chunk_size: int = DEFAULT_CHUNK_SIZE
    jobs: int = DEFAULT_JOBS

    def __post_init__(self) -> None:
        if self.hash_failure_policy not in HASH_FAILURE_POLICIES:
            raise ValueError(f"unknown hash failure policy: {self.hash_failure_policy!r}")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be >= 1")
        if self.jobs <= 0:
            raise ValueError("jobs must be >= 1")


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> bool:
    """Persist config data as pretty-printed JSON.

    Returns ``False`` (after logging a warning) when the file cannot be
    written; saving defaults never aborts a run.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not save defaults to %s: %s", CONFIG_PATH, exc)
        return False
    return True


def _positive_int(value: object) -> int | None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def load_defaults() -> dict[str, object]:
    """Return sanitized option defaults from the config file.

    Only recognised keys with valid values are returned, so callers can pass
    the result straight into ``InventoryOptions``.
    """
    data = load_config()
    defaults: dict[str, object] = {}

    md5 = data.get("md5")
    if isinstance(md5, bool):
        defaults["md5"] = md5

    policy = data.get("hash_failure_policy")
    if isinstance(policy, str) and policy in HASH_FAILURE_POLICIES:
        defaults["hash_failure_policy"] = policy

    for key in ("chunk_size", "jobs"):
        value = _positive_int(data.get(key))
        if value is not None:
            defaults[key] = value
    return defaults


def save_defaults(options: InventoryOptions) -> bool:
    """Persist the reusable parts of ``options``, keeping unrelated keys."""
    data = load_config()
    data.update(
        {
            "md5": options.md5,
            "hash_failure_policy": options.hash_failure_policy,
            "chunk_size": options.chunk_size,
            "jobs": options.jobs,
        }
    )
    return save_config(data)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "HASH_FAILURE_SKIP",
    "HASH_FAILURE_EMPTY",
    "HASH_FAILURE_POLICIES",
    "InventoryOptions",
    "load_config",
    "save_config",
    "load_defaults",
    "save_defaults",
]
