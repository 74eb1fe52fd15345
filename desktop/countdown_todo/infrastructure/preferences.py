"""Local Preferences — compact-mode flag and countdown precision, kept outside the backend.

Invariants:
    - Stored as a flat JSON object of string values under fixed keys
    - Read once (first access), written on every toggle
    - Missing file, unreadable file, or unknown values fall back to defaults
      (compact mode off, minute precision)

Design Decisions:
    - JSON file over the backend: these are per-machine UI preferences, the
      backend never sees them
    - String values ("1"/"0", "hour"/...) keep the file format identical to the
      key/value store the webview used
"""

import json
import logging
from pathlib import Path

from countdown_todo.core.domain_types import CountdownPrecision

logger = logging.getLogger(__name__)

COMPACT_MODE_KEY = "countdown_todo_compact_mode"
COMPACT_PRECISION_KEY = "countdown_todo_compact_precision"

DEFAULT_PRECISION = CountdownPrecision.MINUTE


class PreferenceStore:
    """Key/value preference file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._values: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._values is not None:
            return self._values
        self._values = {}
        if not self.path.exists():
            return self._values
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preferences at {self.path}: {e}")
            return self._values
        if isinstance(raw, dict):
            self._values = {str(k): str(v) for k, v in raw.items()}
        return self._values

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._load()
        values[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(values, ensure_ascii=False, indent=2), encoding="utf-8",
        )

    # --- Typed accessors ------------------------------------------------------

    def compact_mode(self) -> bool:
        return self.get(COMPACT_MODE_KEY) == "1"

    def set_compact_mode(self, enabled: bool) -> None:
        self.set(COMPACT_MODE_KEY, "1" if enabled else "0")

    def compact_precision(self) -> CountdownPrecision:
        value = self.get(COMPACT_PRECISION_KEY)
        try:
            return CountdownPrecision(value)
        except ValueError:
            return DEFAULT_PRECISION

    def set_compact_precision(self, precision: CountdownPrecision) -> None:
        self.set(COMPACT_PRECISION_KEY, CountdownPrecision(precision).value)
