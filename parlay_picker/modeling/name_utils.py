from __future__ import annotations

import json
import re
import unicodedata
from pathlib import Path

from parlay_picker.core.config import settings

_GENERATIONAL = frozenset({"jr", "sr", "ii", "iii", "iv", "v"})
_NON_WORD = re.compile(r"[^a-zA-Z0-9\s]")
_OVERRIDES: dict[str, str] | None = None


def _read_overrides(path: Path) -> dict[str, str]:
    """Alias -> canonical name map; a missing or unreadable file means no aliases."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    if not isinstance(payload, dict):
        return {}
    return {
        alias.strip().lower(): canonical.strip().lower()
        for alias, canonical in payload.items()
        if isinstance(alias, str) and isinstance(canonical, str)
    }


def _overrides() -> dict[str, str]:
    global _OVERRIDES  # noqa: PLW0603
    if _OVERRIDES is None:
        _OVERRIDES = _read_overrides(Path(settings.player_name_overrides_path))
    return _OVERRIDES


def normalize_player_name(name: str | None) -> str:
    """Lowercase ASCII matching key: accents, punctuation and Jr./III suffixes removed."""
    if not name:
        return ""
    decomposed = unicodedata.normalize("NFKD", name)
    ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    words = _NON_WORD.sub(" ", ascii_only).lower().split()
    while words and words[-1] in _GENERATIONAL:
        words.pop()
    key = " ".join(words)
    return _overrides().get(key, key)


def abbreviate_player_name(name: str | None) -> str:
    """Short display label: "LeBron James" -> "L. James"."""
    first, _, rest = (name or "").strip().partition(" ")
    if not rest.strip():
        return first
    return f"{first[0]}. {' '.join(rest.split())}"
