"""
Local annotation store for per-user highlights, notes and seen-items.

Values are JSON-encoded under "{prefix}:{section}:{user_id}" keys. The
records are independent of the corpus lifecycle: they survive corpus
reloads and version switches. Corrupt stored JSON never propagates to
callers; it reads back as an empty collection.
"""

import json
import random
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, TypeVar

from ..core import get_config_or_default, get_logger, StorageParseError
from .repository import KeyValueRepository, KeyValueStorage

logger = get_logger(__name__)

T = TypeVar("T")

HIGHLIGHTS = "highlights"
NOTES = "notes"
SEEN_ITEMS = "seen_items"

# Empty value returned for each section when nothing usable is stored
SECTION_DEFAULTS: Dict[str, type] = {
    HIGHLIGHTS: dict,
    NOTES: dict,
    SEEN_ITEMS: list,
}


def build_key(prefix: str, section: str, user_id: Any) -> str:
    """Namespaced storage key for one user's section."""
    return f"{prefix}:{section}:{user_id}"


def _item_id(item: Any) -> Any:
    """Identifier of a pickable item: its ``id`` attribute or key, else itself."""
    if isinstance(item, dict):
        return item.get("id")
    return getattr(item, "id", item)


class AnnotationStore:
    """
    Per-user annotation persistence over a key/value storage.

    Provides typed load/save helpers for highlights, notes and the
    seen-list, plus the unseen-item picker used for daily verses.
    """

    def __init__(self, storage: KeyValueStorage = None, prefix: str = None):
        """
        Initialize the store.

        Args:
            storage: Key/value backend. Defaults to the SQLite repository
                     at the configured database path.
            prefix: Key namespace. Defaults to config storage.prefix.
        """
        self.storage = storage if storage is not None else KeyValueRepository()
        self.prefix = prefix or get_config_or_default().storage.prefix

    def key(self, user_id: Any, section: str) -> str:
        return build_key(self.prefix, section, user_id)

    def _check_section(self, section: str) -> None:
        if section not in SECTION_DEFAULTS:
            raise ValueError(
                f"Unknown annotation section '{section}', "
                f"expected one of {sorted(SECTION_DEFAULTS)}"
            )

    def _decode(self, key: str, raw: str, default_type: type) -> Any:
        """
        Decode a stored value.

        Raises:
            StorageParseError: If the value is not JSON of the expected type.
        """
        try:
            value = json.loads(raw)
        except ValueError as e:
            raise StorageParseError(f"Stored value is not valid JSON: {e}", key=key)

        if not isinstance(value, default_type):
            raise StorageParseError(
                f"Stored value has type {type(value).__name__}, "
                f"expected {default_type.__name__}",
                key=key
            )
        return value

    def load(self, user_id: Any, section: str) -> Any:
        """
        Load one user's section.

        Args:
            user_id: Owner of the annotations.
            section: One of highlights, notes, seen_items.

        Returns:
            The stored value, or {} / [] when missing or corrupt.
        """
        self._check_section(section)
        default_type = SECTION_DEFAULTS[section]

        if not user_id:
            return default_type()

        key = self.key(user_id, section)
        raw = self.storage.get(key)
        if not raw:
            return default_type()

        try:
            return self._decode(key, raw, default_type)
        except StorageParseError as e:
            logger.warning(f"Ignoring corrupt annotation data at {e.key}: {e.message}")
            return default_type()

    def save(self, user_id: Any, section: str, value: Any) -> None:
        """
        Store one user's section as JSON. No-op without a user id.

        Args:
            user_id: Owner of the annotations.
            section: One of highlights, notes, seen_items.
            value: JSON-serializable value.
        """
        self._check_section(section)
        if not user_id:
            return

        self.storage.set(self.key(user_id, section), json.dumps(value, ensure_ascii=False))

    def delete(self, user_id: Any, section: str) -> None:
        """Remove one user's section."""
        self._check_section(section)
        if user_id:
            self.storage.delete(self.key(user_id, section))

    def clear_user(self, user_id: Any) -> None:
        """Remove every section stored for a user."""
        for section in SECTION_DEFAULTS:
            self.delete(user_id, section)

    def load_highlights(self, user_id: Any) -> Dict[str, Any]:
        return self.load(user_id, HIGHLIGHTS)

    def save_highlights(self, user_id: Any, highlights: Dict[str, Any]) -> None:
        self.save(user_id, HIGHLIGHTS, highlights)

    def load_notes(self, user_id: Any) -> Dict[str, Any]:
        return self.load(user_id, NOTES)

    def save_notes(self, user_id: Any, notes: Dict[str, Any]) -> None:
        self.save(user_id, NOTES, notes)

    def load_seen(self, user_id: Any) -> List[Any]:
        return self.load(user_id, SEEN_ITEMS)

    def save_seen(self, user_id: Any, seen: List[Any]) -> None:
        self.save(user_id, SEEN_ITEMS, seen)

    def toggle_highlight(self, user_id: Any, verse_id: str) -> bool:
        """
        Flip the highlight on a verse.

        Args:
            user_id: Owner of the highlights.
            verse_id: Verse to toggle.

        Returns:
            True if the verse is now highlighted.
        """
        highlights = self.load_highlights(user_id)

        if highlights.get(verse_id):
            highlights.pop(verse_id)
            highlighted = False
        else:
            highlights[verse_id] = True
            highlighted = True

        self.save_highlights(user_id, highlights)
        return highlighted

    def save_note(self, user_id: Any, verse_id: str, text: str) -> Optional[Dict[str, str]]:
        """
        Save or delete the note attached to a verse.

        Args:
            user_id: Owner of the notes.
            verse_id: Verse the note belongs to.
            text: Note body; blank text deletes the note.

        Returns:
            The stored note record, or None when the note was removed.
        """
        notes = self.load_notes(user_id)
        text = (text or "").strip()

        if not text:
            notes.pop(verse_id, None)
            self.save_notes(user_id, notes)
            return None

        note = {
            "text": text,
            "updatedAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        }
        notes[verse_id] = note
        self.save_notes(user_id, notes)
        return note

    def pick_next_unseen(
        self,
        user_id: Any,
        items: Sequence[T],
        rng: random.Random = None
    ) -> Optional[T]:
        """
        Pick a random item the user has not been shown in this cycle.

        Once every item has been seen, the pick comes from the full set
        and the seen-list restarts with only that item, so the cycle
        begins again instead of stalling.

        Args:
            user_id: Owner of the seen-list.
            items: Candidates; each identified by its ``id``.
            rng: Random source (injectable for deterministic tests).

        Returns:
            The chosen item, or None for no user or no items.
        """
        if not user_id or not items:
            return None

        rng = rng or random
        seen = self.load_seen(user_id)
        seen_ids = {str(item_id) for item_id in seen}

        available = [item for item in items if str(_item_id(item)) not in seen_ids]

        if available:
            choice = rng.choice(available)
            seen.append(_item_id(choice))
        else:
            choice = rng.choice(list(items))
            seen = [_item_id(choice)]
            logger.debug(f"Seen-list exhausted for user {user_id}; starting a new cycle")

        self.save_seen(user_id, seen)
        return choice


if __name__ == "__main__":
    from .repository import MemoryRepository

    store = AnnotationStore(storage=MemoryRepository(), prefix="demo")
    items = [{"id": f"v{i}"} for i in range(3)]

    for _ in range(4):
        print(f"Picked: {store.pick_next_unseen('u1', items)['id']}  seen={store.load_seen('u1')}")

    store.toggle_highlight("u1", "v1")
    store.save_note("u1", "v1", "  remember this  ")
    print(f"Highlights: {store.load_highlights('u1')}")
    print(f"Notes: {store.load_notes('u1')}")
