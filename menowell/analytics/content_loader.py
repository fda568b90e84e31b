"""Load, validate, and hot-reload the educational content catalog.

The catalog lives in ``content_library.yaml`` alongside this module.  It is
loaded once on first use and cached.  Call ``reload_content_library()`` to
re-read it (or switch to another file) without a restart.

Usage::

    from menowell.analytics.content_loader import get_content_library

    library = get_content_library()
    library.by_category(ContentCategory.symptoms)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from menowell.models.checkins import ContentCategory, ContentItem

logger = logging.getLogger("menowell.analytics.content")

_CONTENT_PATH = Path(__file__).parent / "content_library.yaml"


@dataclass
class ContentLibrary:
    """Validated in-memory content catalog.

    Attributes:
        version: Catalog schema version string.
        items:   Content items in file order.
    """

    version: str
    items: list[ContentItem] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def get(self, item_id: str) -> ContentItem | None:
        return next((item for item in self.items if item.id == item_id), None)

    def by_category(self, category: ContentCategory) -> list[ContentItem]:
        return [item for item in self.items if item.category == category]

    def unlocked_for(self, persona: str) -> list[ContentItem]:
        """Items available to a persona ('Explorer', 'Phoenix', ...).

        Items with no ``unlocked_by`` list are available to everyone.
        """
        return [
            item for item in self.items
            if not item.unlocked_by or persona in item.unlocked_by
        ]


class ContentLibraryError(ValueError):
    """Raised when content_library.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError:   If the file does not exist.
        ContentLibraryError: If the YAML is malformed.
    """
    try:
        import yaml  # pyyaml
    except ImportError as exc:
        raise ImportError(
            "pyyaml is required for content loading. Install with: pip install pyyaml"
        ) from exc

    if not path.exists():
        raise FileNotFoundError(f"Content library not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ContentLibraryError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> ContentLibrary:
    """Validate every catalog entry, collecting all errors before raising.

    Raises:
        ContentLibraryError: If any item is invalid or ids repeat.
    """
    errors: list[str] = []

    items_raw = raw.get("items")
    if not isinstance(items_raw, list):
        raise ContentLibraryError("'items' must be a list of content entries")

    items: list[ContentItem] = []
    seen_ids: set[str] = set()
    for index, entry in enumerate(items_raw):
        if not isinstance(entry, dict):
            errors.append(f"items[{index}] must be a mapping")
            continue
        try:
            item = ContentItem.model_validate(entry)
        except ValidationError as exc:
            for err in exc.errors():
                loc = ".".join(str(part) for part in err["loc"])
                errors.append(f"items[{index}].{loc}: {err['msg']}")
            continue
        if item.id in seen_ids:
            errors.append(f"items[{index}] duplicates id '{item.id}'")
            continue
        seen_ids.add(item.id)
        items.append(item)

    if errors:
        raise ContentLibraryError(
            f"content library has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return ContentLibrary(version=str(raw.get("version", "1.0")), items=items)


def load_content_library(path: Path | None = None) -> ContentLibrary:
    """Load and validate the content catalog from disk.

    Args:
        path: Override path to YAML. Uses the bundled content_library.yaml by default.
    """
    target = path or _CONTENT_PATH
    library = _validate_and_build(_load_yaml(target))
    logger.info(
        "Loaded content library v%s (%d items) from %s",
        library.version, len(library), target,
    )
    return library


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_library: ContentLibrary | None = None
_library_lock = threading.Lock()


def get_content_library() -> ContentLibrary:
    """Return the global ContentLibrary, loading it on first call.  Thread-safe."""
    global _library
    if _library is None:
        with _library_lock:
            if _library is None:
                _library = load_content_library()
    return _library


def reload_content_library(path: Path | None = None) -> ContentLibrary:
    """Reload the catalog and replace the global singleton.

    If validation fails the previous catalog stays in place and the error is
    re-raised.
    """
    global _library
    new_library = load_content_library(path)
    with _library_lock:
        old_version = _library.version if _library else "none"
        _library = new_library
    logger.info("Reloaded content library: %s → %s", old_version, new_library.version)
    return new_library
