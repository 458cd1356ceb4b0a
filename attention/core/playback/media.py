from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Collection, Iterable, Literal, Optional, Sequence

from attention.shared.paths import bundled_media_dir, fallback_media_dirs

log = logging.getLogger(__name__)

MediaKind = Literal["VIDEO", "IMAGE"]

VIDEO_EXTENSIONS = frozenset({"mp4", "mov", "m4v", "avi", "mkv", "webm"})
IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "heic", "heif", "gif", "webp", "bmp", "tiff", "tif"})


def media_kind_for(path: Path) -> Optional[MediaKind]:
    ext = path.suffix.lower().lstrip(".")
    if ext in VIDEO_EXTENSIONS:
        return "VIDEO"
    if ext in IMAGE_EXTENSIONS:
        return "IMAGE"
    return None


@dataclass(frozen=True)
class MediaItem:
    path: Path
    kind: MediaKind

    @classmethod
    def from_path(cls, path: Path) -> Optional["MediaItem"]:
        kind = media_kind_for(path)
        if kind is None:
            return None
        return cls(path=path, kind=kind)

    @property
    def is_video(self) -> bool:
        return self.kind == "VIDEO"

    @property
    def name(self) -> str:
        return self.path.name


def scan_directory(directory: Path) -> list[MediaItem]:
    try:
        entries = sorted(directory.iterdir())
    except OSError:
        return []
    items = []
    for entry in entries:
        if not entry.is_file():
            continue
        item = MediaItem.from_path(entry)
        if item is not None:
            items.append(item)
    return items


class MediaLibrary:
    """Unordered set of playable media. Selection is always random."""

    def __init__(self, items: Iterable[MediaItem] = ()) -> None:
        self._items: tuple[MediaItem, ...] = tuple(dict.fromkeys(items))

    @classmethod
    def scan(cls, media_folder: Optional[str] = None, default_dirs: Optional[Sequence[Path]] = None) -> "MediaLibrary":
        """Build a library from the first configured source that has media.

        Order: the user's media folder, then the bundled media directory,
        then every fallback location combined.
        """
        if media_folder:
            items = scan_directory(Path(media_folder).expanduser())
            if items:
                log.info("Loaded %d media files from %s", len(items), media_folder)
                return cls(items)
            log.warning("Media folder %s has no playable files, using defaults", media_folder)

        items = scan_directory(bundled_media_dir())
        if items:
            return cls(items)

        dirs = default_dirs if default_dirs is not None else fallback_media_dirs()
        items = [item for d in dirs for item in scan_directory(d)]
        if not items:
            log.warning("No media found. Place videos or images in ~/Movies or set a media folder.")
        return cls(items)

    @property
    def items(self) -> tuple[MediaItem, ...]:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def pick_next(
        self,
        current: Optional[MediaItem],
        rng: random.Random,
        exclude: Collection[MediaItem] = (),
    ) -> Optional[MediaItem]:
        """Random item other than ``current``; None when ``exclude`` leaves nothing."""
        pool = [item for item in self._items if item not in exclude]
        if not pool:
            return None
        if len(pool) == 1:
            return pool[0]
        candidates = [item for item in pool if item != current]
        return rng.choice(candidates or pool)
