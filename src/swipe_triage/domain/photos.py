"""Domain models for photo records."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


class PhotoAction(StrEnum):
    """Decision applied to a photo."""

    KEEP = "keep"
    DELETE = "delete"
    SHARE = "share"
    PRIVATE = "private"


class PhotoStatus(StrEnum):
    """Lifecycle status of a photo."""

    PENDING = "pending"
    PROCESSED = "processed"
    DELETED = "deleted"
    SHARED = "shared"
    PRIVATE = "private"


@dataclass(frozen=True)
class PhotoRecord:
    """A photo in the library with immutable metadata and a one-shot status."""

    id: str
    uri: str
    width: int
    height: int
    file_size_bytes: int
    mime_type: str
    created_at: datetime
    modified_at: datetime
    status: PhotoStatus = PhotoStatus.PENDING
    processed_at: datetime | None = None
    applied_action: PhotoAction | None = None
    latitude: float | None = None
    longitude: float | None = None

    @property
    def can_be_processed(self) -> bool:
        """Return True while the photo is still pending."""
        return self.status == PhotoStatus.PENDING

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def is_landscape(self) -> bool:
        return self.aspect_ratio > 1

    @property
    def is_portrait(self) -> bool:
        return self.aspect_ratio < 1

    def is_square(self, tolerance: float = 0.1) -> bool:
        """Return True when the aspect ratio is within tolerance of 1."""
        return abs(self.aspect_ratio - 1) <= tolerance

    @property
    def formatted_file_size(self) -> str:
        """Human-readable file size using 1024-based units."""
        size = self.file_size_bytes
        if size <= 0:
            return "0 Bytes"
        index = 0
        while index < len(_SIZE_UNITS) - 1 and size >= 1024 ** (index + 1):
            index += 1
        value = round(size / 1024**index, 2)
        return f"{value:g} {_SIZE_UNITS[index]}"
