from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Protocol

from PIL import Image, ImageDraw

from ..common.datetime_utils import now_local
from ..core.enums import PhotoEvent

logger = logging.getLogger(__name__)

PHOTO_SIZE = (320, 240)


def generate_photo_file_name(employee_id: int, event: PhotoEvent, taken_at: datetime) -> str:
    return f"{taken_at:%Y%m%d_%H%M%S}_emp{employee_id}_{event.value}.jpg"


class PhotoCapture(Protocol):
    def capture(self, employee_id: int, event: PhotoEvent) -> Optional[str]:
        """Return a storage handle for the photo, or None when no photo was taken."""
        raise NotImplementedError

    def discard(self, handle: str) -> None:
        """Remove a photo whose shift was never stored."""
        raise NotImplementedError


class NullPhotoCapture(PhotoCapture):
    def capture(self, employee_id: int, event: PhotoEvent) -> Optional[str]:
        return None

    def discard(self, handle: str) -> None:
        return None


class PlaceholderPhotoCapture(PhotoCapture):
    """Stands in for a camera: writes a labelled JPEG so every event has a photo file.

    Disk errors degrade to "no photo".
    """

    def __init__(self, photo_dir: str | Path, *, clock: Callable[[], datetime] = now_local):
        self._photo_dir = Path(photo_dir)
        self._clock = clock

    def capture(self, employee_id: int, event: PhotoEvent) -> Optional[str]:
        taken_at = self._clock()
        target = self._photo_dir / f"{taken_at:%Y-%m}" / generate_photo_file_name(employee_id, event, taken_at)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            image = Image.new("RGB", PHOTO_SIZE, color=(64, 64, 64))
            draw = ImageDraw.Draw(image)
            draw.rectangle([(0, 0), (PHOTO_SIZE[0] - 1, PHOTO_SIZE[1] - 1)], outline=(200, 200, 200))
            label = "CLOCK IN" if event == PhotoEvent.CLOCK_IN else "CLOCK OUT"
            draw.text((20, 80), f"Employee {employee_id}", fill=(255, 255, 255))
            draw.text((20, 110), label, fill=(255, 255, 255))
            draw.text((20, 140), f"{taken_at:%Y-%m-%d %H:%M:%S}", fill=(255, 255, 255))
            image.save(target, format="JPEG", quality=85)
        except OSError:
            logger.warning("Photo capture failed for employee %s (%s)", employee_id, event.value, exc_info=True)
            return None
        return str(target)

    def discard(self, handle: str) -> None:
        try:
            Path(handle).unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not remove orphaned photo %s", handle, exc_info=True)
