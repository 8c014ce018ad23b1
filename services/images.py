"""Image checks for uploads."""
from __future__ import annotations

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from utils.exceptions import ValidationError


def verify_image(path: Path | str) -> Path:
    """Return ``path`` when it points at a readable image file."""
    candidate = Path(path)
    if not candidate.is_file():
        raise ValidationError(f"Image file not found: {candidate.name}", ["image"])
    try:
        with Image.open(candidate) as img:
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ValidationError(
            f"{candidate.name} is not a supported image", ["image"]
        ) from exc
    return candidate


__all__ = ["verify_image"]
