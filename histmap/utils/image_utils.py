"""Image processing utilities."""

from pathlib import Path
from typing import Union

from PIL import Image


def load_image(path: Union[str, Path], mode: str = "RGB") -> Image.Image:
    """Load an image from file and decode it fully.

    The file handle is closed before returning, so the image can be cached
    without keeping the file open.
    """
    with Image.open(path) as img:
        img.load()
        return img.convert(mode) if img.mode != mode else img.copy()


def save_image(image: Image.Image, path: Union[str, Path], quality: int = 95) -> None:
    """Save an image to file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() in (".jpg", ".jpeg"):
        # Convert to RGB for JPEG
        if image.mode == "RGBA":
            background = Image.new("RGB", image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[3])
            image = background
        image.save(path, quality=quality)
    else:
        image.save(path)


def resize_image(
    image: Image.Image,
    size: tuple[int, int],
    resample: int = Image.Resampling.NEAREST,
) -> Image.Image:
    """Resize image to specified size.

    Nearest-neighbour is the default: tiles are only ever upscaled by whole
    powers of two, and it keeps the upscaled map crisp.
    """
    if image.size == size:
        return image
    return image.resize(size, resample=resample)


def crop_region(image: Image.Image, left: int, top: int, size: int) -> Image.Image:
    """Crop a ``size`` x ``size`` square whose top-left corner is ``(left, top)``.

    Areas outside the source image come back black.
    """
    return image.crop((left, top, left + size, top + size))
