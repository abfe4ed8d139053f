"""Palette image decoder built on PIL.

Returns a DecodedImage. Indexed ('P') images keep their native palette
indices so the mapper does not have to search the palette per pixel;
every other mode is expanded to RGB triples (and later rejected by the
mapper with WrongColorMode).
"""

import os

import numpy as np
from PIL import Image, UnidentifiedImageError

from png2ilbm.core.errors import DecodeError
from png2ilbm.core.types import DecodedImage


def decode(path: str) -> DecodedImage:
    """Open `path` with PIL and return its first frame as a DecodedImage."""
    if not os.path.exists(path):
        raise DecodeError(path, 'file not found')
    if not os.path.isfile(path):
        raise DecodeError(path, 'not a file')
    try:
        with Image.open(path) as image:
            image.load()
            return from_image(image)
    except Image.DecompressionBombError as e:
        raise DecodeError(path, str(e)) from e
    except UnidentifiedImageError:
        raise DecodeError(path, 'unrecognised image format') from None
    except (OSError, SyntaxError, ValueError) as e:
        raise DecodeError(path, str(e)) from e


def from_image(image: Image.Image) -> DecodedImage:
    """Convert an already opened PIL image."""
    width, height = image.size
    if image.mode != 'P':
        rgb = np.asarray(image.convert('RGB'), dtype=np.uint8)
        return DecodedImage(
            width=width,
            height=height,
            mode=image.mode,
            pixels=rgb.reshape(-1, 3),
        )

    raw = image.getpalette('RGB')
    palette = bytes(raw) if raw is not None else None
    indices = np.asarray(image, dtype=np.uint8).reshape(-1)
    return DecodedImage(
        width=width,
        height=height,
        mode='P',
        palette=palette,
        indices=indices,
    )
