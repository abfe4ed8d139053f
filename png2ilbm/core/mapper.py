"""Palette validation and pixel mapping: DecodedImage -> IlbmImage.

Checks run in a fixed order and the first failure aborts the build:
colour mode, palette presence, palette size, dimensions, width policy,
then every pixel.
"""

import numpy as np

from png2ilbm.core.errors import (
    EmptyPalette,
    ImageTooLarge,
    InvalidIndex,
    InvalidPixel,
    NoPalette,
    PixelCountMismatch,
    TooManyColors,
    UnalignedWidth,
    WrongColorMode,
)
from png2ilbm.core.types import BitmapHeader, Color, DecodedImage, IlbmImage

MAX_COLORS = 255
MAX_DIMENSION = 0xFFFF


def bitplane_count(num_colors: int) -> int:
    """ceil(log2(num_colors)); a single colour needs no planes."""
    return (num_colors - 1).bit_length()


def split_palette(raw: bytes) -> tuple[Color, ...]:
    """Group raw RGB bytes into (r, g, b) tuples. A trailing partial entry is dropped."""
    n = len(raw) // 3
    return tuple((raw[i * 3], raw[i * 3 + 1], raw[i * 3 + 2]) for i in range(n))


def _pack(rgb: np.ndarray) -> np.ndarray:
    rgb = rgb.astype(np.uint32)
    return (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]


def map_pixels(pixels: np.ndarray, palette: tuple[Color, ...]) -> np.ndarray:
    """Find the palette index of every RGB pixel by exact match.

    Duplicate palette colours resolve to their first occurrence. Raises
    InvalidPixel for the first pixel (row-major) with no match.
    """
    lookup: dict[int, int] = {}
    for index, (r, g, b) in enumerate(palette):
        lookup.setdefault((r << 16) | (g << 8) | b, index)

    keys = _pack(pixels.reshape(-1, 3))
    unique, inverse = np.unique(keys, return_inverse=True)
    table = np.array([lookup.get(int(k), -1) for k in unique], dtype=np.int16)
    mapped = table[inverse.reshape(-1)]

    missing = np.flatnonzero(mapped < 0)
    if missing.size:
        r, g, b = (int(c) for c in pixels.reshape(-1, 3)[missing[0]])
        raise InvalidPixel((r, g, b))
    return mapped.astype(np.uint8)


def check_indices(indices: np.ndarray, num_colors: int) -> np.ndarray:
    """Validate native palette indices against the palette size."""
    indices = np.asarray(indices).reshape(-1)
    bad = np.flatnonzero(indices >= num_colors)
    if bad.size:
        raise InvalidIndex(int(indices[bad[0]]), num_colors)
    return indices.astype(np.uint8)


def build(decoded: DecodedImage, width_policy: str = 'pad') -> IlbmImage:
    """Validate a decoded image and produce the canonical IlbmImage."""
    if decoded.mode != 'P':
        raise WrongColorMode(decoded.mode)

    if decoded.palette is None:
        raise NoPalette()

    num_colors = len(decoded.palette) // 3
    if num_colors == 0:
        raise EmptyPalette()
    if num_colors > MAX_COLORS:
        raise TooManyColors(num_colors)
    palette = split_palette(decoded.palette)
    bitplanes = bitplane_count(num_colors)

    width, height = decoded.width, decoded.height
    if not (0 <= width <= MAX_DIMENSION and 0 <= height <= MAX_DIMENSION):
        raise ImageTooLarge(width, height)
    if width_policy == 'reject' and width % 8:
        raise UnalignedWidth(width)

    if decoded.indices is not None:
        pixels = check_indices(decoded.indices, num_colors)
    elif decoded.pixels is not None:
        pixels = map_pixels(decoded.pixels, palette)
    else:
        pixels = np.zeros(0, dtype=np.uint8)

    if pixels.size != width * height:
        raise PixelCountMismatch(width * height, int(pixels.size))

    header = BitmapHeader(
        width=width,
        height=height,
        bitplanes=bitplanes,
        page_width=width,
        page_height=height,
    )
    return IlbmImage(header=header, palette=palette, pixels=pixels)
