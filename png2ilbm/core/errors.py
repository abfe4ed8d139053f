"""Error taxonomy for png2ilbm.

Everything the CLI reports derives from Png2IlbmError:
  DecodeError   — source image missing, unreadable or malformed.
  ConvertError  — source decoded fine but cannot be expressed as ILBM.
  WriteError    — destination could not be written.
  ConfigError   — bad PNG2ILBM_* environment value.

All of them are raised before (or instead of) writing any output byte,
except WriteError.
"""

from __future__ import annotations

from png2ilbm.core.types import Color


class Png2IlbmError(Exception):
    """Base class for all reportable png2ilbm failures."""


class DecodeError(Png2IlbmError):
    def __init__(self, path: str, reason: str):
        super().__init__(f'Cannot decode {path}: {reason}')
        self.path = path
        self.reason = reason


class ConvertError(Png2IlbmError):
    """Base class for validation failures in the pixel mapper."""


class WrongColorMode(ConvertError):
    def __init__(self, mode: str):
        super().__init__(f'Invalid color mode {mode!r}. Can only work with indexed (P) images')
        self.mode = mode


class NoPalette(ConvertError):
    def __init__(self):
        super().__init__('No palette found')


class EmptyPalette(ConvertError):
    def __init__(self):
        super().__init__('Palette found, but it is empty')


class TooManyColors(ConvertError):
    def __init__(self, count: int):
        super().__init__(f'Too many colors: {count} (at most 255 supported)')
        self.count = count


class InvalidPixel(ConvertError):
    def __init__(self, color: Color):
        r, g, b = color
        super().__init__(f'Pixel colour ({r}, {g}, {b}) is not in the palette')
        self.color = color


class InvalidIndex(ConvertError):
    def __init__(self, index: int, num_colors: int):
        super().__init__(f'Pixel index {index} out of range for a {num_colors}-colour palette')
        self.index = index
        self.num_colors = num_colors


class UnalignedWidth(ConvertError):
    def __init__(self, width: int):
        super().__init__(f'Width {width} is not a multiple of 8 (PNG2ILBM_WIDTH_POLICY=reject)')
        self.width = width


class ImageTooLarge(ConvertError):
    def __init__(self, width: int, height: int):
        super().__init__(f'Image {width}×{height} does not fit 16-bit BMHD dimensions')
        self.width = width
        self.height = height


class PixelCountMismatch(ConvertError):
    def __init__(self, expected: int, actual: int):
        super().__init__(f'Expected {expected} pixels, decoder produced {actual}')
        self.expected = expected
        self.actual = actual


class WriteError(Png2IlbmError):
    def __init__(self, path: str, error: OSError):
        super().__init__(f'Cannot write {path}: {error.strerror or error}')
        self.path = path


class ConfigError(Png2IlbmError):
    def __init__(self, name: str, value: str):
        super().__init__(f'Invalid value for {name}: {value!r}')
        self.name = name
        self.value = value
