"""Shared types for png2ilbm: DecodedImage, BitmapHeader, IlbmImage, Settings."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

Color = tuple[int, int, int]

WIDTH_POLICIES = ('pad', 'reject')


@dataclass
class DecodedImage:
    """What the palette image decoder hands to the mapper.

    Exactly one of `indices` / `pixels` is normally set: indexed sources
    expose their native palette indices, anything else is expanded to RGB.
    """

    width: int
    height: int
    mode: str  # Pillow mode string, 'P' = indexed
    palette: bytes | None = None  # raw RGB triples, 3 bytes per entry
    indices: np.ndarray | None = None  # shape (width * height,), row-major
    pixels: np.ndarray | None = None  # shape (width * height, 3), row-major


@dataclass(frozen=True)
class BitmapHeader:
    """BMHD fields, in on-disk order."""

    width: int  # u16
    height: int  # u16
    x: int = 0  # i16
    y: int = 0  # i16
    bitplanes: int = 0  # u8
    masking: int = 0  # u8, 0 = none
    compression: int = 0  # u8, 0 = none
    transparent_color: int = 0  # u16
    x_aspect: int = 0  # u8
    y_aspect: int = 0  # u8
    page_width: int = 0  # u16
    page_height: int = 0  # u16


@dataclass(frozen=True, eq=False)
class IlbmImage:
    """Validated image ready for the encoder. Built once by mapper.build()."""

    header: BitmapHeader
    palette: tuple[Color, ...]
    pixels: np.ndarray  # uint8 palette indices, length width * height

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height

    @property
    def bitplanes(self) -> int:
        return self.header.bitplanes


@dataclass
class Report:
    """Outcome of one conversion, for text/JSON output."""

    input_path: str = ''
    output_path: str = ''
    width: int = 0
    height: int = 0
    colors: int = 0
    bitplanes: int = 0
    body_size: int = 0
    bytes_written: int = 0
    padded_width: bool = False  # width not a multiple of 8, rows zero-padded

    @classmethod
    def from_image(cls, image: IlbmImage, input_path: str, output_path: str) -> Report:
        return cls(
            input_path=input_path,
            output_path=output_path,
            width=image.width,
            height=image.height,
            colors=len(image.palette),
            bitplanes=image.bitplanes,
            padded_width=image.width % 8 != 0,
        )


@dataclass
class Settings:
    """Runtime options read from PNG2ILBM_* environment variables."""

    width_policy: str = 'pad'  # one of WIDTH_POLICIES
    pad_chunks: bool = False
    json: bool = False
    quiet: bool = False
