"""ILBM serialization: BMHD, CMAP, BODY chunks inside a FORM container.

Layout written by encode():

    FORM <u32 len> ILBM
        BMHD <u32 20>  header (see get_bmhd)
        CMAP <u32 3n>  r g b per palette entry
        BODY <u32 len> row-interleaved bitplanes, uncompressed

All integers are big-endian. Chunks are not padded to even length unless
pad_chunks=True.
"""

import struct

import numpy as np

from png2ilbm.core.errors import WriteError
from png2ilbm.core.types import IlbmImage

BMHD_FORMAT = '>HHhhBBBBHBBHH'
BMHD_SIZE = struct.calcsize(BMHD_FORMAT)  # 20


def row_bytes(width: int) -> int:
    """Bytes per plane row; a partial final byte is zero-padded."""
    return (width + 7) // 8


def get_bmhd(image: IlbmImage) -> bytes:
    h = image.header
    return struct.pack(
        BMHD_FORMAT,
        h.width,
        h.height,
        h.x,
        h.y,
        h.bitplanes,
        h.masking,
        h.compression,
        0,  # pad1
        h.transparent_color,
        h.x_aspect,
        h.y_aspect,
        h.page_width,
        h.page_height,
    )


def get_cmap(image: IlbmImage) -> bytes:
    return bytes(c for color in image.palette for c in color)


def get_body(image: IlbmImage) -> bytes:
    """Encode palette indices as row-interleaved bitplanes.

    For every image row, plane 0 .. plane N-1 are emitted back to back.
    Within a plane row, pixel x lands in bit 7 - (x % 8) of byte x // 8,
    so the leftmost pixel is the most significant bit.
    """
    width, height, planes = image.width, image.height, image.bitplanes
    if planes == 0 or height == 0:
        return b''
    rows = image.pixels.reshape(height, width)
    shifts = np.arange(planes, dtype=np.uint8)
    # (height, planes, width) of single bits
    bits = (rows[:, np.newaxis, :] >> shifts[np.newaxis, :, np.newaxis]) & 1
    return np.packbits(bits.astype(np.uint8), axis=-1, bitorder='big').tobytes()


def chunk(tag: bytes, payload: bytes, pad: bool = False) -> bytes:
    """tag + big-endian u32 payload length + payload (+ pad byte if odd and pad)."""
    data = tag + struct.pack('>I', len(payload)) + payload
    if pad and len(payload) & 1:
        data += b'\0'
    return data


def get_ilbm(image: IlbmImage, pad_chunks: bool = False) -> bytes:
    """FORM contents: the ILBM form type followed by BMHD, CMAP and BODY."""
    return b''.join(
        [
            b'ILBM',
            chunk(b'BMHD', get_bmhd(image), pad_chunks),
            chunk(b'CMAP', get_cmap(image), pad_chunks),
            chunk(b'BODY', get_body(image), pad_chunks),
        ]
    )


def encode(image: IlbmImage, pad_chunks: bool = False) -> bytes:
    """Complete IFF file as bytes."""
    return chunk(b'FORM', get_ilbm(image, pad_chunks))


def write(image: IlbmImage, path: str, pad_chunks: bool = False) -> int:
    """Encode and write to `path`. Returns the number of bytes written."""
    data = encode(image, pad_chunks)
    try:
        with open(path, 'wb') as f:
            f.write(data)
    except OSError as e:
        raise WriteError(path, e) from e
    return len(data)
