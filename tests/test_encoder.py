"""Tests for png2ilbm.core.encoder — BMHD/CMAP/BODY serialization and FORM layout."""

import struct
from pathlib import Path

import numpy as np
import pytest
from png2ilbm.core.encoder import (
    BMHD_FORMAT,
    encode,
    get_body,
    get_bmhd,
    get_cmap,
    get_ilbm,
    row_bytes,
    write,
)
from png2ilbm.core.errors import WriteError
from png2ilbm.core.types import BitmapHeader, IlbmImage

BW = ((0, 0, 0), (255, 255, 255))


def _image(width: int, height: int, bitplanes: int, pixels, palette=BW) -> IlbmImage:
    header = BitmapHeader(
        width=width,
        height=height,
        bitplanes=bitplanes,
        page_width=width,
        page_height=height,
    )
    return IlbmImage(header=header, palette=tuple(palette), pixels=np.array(pixels, dtype=np.uint8))


class TestBmhd:
    def test_length_is_20(self):
        assert len(get_bmhd(_image(8, 1, 1, [0] * 8))) == 20

    def test_fields_unpack_big_endian(self):
        img = _image(320, 200, 5, np.zeros(320 * 200), palette=[(0, 0, 0)] * 32)
        fields = struct.unpack(BMHD_FORMAT, get_bmhd(img))
        assert fields == (320, 200, 0, 0, 5, 0, 0, 0, 0, 0, 0, 320, 200)

    def test_width_bytes_order(self):
        img = _image(0x0140, 0x00C8, 1, np.zeros(0x0140 * 0x00C8))
        assert get_bmhd(img)[:4] == b'\x01\x40\x00\xc8'

    def test_signed_origin(self):
        header = BitmapHeader(width=8, height=1, x=-1, y=-2, bitplanes=1)
        img = IlbmImage(header=header, palette=BW, pixels=np.zeros(8, dtype=np.uint8))
        assert get_bmhd(img)[4:8] == b'\xff\xff\xff\xfe'


class TestCmap:
    def test_rgb_order(self):
        img = _image(8, 1, 2, [0] * 8, palette=[(1, 2, 3), (4, 5, 6), (7, 8, 9)])
        assert get_cmap(img) == bytes([1, 2, 3, 4, 5, 6, 7, 8, 9])

    def test_length_three_per_entry(self):
        palette = [(i, i, i) for i in range(255)]
        img = _image(8, 1, 8, [0] * 8, palette=palette)
        assert len(get_cmap(img)) == 3 * 255


class TestBody:
    def test_one_bitplane(self):
        img = _image(8, 1, 1, [0, 1, 0, 1, 0, 1, 0, 1])
        assert get_body(img) == bytes([0b01010101])

    def test_two_bitplanes(self):
        img = _image(8, 1, 2, [0, 1, 2, 2, 1, 0, 0, 1], palette=[(0, 0, 0)] * 3)
        assert get_body(img) == bytes([0b01001001, 0b00110000])

    def test_rows_are_interleaved(self):
        # row 0 all colour 1, row 1 all colour 2
        img = _image(8, 2, 2, [1] * 8 + [2] * 8, palette=[(0, 0, 0)] * 4)
        assert get_body(img) == bytes([0xFF, 0x00, 0x00, 0xFF])

    def test_multiple_bytes_per_row(self):
        pixels = [1] + [0] * 15
        img = _image(16, 1, 1, pixels)
        assert get_body(img) == bytes([0x80, 0x00])

    def test_eight_planes(self):
        palette = [(i, i, i) for i in range(255)]
        img = _image(8, 1, 8, [0xAA] * 8, palette=palette)
        body = get_body(img)
        assert body == bytes([0x00, 0xFF] * 4)

    @pytest.mark.parametrize(
        ('width', 'height', 'planes'),
        [(8, 1, 1), (16, 3, 2), (32, 5, 3), (64, 2, 8)],
    )
    def test_length_invariant(self, width, height, planes):
        rng = np.random.default_rng(42)
        pixels = rng.integers(0, 1 << planes, size=width * height, dtype=np.uint8)
        palette = [(0, 0, 0)] * (1 << planes if planes < 8 else 255)
        img = _image(width, height, planes, np.minimum(pixels, len(palette) - 1), palette=palette)
        assert len(get_body(img)) == height * planes * (width // 8)

    def test_zero_bitplanes_is_empty(self):
        img = _image(8, 2, 0, [0] * 16, palette=[(9, 9, 9)])
        assert get_body(img) == b''

    def test_unaligned_width_zero_padded(self):
        img = _image(10, 1, 1, [1] * 10)
        assert row_bytes(10) == 2
        assert get_body(img) == bytes([0xFF, 0b11000000])


class TestContainer:
    def test_full_layout(self):
        img = _image(8, 1, 1, [0, 1, 0, 1, 0, 1, 0, 1])
        data = encode(img)
        assert data[0:4] == b'FORM'
        assert struct.unpack('>I', data[4:8])[0] == len(data) - 8
        assert data[8:12] == b'ILBM'
        assert data[12:16] == b'BMHD'
        assert struct.unpack('>I', data[16:20])[0] == 20
        assert data[40:44] == b'CMAP'
        assert struct.unpack('>I', data[44:48])[0] == 6
        assert data[48:54] == bytes([0, 0, 0, 255, 255, 255])
        assert data[54:58] == b'BODY'
        assert struct.unpack('>I', data[58:62])[0] == 1
        assert data[62:] == b'\x55'
        assert len(data) == 63

    def test_no_even_padding_by_default(self):
        img = _image(8, 1, 1, [0] * 8)
        assert len(get_ilbm(img)) == 4 + (8 + 20) + (8 + 6) + (8 + 1)

    def test_pad_chunks(self):
        img = _image(8, 1, 1, [0] * 8)
        data = encode(img, pad_chunks=True)
        # BODY payload of 1 byte gets one pad byte; declared length stays 1
        assert data[54:58] == b'BODY'
        assert struct.unpack('>I', data[58:62])[0] == 1
        assert data[62:] == b'\x00\x00'
        assert struct.unpack('>I', data[4:8])[0] == len(data) - 8

    def test_odd_cmap_padded(self):
        img = _image(8, 1, 2, [0] * 8, palette=[(1, 1, 1)] * 3)
        data = encode(img, pad_chunks=True)
        # 9-byte CMAP + pad, BODY follows on an even offset
        assert data[48:57] == b'\x01' * 9
        assert data[57] == 0
        assert data[58:62] == b'BODY'

    def test_deterministic(self):
        img = _image(16, 2, 1, [0, 1] * 16)
        assert encode(img) == encode(img)


class TestWrite:
    def test_writes_encoded_bytes(self, tmp_path: Path) -> None:
        img = _image(8, 1, 1, [1] * 8)
        out = tmp_path / 'out.iff'
        n = write(img, str(out))
        assert out.read_bytes() == encode(img)
        assert n == len(encode(img))

    def test_unwritable_destination(self, tmp_path: Path) -> None:
        img = _image(8, 1, 1, [1] * 8)
        target = tmp_path / 'missing-dir' / 'out.iff'
        with pytest.raises(WriteError) as exc:
            write(img, str(target))
        assert isinstance(exc.value.__cause__, OSError)
        assert not target.exists()
