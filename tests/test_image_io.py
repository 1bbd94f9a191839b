import binascii
import io
import struct
import zlib

import numpy as np
from PIL import Image

from pixel_stream import rgba_pixels
from pixel_stream.image_io import (
    decoded_image_from_bytes,
    decoded_image_from_pil,
    load_decoded_image,
)


def _rgba_image() -> Image.Image:
    im = Image.new("RGBA", (2, 2))
    im.putdata([(10, 20, 30, 255), (0, 0, 0, 0), (200, 100, 50, 128), (1, 2, 3, 255)])
    return im


def _png_chunk(kind: bytes, body: bytes) -> bytes:
    crc = binascii.crc32(kind + body) & 0xFFFFFFFF
    return struct.pack(">I", len(body)) + kind + body + struct.pack(">I", crc)


def _png(width, height, depth, colour_type, rows, trns=None) -> bytes:
    """Minimal non-interlaced PNG; rows are the unfiltered scanline bytes."""
    ihdr = struct.pack(">IIBBBBB", width, height, depth, colour_type, 0, 0, 0)
    raw = b"".join(b"\x00" + row for row in rows)
    chunks = [_png_chunk(b"IHDR", ihdr)]
    if trns is not None:
        chunks.append(_png_chunk(b"tRNS", trns))
    chunks.append(_png_chunk(b"IDAT", zlib.compress(raw)))
    chunks.append(_png_chunk(b"IEND", b""))
    return b"\x89PNG\r\n\x1a\n" + b"".join(chunks)


def test_rgba_image_matches_pillow():
    im = _rgba_image()
    image = decoded_image_from_pil(im)
    assert (image.channels, image.depth) == (4, 8)
    assert list(rgba_pixels(image)) == list(im.getdata())


def test_one_bit_image_stays_packed():
    im = Image.new("1", (9, 2))
    im.putpixel((0, 0), 255)
    im.putpixel((8, 0), 255)
    im.putpixel((3, 1), 255)
    image = decoded_image_from_pil(im)
    assert (image.channels, image.depth) == (1, 1)
    assert len(image.data) == 4
    expected = [(v, v, v, 255) for v in im.convert("L").getdata()]
    assert list(rgba_pixels(image)) == expected


def test_grey_transparency_key_from_info():
    im = Image.new("L", (2, 1))
    im.putdata([5, 9])
    im.info["transparency"] = 5
    assert list(rgba_pixels(decoded_image_from_pil(im))) == [(5, 5, 5, 0), (9, 9, 9, 255)]


def test_rgb_transparency_key_from_info():
    im = Image.new("RGB", (2, 1))
    im.putdata([(1, 2, 3), (4, 5, 6)])
    im.info["transparency"] = (4, 5, 6)
    assert list(rgba_pixels(decoded_image_from_pil(im))) == [(1, 2, 3, 255), (4, 5, 6, 0)]


def test_palette_transparency_is_folded_into_entries():
    im = Image.new("P", (2, 1))
    im.putpalette([10, 20, 30, 40, 50, 60])
    im.putdata([0, 1])
    im.info["transparency"] = 1
    image = decoded_image_from_pil(im)
    assert image.is_indexed
    assert list(rgba_pixels(image)) == [(10, 20, 30, 255), (40, 50, 60, 0)]


def test_palette_alpha_bytes():
    im = Image.new("P", (2, 1))
    im.putpalette([10, 20, 30, 40, 50, 60])
    im.putdata([1, 0])
    im.info["transparency"] = b"\x80\xff"
    assert list(rgba_pixels(decoded_image_from_pil(im))) == [
        (40, 50, 60, 255),
        (10, 20, 30, 128),
    ]


def test_sixteen_bit_grey():
    raw = np.array([0, 65535, 257], dtype="<u2").tobytes()
    im = Image.frombytes("I;16", (3, 1), raw)
    image = decoded_image_from_pil(im)
    assert (image.channels, image.depth) == (1, 16)
    assert list(rgba_pixels(image)) == [(0, 0, 0, 255), (255, 255, 255, 255), (1, 1, 1, 255)]


def test_other_modes_are_converted(capsys):
    im = Image.new("CMYK", (1, 1))
    image = decoded_image_from_pil(im)
    assert image.channels == 4
    assert "[warn]" in capsys.readouterr().out


def test_png_round_trip(tmp_path):
    im = _rgba_image()
    path = tmp_path / "sample.png"
    im.save(path)
    assert list(rgba_pixels(load_decoded_image(path))) == list(im.getdata())

    buf = io.BytesIO()
    im.save(buf, format="PNG")
    assert list(rgba_pixels(decoded_image_from_bytes(buf.getvalue()))) == list(im.getdata())


def test_sub_byte_grey_key_is_stretched_with_the_samples():
    # 2-bit grey: samples 1 and 2, key 1.
    blob = _png(2, 1, 2, 0, [bytes([0b01100000])], trns=struct.pack(">H", 1))
    image = decoded_image_from_bytes(blob)
    assert (image.channels, image.depth) == (1, 8)
    assert image.transparency == [85]
    assert list(rgba_pixels(image)) == [(85, 85, 85, 0), (170, 170, 170, 255)]


def test_explicit_source_rawmode_rescales_key():
    im = Image.new("L", (2, 1))
    im.putdata([0, 17])
    im.info["transparency"] = 1
    image = decoded_image_from_pil(im, source_rawmode="L;4")
    assert list(rgba_pixels(image)) == [(0, 0, 0, 255), (17, 17, 17, 0)]


def test_sixteen_bit_rgb_key_is_dropped(capsys):
    # Raw blues 128 and 0x8000; Pillow keeps only the high bytes 0 and 128.
    row = struct.pack(">6H", 0, 0, 128, 0, 0, 0x8000)
    blob = _png(2, 1, 16, 2, [row], trns=struct.pack(">3H", 0, 0, 128))
    image = decoded_image_from_bytes(blob)
    assert image.transparency is None
    assert list(rgba_pixels(image)) == [(0, 0, 0, 255), (0, 0, 128, 255)]
    assert "[warn]" in capsys.readouterr().out


def test_eight_bit_png_key_is_unchanged(tmp_path):
    path = tmp_path / "key.png"
    path.write_bytes(_png(2, 1, 8, 0, [bytes([5, 9])], trns=struct.pack(">H", 5)))
    image = load_decoded_image(path)
    assert image.transparency == [5]
    assert list(rgba_pixels(image)) == [(5, 5, 5, 0), (9, 9, 9, 255)]


def test_palette_with_alpha_mode_is_converted(capsys):
    im = Image.new("PA", (1, 1))
    image = decoded_image_from_pil(im)
    assert (image.channels, image.depth) == (4, 8)
    assert not image.is_indexed
    assert "[warn]" in capsys.readouterr().out
