import numpy as np
import pytest

from pixel_stream.channels import (
    ASSEMBLERS,
    assemble_pixel,
    channel_layout,
    iter_channel_pixels,
    transparency_key,
)
from pixel_stream.core_types import ChannelLayout
from pixel_stream.errors import InvalidTransparency, UnsupportedChannelCount


def test_every_layout_has_an_assembler():
    assert set(ASSEMBLERS) == set(ChannelLayout)


@pytest.mark.parametrize("channels", [0, 5, -1])
def test_unknown_channel_count(channels):
    with pytest.raises(UnsupportedChannelCount, match=r"expected one of \(1, 2, 3, 4\)"):
        channel_layout(channels)


def test_layout_alpha_flags():
    assert ChannelLayout.RGBA.has_alpha
    assert ChannelLayout.GREY_ALPHA.has_alpha
    assert not ChannelLayout.RGB.has_alpha
    assert not ChannelLayout.GREY.has_alpha


def test_rgba_scales_every_sample():
    assert assemble_pixel((10, 20, 30, 40), ChannelLayout.RGBA, 8) == (10, 20, 30, 40)
    assert assemble_pixel((15, 0, 5, 15), ChannelLayout.RGBA, 4) == (255, 0, 85, 255)


def test_grey_alpha_replicates_grey():
    assert assemble_pixel((65535, 0), ChannelLayout.GREY_ALPHA, 16) == (255, 255, 255, 0)
    assert assemble_pixel((2, 1), ChannelLayout.GREY_ALPHA, 2) == (170, 170, 170, 85)


def test_grey_without_key_is_opaque():
    assert assemble_pixel((1,), ChannelLayout.GREY, 1) == (255, 255, 255, 255)


def test_grey_key_matches_raw_sample():
    key = transparency_key([5], ChannelLayout.GREY, 8)
    assert assemble_pixel((5,), ChannelLayout.GREY, 8, key) == (5, 5, 5, 0)
    assert assemble_pixel((9,), ChannelLayout.GREY, 8, key) == (9, 9, 9, 255)


def test_rgb_key_at_depth_4_compares_native_samples():
    key = transparency_key([1, 2, 3], ChannelLayout.RGB, 4)
    assert assemble_pixel((1, 2, 3), ChannelLayout.RGB, 4, key) == (17, 34, 51, 0)
    assert assemble_pixel((1, 2, 4), ChannelLayout.RGB, 4, key) == (17, 34, 68, 255)


def test_rgb_key_at_depth_16_ignores_scaled_collisions():
    key = transparency_key([256, 0, 0], ChannelLayout.RGB, 16)
    # 256 and 257 both scale to 1
    assert assemble_pixel((256, 0, 0), ChannelLayout.RGB, 16, key) == (1, 0, 0, 0)
    assert assemble_pixel((257, 0, 0), ChannelLayout.RGB, 16, key) == (1, 0, 0, 255)


def test_key_ignored_for_alpha_layouts():
    assert transparency_key([1, 2, 3], ChannelLayout.RGBA, 8) is None
    assert transparency_key([1], ChannelLayout.GREY_ALPHA, 8) is None


def test_empty_or_missing_key():
    assert transparency_key(None, ChannelLayout.RGB, 8) is None
    assert transparency_key([], ChannelLayout.GREY, 8) is None


def test_key_with_wrong_component_count():
    with pytest.raises(InvalidTransparency):
        transparency_key([1, 2], ChannelLayout.RGB, 8)
    with pytest.raises(InvalidTransparency):
        transparency_key([1, 2, 3], ChannelLayout.GREY, 8)


def test_key_out_of_range_for_depth():
    with pytest.raises(InvalidTransparency):
        transparency_key([16], ChannelLayout.GREY, 4)
    with pytest.raises(InvalidTransparency):
        transparency_key([-1, 0, 0], ChannelLayout.RGB, 8)


def test_iter_channel_pixels_walks_rows_in_order():
    rows = [np.array([1, 2, 3, 4, 5, 6], dtype=np.uint8), np.array([7, 8, 9, 1, 2, 3], dtype=np.uint8)]
    key = (1, 2, 3)
    pixels = list(iter_channel_pixels(rows, ChannelLayout.RGB, 8, key))
    assert pixels == [
        (1, 2, 3, 0),
        (4, 5, 6, 255),
        (7, 8, 9, 255),
        (1, 2, 3, 0),
    ]
