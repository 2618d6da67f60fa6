import copy

import numpy as np
import pytest

from pixmap import Channel, Image, InvalidBufferSize, OutOfRange, Pixel


def test_new_image_is_black():
    img = Image(3, 2)
    assert img.width == 3 and img.height == 2
    assert img.byte_length() == 18
    assert img.pixel_count() == 6
    assert img.to_bytes() == bytes(18)


def test_empty_image_is_allowed():
    img = Image(0, 4)
    assert img.byte_length() == 0
    assert img.pixel_count() == 0


def test_negative_dimensions_rejected():
    with pytest.raises(InvalidBufferSize):
        Image(-1, 2)


def test_row_col_and_flat_accessors(quad):
    assert quad.get(0, 0) == Pixel(10, 20, 30)
    assert quad.get(1, 0) == Pixel(70, 80, 90)
    assert quad.get(3) == quad.get(1, 1) == Pixel(100, 110, 120)


def test_byte_layout_is_row_major(quad):
    data = quad.data()
    row, col = 1, 0
    offset = (row * quad.width + col) * 3
    assert tuple(int(v) for v in data[offset:offset + 3]) == (70, 80, 90)


def test_set_pixel(quad):
    quad.set(0, 1, Pixel(1, 2, 3))
    quad.set(2, (4, 5, 6))
    assert quad.get(1) == Pixel(1, 2, 3)
    assert quad.get(1, 0) == Pixel(4, 5, 6)


@pytest.mark.parametrize("index", [(2, 0), (0, 2), (-1, 0), (0, -1), (4,), (-1,)])
def test_out_of_range_access(quad, index):
    with pytest.raises(OutOfRange):
        quad.get(*index)
    with pytest.raises(OutOfRange):
        quad.set(*index, Pixel())


def test_out_of_range_is_an_index_error(quad):
    with pytest.raises(IndexError):
        quad.get(9)


def test_set_data_replaces_storage(quad):
    quad.set_data(1, 1, bytes([7, 8, 9]))
    assert (quad.width, quad.height) == (1, 1)
    assert quad.get(0) == Pixel(7, 8, 9)


def test_set_data_rejects_wrong_length(quad):
    before = quad.copy()
    with pytest.raises(InvalidBufferSize):
        quad.set_data(2, 2, bytes(11))
    assert quad == before


def test_set_data_copies_the_argument():
    raw = bytearray(12)
    img = Image.from_bytes(2, 2, raw)
    raw[0] = 255
    assert img.get(0).r == 0


def test_copies_are_deep(quad):
    for clone in (quad.copy(), copy.copy(quad), copy.deepcopy(quad), Image.from_image(quad)):
        assert clone == quad
        clone.set(0, Pixel(0, 0, 0))
        assert quad.get(0) == Pixel(10, 20, 30)


def test_data_is_a_live_view(quad):
    quad.data()[0] = 5
    assert quad.get(0, 0).r == 5


def test_fill(quad):
    quad.fill((9, 8, 7))
    assert all(quad.get(i) == Pixel(9, 8, 7) for i in range(quad.pixel_count()))


def test_equality_checks_dimensions():
    assert Image(2, 3) != Image(3, 2)
    assert Image(2, 3) == Image(2, 3)


def test_from_array_requires_three_channels():
    with pytest.raises(InvalidBufferSize):
        Image.from_array(np.zeros((2, 2, 4), dtype=np.uint8))


def test_pixel_validation():
    with pytest.raises(ValueError):
        Pixel(256, 0, 0)
    with pytest.raises(ValueError):
        Pixel.coerce((1, 2))
    assert Pixel.coerce([1, 2, 3]) == Pixel(1, 2, 3)


def test_pixel_channels():
    p = Pixel(1, 2, 3)
    assert list(p) == [1, 2, 3]
    assert p[Channel.BLUE] == 3


@pytest.mark.parametrize("values", [[300, -1, 256], [1.5, 2, 3], [-1, 0, 0]])
def test_set_data_rejects_values_outside_byte_range(quad, values):
    before = quad.copy()
    with pytest.raises(InvalidBufferSize):
        quad.set_data(1, 1, np.array(values))
    assert quad == before


def test_set_data_accepts_wider_int_arrays():
    img = Image(1, 1)
    img.set_data(1, 1, np.array([0, 128, 255], dtype=np.int64))
    assert img.get(0) == Pixel(0, 128, 255)


@pytest.mark.parametrize("value", [256, -1, 0.5])
def test_from_array_rejects_values_outside_byte_range(value):
    pixels = np.zeros((1, 2, 3))
    pixels[0, 1, 2] = value
    with pytest.raises(InvalidBufferSize):
        Image.from_array(pixels)


def test_from_array_accepts_whole_floats():
    img = Image.from_array(np.full((1, 1, 3), 200.0))
    assert img.get(0) == Pixel(200, 200, 200)
