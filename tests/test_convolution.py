import numpy as np
import pytest

from pixmap import Image, Kernel, Pixel
from pixmap.models import kernel as kernels
from pixmap.services.convolution_service import ConvolutionService


@pytest.fixture
def convolution():
    return ConvolutionService()


def test_identity_kernel_reproduces_image(convolution, noisy):
    assert convolution.identity(noisy) == noisy
    assert convolution.convolute(noisy, kernels.IDENTITY) == noisy


@pytest.mark.parametrize("name", ["sharpen", "gaussian_blur", "box_blur", "unsharp_masking"])
@pytest.mark.parametrize("level", [0, 37, 128, 255])
def test_normalised_filters_keep_flat_images(convolution, uniform, name, level):
    flat = uniform(4, 3, level)
    assert getattr(convolution, name)(flat) == flat


@pytest.mark.parametrize("name", ["ridge_detection", "sobel"])
def test_edge_filters_blank_flat_images(convolution, uniform, name):
    assert getattr(convolution, name)(uniform(4, 3, 90)) == Image(4, 3)


def test_kernel_is_flipped(convolution, gray_row):
    # Weight sits left of centre, so true convolution reads the right neighbour.
    shift = Kernel([[0, 0, 0], [1, 0, 0], [0, 0, 0]])
    result = convolution.convolute(gray_row(10, 20, 30), shift)
    assert [result.get(0, c).r for c in range(3)] == [20, 30, 30]


def test_edges_are_clamped(convolution, uniform):
    # 1x1 image: every tap samples the single pixel, 5c - 4c = c.
    assert convolution.sharpen(uniform(1, 1, 77)).get(0) == Pixel(77, 77, 77)


def test_results_clamped_to_byte_range(convolution):
    img = Image(3, 3)
    img.set(1, 1, Pixel(255, 255, 255))
    ridge = convolution.ridge_detection(img)
    assert ridge.get(1, 1) == Pixel(255, 255, 255)
    assert ridge.get(0, 0) == Pixel(0, 0, 0)


def test_box_blur_averages_neighbourhood(convolution, gray_row):
    # Clamp-to-edge on a 1-row image: each column sees its left/self/right three times.
    blurred = convolution.box_blur(gray_row(0, 90, 180))
    assert [blurred.get(0, c).r for c in range(3)] == [30, 90, 150]


def test_sobel_vertical_edge(convolution):
    pixels = np.zeros((3, 3, 3), dtype=np.uint8)
    pixels[:, 1:] = 50
    edges = convolution.sobel(Image.from_array(pixels))
    assert [edges.get(1, c).r for c in range(3)] == [200, 200, 0]


def test_sobel_saturates(convolution):
    pixels = np.zeros((3, 3, 3), dtype=np.uint8)
    pixels[:, 1:] = 100
    assert convolution.sobel(Image.from_array(pixels)).get(1, 1) == Pixel(255, 255, 255)


def test_convolute_raw_matches_kernel(convolution, noisy):
    flat = [0, -1, 0, -1, 5, -1, 0, -1, 0]
    assert convolution.convolute_raw(noisy, flat, 1.0, 3) == convolution.sharpen(noisy)


def test_convolute_raw_rejects_wrong_length(convolution, noisy):
    with pytest.raises(ValueError):
        convolution.convolute_raw(noisy, [1, 2, 3], 1.0, 3)


def test_kernel_must_be_odd_square():
    with pytest.raises(ValueError):
        Kernel([[1, 1], [1, 1]])
    with pytest.raises(ValueError):
        Kernel([[1, 1, 1]])


def test_kernel_weights_must_be_whole():
    with pytest.raises(ValueError):
        Kernel([[0, 0, 0], [0, 0.5, 0], [0, 0, 0]])
    assert Kernel([[0, 0, 0], [0, 2.0, 0], [0, 0, 0]]).weights[1, 1] == 2


def test_unsharp_kernel_shape():
    k = kernels.UNSHARP_MASKING
    assert k.side == 5
    assert k.weights[2, 2] == -476
    assert k.weights.sum() == -256
    assert k.scale == -1 / 256


def test_empty_image(convolution):
    assert convolution.gaussian_blur(Image(0, 0)) == Image(0, 0)


def test_source_untouched(convolution, noisy):
    before = noisy.copy()
    convolution.sobel(noisy)
    convolution.unsharp_masking(noisy)
    assert noisy == before


def _gray(levels) -> Image:
    levels = np.asarray(levels, dtype=np.uint8)
    return Image.from_array(np.repeat(levels[..., np.newaxis], 3, axis=2))


def _reds(img: Image) -> list:
    return img.pixels[..., 0].tolist()


def test_gaussian_blur_impulse_response(convolution):
    impulse = np.zeros((3, 3))
    impulse[1, 1] = 160
    assert _reds(convolution.gaussian_blur(_gray(impulse))) == [
        [10, 20, 10],
        [20, 40, 20],
        [10, 20, 10],
    ]


def test_ridge_detection_impulse_response(convolution):
    # A dark dot on a lighter field lights up its 8 neighbours only.
    levels = np.full((5, 5), 110)
    levels[2, 2] = 100
    assert _reds(convolution.ridge_detection(_gray(levels))) == [
        [0, 0, 0, 0, 0],
        [0, 10, 10, 10, 0],
        [0, 10, 0, 10, 0],
        [0, 10, 10, 10, 0],
        [0, 0, 0, 0, 0],
    ]
    bright = np.zeros((3, 3))
    bright[1, 1] = 20
    assert _reds(convolution.ridge_detection(_gray(bright)))[1][1] == 160


def test_unsharp_masking_impulse_response(convolution):
    # Field 200 with a dot 64 darker: neighbours gain weight / 4, the dot loses 476 / 4.
    levels = np.full((9, 9), 200)
    levels[4, 4] = 136
    result = np.array(_reds(convolution.unsharp_masking(_gray(levels))))
    assert result[2:7, 2:7].tolist() == [
        [200, 201, 202, 201, 200],
        [201, 204, 206, 204, 201],
        [202, 206, 81, 206, 202],
        [201, 204, 206, 204, 201],
        [200, 201, 202, 201, 200],
    ]
    assert (result[0] == 200).all() and (result[:, 0] == 200).all()


def test_sobel_keeps_negative_gradients(convolution, gray_row):
    # Brightening to the right gives Gx = -360; its magnitude survives the combine.
    edges = convolution.sobel(gray_row(0, 0, 90))
    assert edges.get(0, 1).r == 255
    assert edges.get(0, 0).r == 0
