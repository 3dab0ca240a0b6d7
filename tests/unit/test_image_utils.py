import io

import pytest
from PIL import Image

from image_utils import OPERATIONS, apply_operation, encode_jpeg, flatten_to_rgb, transform_image
from transform_errors import ProcessingError
from transform_request import Operation


def open_bytes(data):
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


def test_dispatch_table_covers_every_operation():
    assert set(OPERATIONS) == set(Operation)


def test_grayscale_is_single_channel(png_bytes):
    data, size = transform_image(png_bytes, Operation.GRAYSCALE)

    img = open_bytes(data)
    assert img.format == 'JPEG'
    assert img.mode == 'L'
    assert size == (64, 48)


def test_resize_exact_dimensions(png_bytes):
    data, size = transform_image(png_bytes, Operation.RESIZE, width=50, height=75)

    assert size == (50, 75)
    assert open_bytes(data).size == (50, 75)


@pytest.mark.parametrize('operation', [Operation.WATERCOLOR, Operation.SKETCH])
def test_edge_filters_keep_size(png_bytes, operation):
    data, size = transform_image(png_bytes, operation)

    img = open_bytes(data)
    assert img.format == 'JPEG'
    assert img.size == (64, 48)


def test_passthrough_leaves_pixels_alone():
    img = Image.new('RGB', (4, 4), (10, 20, 30))

    assert apply_operation(img, Operation.PASSTHROUGH) is img


def test_passthrough_still_reencodes_as_jpeg(image_factory):
    data, size = transform_image(image_factory(fmt='PNG'), Operation.PASSTHROUGH)

    assert open_bytes(data).format == 'JPEG'
    assert size == (64, 48)


@pytest.mark.parametrize('mode', ['RGBA', 'L'])
@pytest.mark.parametrize('operation', list(Operation))
def test_every_operation_handles_common_modes(image_factory, mode, operation):
    source = image_factory(mode=mode)

    data, _ = transform_image(source, operation, width=10, height=10)

    assert open_bytes(data).format == 'JPEG'


def test_palette_image_can_be_filtered():
    img = Image.new('RGB', (8, 8), (255, 0, 0)).convert('P')

    result = apply_operation(img, Operation.SKETCH)

    assert result.mode == 'RGB'


def test_flatten_rgba_on_white():
    img = Image.new('RGBA', (2, 2), (0, 0, 0, 0))

    flat = flatten_to_rgb(img)

    assert flat.mode == 'RGB'
    assert flat.getpixel((0, 0)) == (255, 255, 255)


@pytest.mark.parametrize('mode', ['RGBA', 'LA'])
def test_grayscale_puts_transparency_on_white(mode):
    img = Image.new(mode, (2, 2), (0, 0, 0, 0) if mode == 'RGBA' else (0, 0))

    gray = apply_operation(img, Operation.GRAYSCALE)

    assert gray.mode == 'L'
    assert gray.getpixel((0, 0)) == 255


def test_encode_jpeg_quality_changes_size():
    img = Image.effect_noise((64, 64), 50).convert('RGB')

    assert len(encode_jpeg(img, quality=10)) < len(encode_jpeg(img, quality=90))


def test_undecodable_bytes():
    with pytest.raises(ProcessingError, match='Could not decode image'):
        transform_image(b'definitely not an image', Operation.GRAYSCALE)


def test_truncated_image():
    buffer = io.BytesIO()
    Image.effect_noise((64, 64), 50).save(buffer, format='PNG')
    data = buffer.getvalue()

    with pytest.raises(ProcessingError):
        transform_image(data[:len(data) // 2], Operation.GRAYSCALE)
