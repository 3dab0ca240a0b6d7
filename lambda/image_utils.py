import io
import logging

from PIL import Image, ImageFilter, UnidentifiedImageError

from transform_errors import ProcessingError
from transform_request import Operation

logger = logging.getLogger(__name__)

OUTPUT_FORMAT = 'JPEG'
OUTPUT_CONTENT_TYPE = 'image/jpeg'


def flatten_to_rgb(img):
    """Drop palette and alpha so the image can be filtered and saved as JPEG."""
    if img.mode in ('L', 'RGB'):
        return img
    if img.mode in ('RGBA', 'LA') or (img.mode == 'P' and 'transparency' in img.info):
        rgba = img.convert('RGBA')
        background = Image.new('RGB', rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.split()[-1])
        return background
    return img.convert('RGB')


def _grayscale(img, width, height):
    return flatten_to_rgb(img).convert('L')


def _watercolor(img, width, height):
    return flatten_to_rgb(img).filter(ImageFilter.CONTOUR)


def _sketch(img, width, height):
    return flatten_to_rgb(img).filter(ImageFilter.EDGE_ENHANCE_MORE)


def _resize(img, width, height):
    return img.resize((width, height))


def _passthrough(img, width, height):
    return img


OPERATIONS = {
    Operation.GRAYSCALE: _grayscale,
    Operation.WATERCOLOR: _watercolor,
    Operation.SKETCH: _sketch,
    Operation.RESIZE: _resize,
    Operation.PASSTHROUGH: _passthrough,
}


def apply_operation(img, operation, width=None, height=None):
    return OPERATIONS[operation](img, width, height)


def encode_jpeg(img, quality=90):
    buffer = io.BytesIO()
    flatten_to_rgb(img).save(buffer, format=OUTPUT_FORMAT, quality=quality)
    return buffer.getvalue()


def transform_image(data, operation, width=None, height=None, quality=90):
    """
    Decode `data`, apply `operation` and re-encode as JPEG.

    Returns (jpeg_bytes, (width, height)) of the output image.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            logger.info(f"Decoded {img.format} image {img.size[0]}x{img.size[1]} mode={img.mode}")
            result = apply_operation(img, operation, width, height)
            encoded = encode_jpeg(result, quality=quality)
            size = result.size
    except UnidentifiedImageError as e:
        raise ProcessingError(f"Could not decode image: {e}")
    except (OSError, EOFError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise ProcessingError(f"Image processing failed: {e}")

    return encoded, size
