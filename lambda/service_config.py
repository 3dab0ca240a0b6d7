import os
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PREFIX = 'processed/'
DEFAULT_JPEG_QUALITY = 90
DEFAULT_RESIZE_DIMENSION = 100
# Largest width or height a resize request may ask for
MAX_RESIZE_DIMENSION = 10000
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def _int_from_env(name, default):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


@dataclass(frozen=True)
class ServiceConfig:
    output_prefix: str = DEFAULT_OUTPUT_PREFIX
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    default_width: int = DEFAULT_RESIZE_DIMENSION
    default_height: int = DEFAULT_RESIZE_DIMENSION
    max_resize_dimension: int = MAX_RESIZE_DIMENSION
    log_level: str = 'INFO'
    s3_endpoint_url: Optional[str] = None
    region_name: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'ServiceConfig':
        prefix = os.environ.get('OUTPUT_PREFIX', DEFAULT_OUTPUT_PREFIX)
        if prefix and not prefix.endswith('/'):
            prefix += '/'

        # JPEG quality range is 1-95
        quality = min(max(_int_from_env('JPEG_QUALITY', DEFAULT_JPEG_QUALITY), 1), 95)

        width = _int_from_env('DEFAULT_RESIZE_WIDTH', DEFAULT_RESIZE_DIMENSION)
        height = _int_from_env('DEFAULT_RESIZE_HEIGHT', DEFAULT_RESIZE_DIMENSION)
        if width <= 0 or height <= 0:
            logger.warning("Resize defaults must be positive, using 100x100")
            width = height = DEFAULT_RESIZE_DIMENSION

        max_dimension = _int_from_env('MAX_RESIZE_DIMENSION', MAX_RESIZE_DIMENSION)
        if max_dimension <= 0:
            logger.warning(f"MAX_RESIZE_DIMENSION must be positive, using {MAX_RESIZE_DIMENSION}")
            max_dimension = MAX_RESIZE_DIMENSION
        if max(width, height) > max_dimension:
            width = height = min(DEFAULT_RESIZE_DIMENSION, max_dimension)
            logger.warning(f"Resize defaults exceed {max_dimension}, using {width}x{height}")

        log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
        if log_level not in LOG_LEVELS:
            logger.warning(f"Unknown LOG_LEVEL {log_level!r}, using INFO")
            log_level = 'INFO'

        return cls(
            output_prefix=prefix,
            jpeg_quality=quality,
            default_width=width,
            default_height=height,
            max_resize_dimension=max_dimension,
            log_level=log_level,
            s3_endpoint_url=os.environ.get('S3_ENDPOINT_URL') or None,
            region_name=os.environ.get('AWS_REGION') or None,
        )
