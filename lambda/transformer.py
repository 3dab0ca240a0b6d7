import logging
from dataclasses import dataclass
from typing import Optional

from image_utils import OUTPUT_CONTENT_TYPE, transform_image
from transform_outcome import Failure, Success
from service_config import ServiceConfig
from transform_errors import ProcessingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformResult:
    bucket: str
    source_key: str
    output_key: str
    operation: str
    width: int
    height: int
    size_bytes: int

    @property
    def output_path(self) -> str:
        return f"s3://{self.bucket}/{self.output_key}"


class Transformer:
    """Reads the source object, applies one operation and writes the JPEG result."""

    def __init__(self, storage, config: Optional[ServiceConfig] = None):
        self.storage = storage
        self.config = config or ServiceConfig()

    def run(self, request):
        try:
            return Success(self._run(request))
        except ProcessingError as e:
            logger.error(f"Processing failed for s3://{request.bucket}/{request.key}: {e}")
            return Failure(e)

    def _run(self, request):
        data = self.storage.get(request.bucket, request.key)
        if not data:
            raise ProcessingError(f"s3://{request.bucket}/{request.key} is empty")

        logger.info(f"Applying {request.operation.value} to {request.key}")
        encoded, (width, height) = transform_image(
            data,
            request.operation,
            width=request.width,
            height=request.height,
            quality=self.config.jpeg_quality,
        )

        # Same filename always lands on the same key, a re-run overwrites it
        output_key = request.output_key(self.config.output_prefix)
        self.storage.put(request.bucket, output_key, encoded, OUTPUT_CONTENT_TYPE)

        return TransformResult(
            bucket=request.bucket,
            source_key=request.key,
            output_key=output_key,
            operation=request.operation.value,
            width=width,
            height=height,
            size_bytes=len(encoded),
        )
