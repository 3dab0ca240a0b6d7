import base64
import binascii
import enum
import json
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote_plus

from transform_outcome import Failure, Success
from service_config import DEFAULT_OUTPUT_PREFIX, DEFAULT_RESIZE_DIMENSION, MAX_RESIZE_DIMENSION
from transform_errors import InputError

logger = logging.getLogger(__name__)


class Operation(enum.Enum):
    GRAYSCALE = 'grayscale'
    WATERCOLOR = 'watercolor'
    SKETCH = 'sketch'
    RESIZE = 'resize'
    # Anything we don't recognise goes through untouched
    PASSTHROUGH = 'passthrough'

    @classmethod
    def parse(cls, value) -> 'Operation':
        if value is None:
            return cls.GRAYSCALE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning(f"Unrecognised operation {value!r}, image will pass through unmodified")
            return cls.PASSTHROUGH


@dataclass(frozen=True)
class TransformRequest:
    bucket: str
    key: str
    operation: Operation = Operation.GRAYSCALE
    width: Optional[int] = None
    height: Optional[int] = None
    source: str = 'http'

    def __post_init__(self):
        if not isinstance(self.bucket, str) or not self.bucket.strip():
            raise InputError("Missing required field 'bucket'")
        if not isinstance(self.key, str) or not self.key.strip():
            raise InputError("Missing required field 'key'")
        for field in ('width', 'height'):
            value = getattr(self, field)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value <= 0):
                raise InputError(f"'{field}' must be a positive integer, got {value!r}")

    @property
    def filename(self) -> str:
        return self.key.split('/')[-1]

    def output_key(self, prefix: str = DEFAULT_OUTPUT_PREFIX) -> str:
        return f"{prefix}{self.filename}"

    def output_path(self, prefix: str = DEFAULT_OUTPUT_PREFIX) -> str:
        return f"s3://{self.bucket}/{self.output_key(prefix)}"


def _require_name(body, field):
    value = body.get(field)
    if not isinstance(value, str) or not value.strip():
        raise InputError(f"Missing required field '{field}'")
    return value


def _dimension(body, field, default, limit=MAX_RESIZE_DIMENSION):
    value = body.get(field)
    if value is None:
        return default
    if isinstance(value, bool):
        raise InputError(f"'{field}' must be a positive integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InputError(f"'{field}' must be a positive integer, got {value!r}")
    if number <= 0:
        raise InputError(f"'{field}' must be a positive integer, got {value!r}")
    if number > limit:
        raise InputError(f"'{field}' must be at most {limit}, got {number}")
    return number


def _check_key(key):
    if key.endswith('/'):
        raise InputError(f"Key '{key}' names a folder, not an image")


def from_storage_event(event) -> TransformRequest:
    records = event['Records']
    if not isinstance(records, list) or not records:
        raise InputError("Storage event has no records")

    # We only handle the first record
    record = records[0]
    try:
        bucket = record['s3']['bucket']['name']
        key = record['s3']['object']['key']
    except (KeyError, TypeError):
        raise InputError("Storage event record is missing s3.bucket.name or s3.object.key")

    if not isinstance(bucket, str) or not bucket:
        raise InputError("Missing required field 'bucket'")
    if not isinstance(key, str) or not key:
        raise InputError("Missing required field 'key'")

    key = unquote_plus(key)
    _check_key(key)
    return TransformRequest(bucket=bucket, key=key, operation=Operation.GRAYSCALE, source='s3')


def _decode_body(event):
    body = event['body'] if 'body' in event else event

    if isinstance(body, (bytes, str)) and event.get('isBase64Encoded'):
        try:
            body = base64.b64decode(body)
        except (binascii.Error, ValueError) as e:
            raise InputError(f"Request body is not valid base64: {e}")

    if isinstance(body, bytes):
        try:
            body = body.decode('utf-8')
        except UnicodeDecodeError as e:
            raise InputError(f"Request body is not valid UTF-8: {e}")

    if isinstance(body, str):
        try:
            body = json.loads(body)
        except json.JSONDecodeError as e:
            raise InputError(f"Request body is not valid JSON: {e}")

    if not isinstance(body, dict):
        raise InputError("Request body must be a JSON object")
    return body


def from_http_body(event, default_width=DEFAULT_RESIZE_DIMENSION,
                   default_height=DEFAULT_RESIZE_DIMENSION,
                   max_dimension=MAX_RESIZE_DIMENSION) -> TransformRequest:
    body = _decode_body(event)

    bucket = _require_name(body, 'bucket')
    key = _require_name(body, 'key')
    _check_key(key)
    operation = Operation.parse(body.get('operation'))

    width = height = None
    if operation is Operation.RESIZE:
        width = _dimension(body, 'width', default_width, max_dimension)
        height = _dimension(body, 'height', default_height, max_dimension)

    return TransformRequest(
        bucket=bucket,
        key=key,
        operation=operation,
        width=width,
        height=height,
        source='http',
    )


def normalize_event(event, default_width=DEFAULT_RESIZE_DIMENSION,
                    default_height=DEFAULT_RESIZE_DIMENSION,
                    max_dimension=MAX_RESIZE_DIMENSION):
    """
    Turn either a storage notification or an HTTP body into a TransformRequest.

    Returns Success(TransformRequest) or Failure(InputError).
    """
    try:
        if not isinstance(event, dict):
            raise InputError(f"Unsupported event type: {type(event).__name__}")
        if 'Records' in event:
            return Success(from_storage_event(event))
        return Success(from_http_body(event, default_width, default_height, max_dimension))
    except InputError as e:
        logger.error(f"Rejected event: {e}")
        return Failure(e)
