import json
import logging

from envelope import build_response, error_response
from s3_storage import S3Storage
from service_config import ServiceConfig
from transform_request import normalize_event
from transformer import Transformer

config = ServiceConfig.from_env()

logger = logging.getLogger()
logger.setLevel(config.log_level)

# Cached across warm invocations
TRANSFORMER = None


def get_transformer():
    global TRANSFORMER
    if TRANSFORMER is None:
        logger.info("Creating S3-backed transformer")
        TRANSFORMER = Transformer(S3Storage.from_config(config), config)
    return TRANSFORMER


def set_transformer(transformer):
    global TRANSFORMER
    TRANSFORMER = transformer


def lambda_handler(event, context):
    try:
        logger.info("Received event: " + json.dumps(event, indent=2, default=str))

        outcome = normalize_event(event, config.default_width, config.default_height,
                                  config.max_resize_dimension)
        if not outcome.ok:
            return build_response(outcome)

        request = outcome.value
        logger.info(f"Transforming s3://{request.bucket}/{request.key} "
                    f"with {request.operation.value} (via {request.source})")

        outcome = get_transformer().run(request)
        if outcome.ok:
            logger.info(f"Wrote {outcome.value.output_path}")
        return build_response(outcome)

    except Exception as e:
        logger.exception(f"Error: {e}")
        return error_response(e)
