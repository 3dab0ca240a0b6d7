import json

from transform_outcome import Success

SUCCESS_MESSAGE = 'Processed successfully'
JSON_HEADERS = {'Content-Type': 'application/json'}


def success_response(result):
    return {
        'statusCode': 200,
        'headers': dict(JSON_HEADERS),
        'body': json.dumps({
            'message': SUCCESS_MESSAGE,
            'output_path': result.output_path,
        }),
    }


def error_response(error):
    message = str(error) or type(error).__name__
    return {
        'statusCode': 500,
        'headers': dict(JSON_HEADERS),
        'body': json.dumps({'error': message}),
    }


def build_response(outcome):
    if isinstance(outcome, Success):
        return success_response(outcome.value)
    return error_response(outcome.error)
