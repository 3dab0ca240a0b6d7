import requests
import sys

OPERATIONS = ("grayscale", "watercolor", "sketch", "resize")


def build_payload(bucket, key, operation="grayscale", width=None, height=None):
    payload = {"bucket": bucket, "key": key, "operation": operation}
    if width is not None:
        payload["width"] = int(width)
    if height is not None:
        payload["height"] = int(height)
    return payload


def invoke(endpoint_url: str, payload: dict, timeout: int = 35) -> dict:
    """
    Sends a transform request to the /process endpoint and returns the JSON body.
    """
    print(f"Sending request to {endpoint_url}...")
    response = requests.post(endpoint_url, json=payload, timeout=timeout)
    body = response.json()
    if response.status_code != 200:
        raise RuntimeError(f"{response.status_code}: {body.get('error', body)}")
    return body


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) < 3:
        print("Usage: python invoke_transform.py <endpoint_url> <bucket> <key> "
              "[operation] [width] [height]")
        return 1

    endpoint, bucket, key = argv[:3]
    operation = argv[3] if len(argv) > 3 else "grayscale"
    if operation not in OPERATIONS:
        print(f"Warning: '{operation}' is not a known operation, the image will be copied unchanged.")

    try:
        payload = build_payload(
            bucket, key, operation,
            width=argv[4] if len(argv) > 4 else None,
            height=argv[5] if len(argv) > 5 else None,
        )
    except ValueError as e:
        print(f"Error: width and height must be integers ({e})")
        return 1

    try:
        result = invoke(endpoint, payload)
    except Exception as e:
        print(f"Error: {e}")
        return 1

    print(result["message"])
    print(f"Output: {result['output_path']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
