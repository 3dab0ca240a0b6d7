import io
import os
import sys

import pytest
from PIL import Image

# 'lambda' is a keyword so the function code can't be imported as a package
ROOT = os.path.join(os.path.dirname(__file__), '..')
sys.path.insert(0, os.path.join(ROOT, 'lambda'))
sys.path.insert(0, os.path.join(ROOT, 'infrastructure'))
sys.path.insert(0, ROOT)


def make_image_bytes(size=(64, 48), mode='RGB', color=(200, 40, 90), fmt='PNG'):
    if mode == 'L':
        color = 128
    elif mode == 'RGBA':
        color = color + (120,)
    img = Image.new(mode, size, color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return make_image_bytes()


@pytest.fixture
def image_factory():
    return make_image_bytes


@pytest.fixture
def aws_credentials():
    """Mocked AWS credentials for moto."""
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_SECURITY_TOKEN'] = 'testing'
    os.environ['AWS_SESSION_TOKEN'] = 'testing'
    os.environ['AWS_DEFAULT_REGION'] = 'us-east-1'
