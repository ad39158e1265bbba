import os
import shutil

import pytest
import redis


@pytest.fixture(scope="session")
def redis_url() -> str:
    url = os.environ.get("VISION_QUEUE_REDIS_URL", "redis://localhost:6379/15")
    client = redis.Redis.from_url(url)
    try:
        client.ping()
    except redis.RedisError as e:
        pytest.skip(f"Redis not available at {url}: {e}. Set VISION_QUEUE_REDIS_URL")
    finally:
        client.close()
    return url


@pytest.fixture(scope="session")
def tesseract_available() -> None:
    if shutil.which("tesseract") is None:
        pytest.skip("tesseract binary not installed")


@pytest.fixture(scope="session")
def poppler_available() -> None:
    if shutil.which("pdftoppm") is None:
        pytest.skip("poppler-utils not installed")
