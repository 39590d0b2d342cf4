import pytest
import requests_mock

from ufilestore.config.ufile_config import UfileConfig
from ufilestore.storage.ufile_storage import UfileStorage

PUBLIC_KEY = "test-public-key"
PRIVATE_KEY = "test-private-key"
BUCKET = "test-bucket"
BASE_URL = f"http://{BUCKET}.ufile.ucloud.cn"


@pytest.fixture
def ufile_config():
    """Configuration with a small multipart threshold for fast tests."""
    return UfileConfig(
        public_key=PUBLIC_KEY,
        private_key=PRIVATE_KEY,
        bucket_name=BUCKET,
        max_put_size=64,
        max_workers=4,
    )


@pytest.fixture
def storage(ufile_config):
    """UfileStorage bound to the test bucket."""
    ufile_storage = UfileStorage(ufile_config)
    try:
        yield ufile_storage
    finally:
        ufile_storage.close()


@pytest.fixture
def mock_http():
    """Mock every HTTP request made by the client."""
    with requests_mock.Mocker() as m:
        yield m


@pytest.fixture
def clean_ufile_env(monkeypatch):
    """Remove UFILE_* variables so config tests see a clean environment."""
    for name in (
        "UFILE_PUBLIC_KEY",
        "UFILE_PRIVATE_KEY",
        "UFILE_BUCKET",
        "UFILE_SCHEME",
        "UFILE_SUFFIX",
        "UFILE_MAX_PUT_SIZE",
        "UFILE_MAX_WORKERS",
        "UFILE_HTTP_TIMEOUT",
        "UFILE_ABORT_ON_FAILURE",
    ):
        monkeypatch.delenv(name, raising=False)
