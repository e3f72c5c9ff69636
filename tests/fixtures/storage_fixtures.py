"""Storage fixtures for tests."""
import boto3
import pytest
from moto import mock_aws

from tests.consts import TEST_BASE_URL, TEST_BUCKET_NAME, TEST_REGION
from uploader.files import File, UploadedFile
from uploader.settings import DiskConfig, Settings, get_settings
from uploader.storage.local import LocalFilesystem
from uploader.storage.s3 import S3Filesystem


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def storage_root(tmp_path):
    root = tmp_path / "storage"
    root.mkdir()
    return root


@pytest.fixture
def local_storage(storage_root):
    return LocalFilesystem(root=storage_root, url=TEST_BASE_URL)


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mocked AWS credentials so boto3 never talks to a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)


@pytest.fixture
def mocked_aws(aws_credentials):
    with mock_aws():
        s3_client = boto3.client("s3", region_name=TEST_REGION)
        s3_client.create_bucket(Bucket=TEST_BUCKET_NAME)
        yield s3_client


@pytest.fixture
def s3_storage(mocked_aws):
    return S3Filesystem(bucket=TEST_BUCKET_NAME, region=TEST_REGION, client=mocked_aws)


@pytest.fixture
def settings(storage_root):
    return Settings(
        _env_file=None,
        default_disk="local",
        disks={
            "local": DiskConfig(driver="local", root=str(storage_root), url=TEST_BASE_URL),
            "s3": DiskConfig(driver="s3", bucket=TEST_BUCKET_NAME, region=TEST_REGION),
        },
    )


@pytest.fixture
def make_upload(tmp_path):
    """Factory for client uploads backed by a temp file."""
    counter = {"n": 0}

    def _make(client_name: str, content: bytes = b"some content") -> UploadedFile:
        counter["n"] += 1
        source = tmp_path / f"upload-{counter['n']}"
        source.write_bytes(content)
        return UploadedFile(path=source, client_original_name=client_name)

    return _make


@pytest.fixture
def make_local_file(tmp_path):
    """Factory for files already on the local disk."""
    def _make(filename: str, content: bytes = b"local content") -> File:
        source_dir = tmp_path / "local"
        source_dir.mkdir(exist_ok=True)
        source = source_dir / filename
        source.write_bytes(content)
        return File(path=source)

    return _make
