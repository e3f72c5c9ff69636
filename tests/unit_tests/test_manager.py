import pytest

from tests.consts import TEST_BUCKET_NAME
from uploader.adapter import UploaderAdapter
from uploader.exceptions import ConfigurationError, DiskNotConfiguredError
from uploader.manager import UploadManager
from uploader.settings import DiskConfig, Settings
from uploader.storage.local import LocalFilesystem
from uploader.storage.s3 import S3Filesystem


def test_disk_returns_fresh_adapter_each_call(manager):
    first = manager.disk()
    second = manager.disk()

    assert isinstance(first, UploaderAdapter)
    assert first is not second
    assert first.get_storage() is second.get_storage()


def test_default_disk_is_used_when_no_name_given(manager, storage_root):
    storage = manager.disk().get_storage()

    assert isinstance(storage, LocalFilesystem)
    assert storage.root == storage_root.resolve()


def test_named_s3_disk(mocked_aws, manager):
    storage = manager.disk("s3").get_storage()

    assert isinstance(storage, S3Filesystem)
    assert storage.bucket == TEST_BUCKET_NAME


def test_configuration_does_not_leak_between_adapters(manager, make_upload):
    manager.disk().dir("avatars").name("me.png").visibility("public")

    fresh = manager.disk()

    assert fresh.get_directory() == "files"
    assert fresh.get_visibility() is None
    assert fresh.get_store_name(make_upload("photo.jpg")) == "photo.jpg"


def test_disk_with_default_directory(manager):
    adapter = manager.disk(default_directory=UploaderAdapter.DIRECTORY_IMAGE)
    assert adapter.get_directory() == "images"


def test_unknown_disk_raises(manager):
    with pytest.raises(DiskNotConfiguredError) as exc_info:
        manager.disk("ftp")
    assert exc_info.value.details["disk"] == "ftp"


def test_unknown_driver_raises():
    settings = Settings(_env_file=None, disks={"odd": DiskConfig(driver="dropbox")})
    with pytest.raises(DiskNotConfiguredError):
        UploadManager(settings).disk("odd")


def test_misconfigured_s3_disk_raises():
    settings = Settings(_env_file=None, default_disk="s3", disks={"s3": DiskConfig(driver="s3")})
    with pytest.raises(ConfigurationError):
        UploadManager(settings).disk()


def test_extend_registers_custom_driver(storage_root):
    settings = Settings(
        _env_file=None,
        default_disk="scratch",
        disks={"scratch": DiskConfig(driver="scratch", root=str(storage_root))},
    )
    created = []

    def scratch_factory(config, settings):
        storage = LocalFilesystem(config.root, url="https://scratch.example.com")
        created.append(storage)
        return storage

    manager = UploadManager(settings).extend("scratch", scratch_factory)

    assert manager.disk().url("a.txt") == "https://scratch.example.com/a.txt"
    assert manager.disk().get_storage() is created[0]
    assert len(created) == 1
