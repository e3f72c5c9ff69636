"""S3 disk (AWS or any S3-compatible endpoint)."""
from __future__ import annotations

import logging
import mimetypes
from datetime import datetime
from typing import Optional
from urllib.parse import quote

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from uploader.exceptions import ConfigurationError, StorageError, TemporaryUrlError
from uploader.files import File
from uploader.settings import VISIBILITY_PRIVATE, VISIBILITY_PUBLIC
from uploader.storage.base import join_path, relative_to_base

logger = logging.getLogger(__name__)

ACLS = {
    VISIBILITY_PUBLIC: "public-read",
    VISIBILITY_PRIVATE: "private",
}

MISSING_OBJECT_CODES = ("404", "NoSuchKey", "NotFound")


class S3Filesystem:
    """Stores files as objects in an S3 bucket."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        url: Optional[str] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        visibility: Optional[str] = None,
        client=None,
    ) -> None:
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.base_url = url.rstrip("/") if url else None
        self.region = region or "us-east-1"
        self.endpoint_url = endpoint_url
        self.default_visibility = visibility
        self.client = client or boto3.client("s3", region_name=self.region, endpoint_url=endpoint_url)

        logger.info("S3Filesystem initialized")
        logger.info(f"  Bucket: {self.bucket}")
        logger.info(f"  Prefix: {self.prefix or '(none)'}")
        logger.info(f"  Endpoint: {self.endpoint_url}")

    @classmethod
    def from_config(cls, config, settings) -> "S3Filesystem":
        if not config.bucket:
            raise ConfigurationError("S3 disk requires a bucket name")

        region = config.region or settings.aws_region
        endpoint_url = config.endpoint_url or settings.aws_endpoint_url
        client = boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
        )
        return cls(
            bucket=config.bucket,
            prefix=config.prefix,
            url=config.url,
            region=region,
            endpoint_url=endpoint_url,
            visibility=config.visibility,
            client=client,
        )

    def _key(self, path: str) -> str:
        path = path.lstrip("/")
        return f"{self.prefix}/{path}" if self.prefix else path

    def exists(self, path: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=self._key(path))
            return True
        except (ClientError, BotoCoreError) as e:
            if isinstance(e, ClientError) and e.response.get("Error", {}).get("Code") in MISSING_OBJECT_CODES:
                return False
            raise StorageError(
                f"Error checking {path} in bucket {self.bucket}: {str(e)}",
                details={"bucket": self.bucket, "key": self._key(path)},
            ) from e

    def delete(self, path: str) -> bool:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=self._key(path))
            logger.info(f"Deleted {path} from bucket {self.bucket}")
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error deleting from S3: {str(e)}")
            return False

    def write_as(self, directory: str, file: File, name: str, visibility: Optional[str] = None):
        stored_path = join_path(directory, name)
        key = self._key(stored_path)

        extra_args = {}
        content_type, _ = mimetypes.guess_type(name)
        extra_args["ContentType"] = content_type or "application/octet-stream"
        visibility = visibility or self.default_visibility
        if visibility in ACLS:
            extra_args["ACL"] = ACLS[visibility]

        try:
            self.client.upload_file(str(file.path), self.bucket, key, ExtraArgs=extra_args)
            logger.info(f"Uploaded {file.path} to S3 as {key}")
            return stored_path
        except (ClientError, BotoCoreError, S3UploadFailedError, OSError) as e:
            logger.error(f"Error uploading to S3: {str(e)}")
            return False

    def _public_base(self) -> str:
        if self.base_url:
            return self.base_url
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com"

    def url(self, path: str) -> str:
        return f"{self._public_base()}/{quote(self._key(path))}"

    def path_from_url(self, url: str) -> Optional[str]:
        """Relative path behind one of this disk's URLs, prefix removed; None for other URLs."""
        key = relative_to_base(url, self._public_base())
        if key is None or not self.prefix:
            return key
        if key.startswith(f"{self.prefix}/"):
            return key[len(self.prefix) + 1:]
        return None

    def temporary_url(self, path: str, expiration: datetime) -> str:
        expires_in = int((expiration - datetime.now(expiration.tzinfo)).total_seconds())
        try:
            return self.client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": self._key(path)},
                ExpiresIn=max(expires_in, 1),
            )
        except (ClientError, BotoCoreError) as e:
            raise TemporaryUrlError(
                f"Could not create temporary URL for {path}: {str(e)}",
                details={"bucket": self.bucket, "key": self._key(path)},
            ) from e
