"""Google Cloud Storage staging area for audio uploads."""

import asyncio
from pathlib import Path

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage

from .errors import CleanupError, ConfigurationError, StagingError

# Failures the SDK can surface: API errors, expired credentials, transport errors
_SDK_ERRORS = (GoogleAPIError, GoogleAuthError, OSError)


def gcs_uri(bucket: str, object_name: str) -> str:
    return f"gs://{bucket}/{object_name}"


class GoogleStorageProvider:
    """Thin async wrapper over ``google.cloud.storage.Client``."""

    def __init__(
        self,
        credentials_path: Path | None = None,
        *,
        client: storage.Client | None = None,
    ) -> None:
        if client is None:
            try:
                if credentials_path is not None:
                    client = storage.Client.from_service_account_json(str(credentials_path))
                else:
                    client = storage.Client()
            except (GoogleAuthError, ValueError, OSError) as e:
                raise ConfigurationError(f"Failed to start the storage service: {e}") from e
        self.client = client

    async def bucket_exists(self, bucket: str) -> bool:
        try:
            found = await asyncio.to_thread(self.client.lookup_bucket, bucket)
        except _SDK_ERRORS as e:
            raise StagingError(f"Unable to look up bucket {bucket}: {e}") from e
        return found is not None

    async def create_bucket(self, bucket: str) -> None:
        try:
            await asyncio.to_thread(self.client.create_bucket, bucket)
        except _SDK_ERRORS as e:
            raise StagingError(f"Unable to create bucket {bucket}: {e}") from e

    async def upload(self, bucket: str, object_name: str, local_path: Path) -> str:
        blob = self.client.bucket(bucket).blob(object_name)
        try:
            await asyncio.to_thread(blob.upload_from_filename, str(local_path))
        except _SDK_ERRORS as e:
            raise StagingError(f"Unable to upload {local_path} to bucket {bucket}: {e}") from e
        return gcs_uri(bucket, object_name)

    async def delete(self, bucket: str, object_name: str) -> None:
        blob = self.client.bucket(bucket).blob(object_name)
        try:
            await asyncio.to_thread(blob.delete)
        except _SDK_ERRORS as e:
            raise CleanupError(f"Unable to delete {gcs_uri(bucket, object_name)}: {e}") from e
