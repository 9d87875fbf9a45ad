"""
Google Cloud Storage upload helper for user avatars.
Uses Application Default Credentials; no service account key files.
"""

from datetime import datetime
from typing import BinaryIO, Optional
from urllib.parse import quote

import google.auth
from google.cloud import storage

from common.logging import get_logger
from common.utils import compact_timestamp, safe_filename
from config.config import Storage_Config
from config.settings import Settings

logger = get_logger(__name__)

STORAGE_SCOPES = ("https://www.googleapis.com/auth/devstorage.read_write",)


def create_storage_client(settings: Settings) -> storage.Client:
    """
    Create a storage client from ambient credentials (ADC).

    Args:
        settings (Settings): Provides the optional project override.

    Returns:
        storage.Client: Client bound to the discovered credentials.

    Raises:
        google.auth.exceptions.DefaultCredentialsError: If no ambient credentials exist.
    """
    if settings.google_application_credentials:
        logger.warning(
            "GOOGLE_APPLICATION_CREDENTIALS is set; ADC will use that key file instead of ambient credentials",
            extra={"path": settings.google_application_credentials},
        )

    credentials, discovered_project = google.auth.default(scopes=list(STORAGE_SCOPES))
    project = settings.gcp_project_id or discovered_project
    logger.debug("Storage client created from ambient credentials", extra={"project": project})
    return storage.Client(project=project, credentials=credentials)


def public_url(bucket_name: str, object_name: str) -> str:
    """Public HTTPS URL of an object."""
    return f"{Storage_Config.PUBLIC_URL_BASE}/{bucket_name}/{quote(object_name, safe='/')}"


def build_avatar_object_name(
    user_id: str, filename: str, moment: Optional[datetime] = None
) -> str:
    """
    Build a timestamp-qualified object name so every upload is unique.

    Returns:
        str: 'avatars/<user_id>/<timestamp>_<filename>'.
    """
    return "/".join(
        (
            Storage_Config.AVATAR_PREFIX,
            safe_filename(user_id, default="user"),
            f"{compact_timestamp(moment)}_{safe_filename(filename)}",
        )
    )


class StorageService:
    """
    Writes byte streams to one bucket and publishes them.
    """

    def __init__(self, client: storage.Client, bucket_name: str):
        if not bucket_name:
            raise ValueError("bucket_name is required")
        self.client = client
        self.bucket_name = bucket_name

    def upload(
        self,
        object_name: str,
        stream: BinaryIO,
        content_type: str = Storage_Config.AVATAR_CONTENT_TYPE,
    ) -> str:
        """
        Write a stream to the bucket, grant public read access and return the public URL.

        Args:
            object_name (str): Destination object path.
            stream (BinaryIO): Open byte stream, read from its current position.
            content_type (str): Content type stored on the object.

        Returns:
            str: https://storage.googleapis.com/<bucket>/<object>

        Raises:
            ValueError: If object_name is empty.
            Exception: Storage and I/O errors are re-raised unmodified.
        """
        if not object_name:
            raise ValueError("object_name is required")

        blob = self.client.bucket(self.bucket_name).blob(object_name)
        try:
            blob.upload_from_file(stream, content_type=content_type)
            blob.make_public()
        except Exception as e:
            logger.error(
                "Failed to upload object",
                extra={"bucket": self.bucket_name, "object": object_name, "error": str(e)},
            )
            raise

        url = public_url(self.bucket_name, object_name)
        logger.info("Object uploaded", extra={"bucket": self.bucket_name, "object": object_name})
        return url

    def upload_avatar(self, user_id: str, filename: str, stream: BinaryIO) -> str:
        """Upload a user's avatar under a fresh, timestamp-qualified name."""
        return self.upload(build_avatar_object_name(user_id, filename), stream)
