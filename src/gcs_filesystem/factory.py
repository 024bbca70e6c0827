"""Construction entry points for bucket-backed file systems."""

import json
import logging

import google.auth

from .config import FileSystemSettings
from .file_system import FileSystem
from .operations import DEFAULT_LIST_PAGE_SIZE, GoogleFileSystemOperations

log = logging.getLogger(__name__)


def create_file_system(
    bucket_name: str,
    json_credential: str,
    list_page_size: int = DEFAULT_LIST_PAGE_SIZE,
) -> FileSystem:
    """Create a FileSystem over ``bucket_name`` using a JSON credential blob.

    Args:
        bucket_name: GCS bucket to expose. Required.
        json_credential: Credential JSON (service account, authorized user, ...). Required.
        list_page_size: Objects requested per listing page.

    Raises:
        ValueError: If the bucket name or credential is missing or the credential is not JSON.
        google.auth.exceptions.DefaultCredentialsError: If the credential type is not supported.
    """
    if not bucket_name:
        raise ValueError("bucket_name cannot be empty")
    if not json_credential:
        raise ValueError("json_credential cannot be empty")

    credentials, project = google.auth.load_credentials_from_dict(json.loads(json_credential))
    log.debug("Loaded credentials for project %s", project)

    operations = GoogleFileSystemOperations(
        bucket_name,
        credentials,
        project=project,
        list_page_size=list_page_size,
    )
    return FileSystem(operations)


def create_file_system_from_env() -> FileSystem:
    """Create a FileSystem from GCS_* environment variables (see FileSystemSettings.from_env)."""
    settings = FileSystemSettings.from_env()
    return create_file_system(
        settings.bucket_name,
        settings.credentials_json.get_secret_value(),
        list_page_size=settings.list_page_size,
    )
