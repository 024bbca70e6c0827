"""
Pydantic settings for building a bucket-backed file system from the environment.
"""

import os
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr, field_validator

from .operations import DEFAULT_LIST_PAGE_SIZE


class FileSystemSettings(BaseModel):
    """Settings needed to open a bucket as a file system."""

    bucket_name: str = Field(..., description="Name of the GCS bucket.")
    credentials_json: SecretStr = Field(..., description="Service account or user credential JSON.")
    list_page_size: int = Field(
        default=DEFAULT_LIST_PAGE_SIZE,
        ge=1,
        description="Number of objects requested per listing page.",
    )

    @field_validator("bucket_name")
    @classmethod
    def _bucket_name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("bucket_name cannot be empty")
        return value

    @field_validator("credentials_json")
    @classmethod
    def _credentials_not_blank(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("credentials_json cannot be empty")
        return value

    @classmethod
    def from_env(cls) -> "FileSystemSettings":
        """Read settings from environment variables.

        GCS_BUCKET_NAME: bucket name (required)
        GCS_CREDENTIALS_JSON: credential JSON; when unset the file named by
            GOOGLE_APPLICATION_CREDENTIALS is read instead
        GCS_LIST_PAGE_SIZE: listing page size (optional)
        """
        bucket_name = os.getenv("GCS_BUCKET_NAME")
        if not bucket_name:
            raise ValueError("Bucket name required: set GCS_BUCKET_NAME")

        credentials_json = os.getenv("GCS_CREDENTIALS_JSON")
        if not credentials_json:
            credentials_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
            if not credentials_path:
                raise ValueError(
                    "Credentials required: set GCS_CREDENTIALS_JSON or GOOGLE_APPLICATION_CREDENTIALS"
                )
            credentials_json = Path(credentials_path).read_text(encoding="utf-8")

        kwargs: dict = {"bucket_name": bucket_name, "credentials_json": credentials_json}
        page_size = os.getenv("GCS_LIST_PAGE_SIZE")
        if page_size:
            kwargs["list_page_size"] = page_size
        return cls(**kwargs)
