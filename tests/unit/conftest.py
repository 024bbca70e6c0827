"""Shared fixtures: an in-memory stand-in for ``google.cloud.storage.Client``."""

import base64
import hashlib
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest
from google.api_core.exceptions import NotFound

from gcs_filesystem.file_system import FileSystem
from gcs_filesystem.operations import GoogleFileSystemOperations

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


@dataclass
class _StoredObject:
    data: bytes
    content_type: str | None
    time_created: datetime
    updated: datetime

    @property
    def md5_hash(self) -> str:
        return base64.b64encode(hashlib.md5(self.data).digest()).decode("ascii")


class FakeBlob:
    def __init__(self, client: "FakeStorageClient", name: str):
        self._client = client
        self.name = name
        self.size = None
        self.content_type = None
        self.time_created = None
        self.updated = None
        self.md5_hash = None

    def _load(self) -> "FakeBlob":
        stored = self._client.objects[self.name]
        self.size = len(stored.data)
        self.content_type = stored.content_type
        self.time_created = stored.time_created
        self.updated = stored.updated
        self.md5_hash = stored.md5_hash
        return self

    def upload_from_file(self, file_obj, content_type=None):
        self._client.raise_if_failing("upload", self.name)
        self._client.store(self.name, file_obj.read(), content_type)
        self._load()

    def upload_from_string(self, data, content_type=None):
        self._client.raise_if_failing("upload", self.name)
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._client.store(self.name, data, content_type)
        self._load()

    def download_to_file(self, file_obj):
        self._client.raise_if_failing("download", self.name)
        if self.name not in self._client.objects:
            raise NotFound(f"No such object: {self.name}")
        file_obj.write(self._client.objects[self.name].data)


class FakePage(list):
    def __init__(self, blobs, prefixes):
        super().__init__(blobs)
        self.prefixes = tuple(prefixes)


class FakeIterator:
    def __init__(self, page: FakePage, next_page_token: str | None):
        self._page = page
        self.next_page_token = next_page_token

    @property
    def pages(self):
        return iter([self._page])


class FakeBucket:
    def __init__(self, client: "FakeStorageClient", name: str):
        self._client = client
        self.name = name

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self._client, name)

    def get_blob(self, name: str) -> FakeBlob | None:
        self._client.lookups.append(name)
        self._client.raise_if_failing("get", name)
        if name not in self._client.objects:
            return None
        return FakeBlob(self._client, name)._load()

    def copy_blob(self, blob: FakeBlob, destination_bucket: "FakeBucket", new_name: str | None = None) -> FakeBlob:
        self._client.raise_if_failing("copy", blob.name)
        if blob.name not in self._client.objects:
            raise NotFound(f"No such object: {blob.name}")
        source = self._client.objects[blob.name]
        self._client.store(new_name, source.data, source.content_type)
        return FakeBlob(self._client, new_name)._load()

    def delete_blob(self, name: str) -> None:
        self._client.raise_if_failing("delete", name)
        if name not in self._client.objects:
            raise NotFound(f"No such object: {name}")
        del self._client.objects[name]


class FakeStorageClient:
    """Implements the subset of the storage client API used by the adapter.

    Listing follows GCS semantics: with a delimiter, keys that continue past
    the next delimiter collapse into a common prefix; with
    ``include_trailing_delimiter`` objects whose name ends at that delimiter
    are returned as items too. Items and prefixes share one page budget.
    """

    def __init__(self):
        self.objects: dict[str, _StoredObject] = {}
        self.failures: dict[tuple[str, str], Exception] = {}
        self.lookups: list[str] = []
        self.list_calls: list[dict] = []
        self.closed = False
        self._clock = 0

    def store(self, name: str, data: bytes, content_type: str | None) -> None:
        self._clock += 1
        now = _EPOCH + timedelta(seconds=self._clock)
        existing = self.objects.get(name)
        created = existing.time_created if existing else now
        self.objects[name] = _StoredObject(data, content_type, created, now)

    def put(self, name: str, data: bytes = b"", content_type: str | None = "application/octet-stream") -> None:
        self.store(name, data, content_type)

    def put_directory(self, name: str) -> None:
        self.store(name, b"", "application/x-directory")

    def raise_if_failing(self, operation: str, name: str) -> None:
        error = self.failures.get((operation, name))
        if error is not None:
            raise error

    def bucket(self, name: str) -> FakeBucket:
        return FakeBucket(self, name)

    def list_blobs(
        self,
        bucket_or_name,
        prefix=None,
        delimiter=None,
        include_trailing_delimiter=None,
        page_token=None,
        page_size=None,
        max_results=None,
    ) -> FakeIterator:
        self.list_calls.append(
            {
                "prefix": prefix,
                "delimiter": delimiter,
                "include_trailing_delimiter": include_trailing_delimiter,
                "page_token": page_token,
                "page_size": page_size,
            }
        )
        prefix = prefix or ""
        entries: list[tuple[str, str]] = []
        seen_prefixes: set[str] = set()
        for name in sorted(self.objects):
            if not name.startswith(prefix):
                continue
            rest = name[len(prefix):]
            if delimiter and delimiter in rest:
                common = prefix + rest[: rest.index(delimiter) + len(delimiter)]
                if common not in seen_prefixes:
                    seen_prefixes.add(common)
                    entries.append(("prefix", common))
                if include_trailing_delimiter and name == common:
                    entries.append(("item", name))
                continue
            entries.append(("item", name))

        start = int(page_token) if page_token else 0
        size = page_size or len(entries) or 1
        chunk = entries[start:start + size]
        next_token = str(start + size) if start + size < len(entries) else None

        blobs = [FakeBlob(self, name)._load() for kind, name in chunk if kind == "item"]
        prefixes = [name for kind, name in chunk if kind == "prefix"]
        return FakeIterator(FakePage(blobs, prefixes), next_token)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client() -> FakeStorageClient:
    return FakeStorageClient()


@pytest.fixture
def operations(fake_client) -> GoogleFileSystemOperations:
    return GoogleFileSystemOperations("test-bucket", client_factory=lambda: fake_client)


@pytest.fixture
def file_system(operations) -> FileSystem:
    return FileSystem(operations)
