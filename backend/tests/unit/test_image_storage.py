"""
Tests for image storage adapters.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, NoCredentialsError

from adapters.storage.image_storage import (
    LocalStorageAdapter,
    S3StorageAdapter,
    get_storage_adapter,
    sanitize_filename,
)
from infrastructure.config.settings import Settings

SAMPLE_IMAGE = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00"


class TestSanitizeFilename:
    """Tests for sanitize_filename."""

    def test_strips_directories(self):
        name = sanitize_filename("../../../etc/passwd.png")
        assert "/" not in name
        assert ".." not in name
        assert name.startswith("passwd_")

    def test_forces_image_extension(self):
        assert sanitize_filename("script.sh").endswith(".png")
        assert sanitize_filename("photo.JPG").endswith(".jpg")

    def test_is_unique_per_call(self):
        assert sanitize_filename("a.png") != sanitize_filename("a.png")

    def test_empty_name(self):
        assert sanitize_filename("").startswith("image_")


class TestLocalStorageAdapter:
    """Tests for LocalStorageAdapter."""

    @pytest.fixture
    def adapter(self, tmp_path):
        return LocalStorageAdapter(base_path=str(tmp_path / "root"), public_base_url="http://cdn.test/")

    def _path_for(self, adapter, url):
        return adapter.base_path / url[len(adapter.url_prefix):]

    @pytest.mark.asyncio
    async def test_save_returns_public_url(self, adapter):
        now = datetime.now()
        url = await adapter.save_image(SAMPLE_IMAGE, "goal.png")

        assert url.startswith(f"http://cdn.test/uploads/articles/{now.year}/{now.month:02d}/")
        assert url.endswith(".png")

    @pytest.mark.asyncio
    async def test_save_preserves_content(self, adapter):
        url = await adapter.save_image(SAMPLE_IMAGE, "goal.png")

        assert self._path_for(adapter, url).read_bytes() == SAMPLE_IMAGE

    @pytest.mark.asyncio
    async def test_delete_removes_file(self, adapter):
        url = await adapter.save_image(SAMPLE_IMAGE, "goal.png")
        path = self._path_for(adapter, url)

        assert await adapter.delete_image(url) is True
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_delete_missing_file(self, adapter):
        assert await adapter.delete_image("http://cdn.test/uploads/articles/2020/01/none.png") is False

    @pytest.mark.asyncio
    async def test_delete_ignores_foreign_url(self, adapter):
        assert await adapter.delete_image("https://elsewhere.example/img.png") is False

    @pytest.mark.asyncio
    async def test_delete_refuses_traversal(self, adapter, tmp_path):
        outside = tmp_path / "outside.png"
        outside.write_bytes(SAMPLE_IMAGE)

        assert await adapter.delete_image("http://cdn.test/uploads/../outside.png") is False
        assert outside.exists()


class TestS3StorageAdapter:
    """Tests for S3StorageAdapter with a mocked boto3 client."""

    @pytest.fixture
    def client(self):
        return MagicMock()

    @pytest.fixture
    def adapter(self, client):
        return S3StorageAdapter(bucket="news-images", region="eu-west-1", client=client)

    @pytest.mark.asyncio
    async def test_save_uploads_object(self, adapter, client):
        url = await adapter.save_image(SAMPLE_IMAGE, "goal.jpg")

        client.put_object.assert_called_once()
        kwargs = client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "news-images"
        assert kwargs["ContentType"] == "image/jpeg"
        assert kwargs["Key"].startswith("articles/")
        assert url == f"https://news-images.s3.eu-west-1.amazonaws.com/{kwargs['Key']}"

    @pytest.mark.asyncio
    async def test_save_uses_cdn_domain(self, client):
        adapter = S3StorageAdapter(bucket="news-images", cdn_domain="img.example.com", client=client)

        url = await adapter.save_image(SAMPLE_IMAGE, "goal.png")

        assert url.startswith("https://img.example.com/articles/")

    @pytest.mark.asyncio
    async def test_save_without_bucket_fails(self, client):
        adapter = S3StorageAdapter(bucket=None, client=client)

        with pytest.raises(RuntimeError):
            await adapter.save_image(SAMPLE_IMAGE, "goal.png")

    @pytest.mark.asyncio
    async def test_save_client_error(self, adapter, client):
        client.put_object.side_effect = ClientError(
            {"Error": {"Code": "500", "Message": "boom"}}, "PutObject"
        )

        with pytest.raises(RuntimeError, match="Failed to upload to S3"):
            await adapter.save_image(SAMPLE_IMAGE, "goal.png")

    @pytest.mark.asyncio
    async def test_save_missing_credentials(self, adapter, client):
        client.put_object.side_effect = NoCredentialsError()

        with pytest.raises(RuntimeError, match="credentials"):
            await adapter.save_image(SAMPLE_IMAGE, "goal.png")

    @pytest.mark.asyncio
    async def test_delete_own_object(self, adapter, client):
        url = "https://news-images.s3.eu-west-1.amazonaws.com/articles/2026/01/a.png"

        assert await adapter.delete_image(url) is True
        client.delete_object.assert_called_once_with(Bucket="news-images", Key="articles/2026/01/a.png")

    @pytest.mark.asyncio
    async def test_delete_foreign_url(self, adapter, client):
        assert await adapter.delete_image("https://other.example/a.png") is False
        client.delete_object.assert_not_called()


class TestGetStorageAdapter:
    def test_local(self, tmp_path):
        settings = Settings(storage_type="local", storage_local_path=str(tmp_path))
        assert isinstance(get_storage_adapter(settings), LocalStorageAdapter)

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            get_storage_adapter(Settings(storage_type="ftp"))
