"""Tests for the storage and chat service implementations."""

import re

import pytest
from botocore.exceptions import ClientError
from openai import OpenAIError

from app.core.config import get_settings
from app.services.chat import MockChatService, OpenAIChatService
from app.services.storage import MockStorageService, S3StorageService, build_object_key
from app.services.storage.base import file_extension, sanitize_key_part


@pytest.fixture
def aws_settings(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "ap-south-1")
    monkeypatch.setenv("AWS_BUCKET_NAME", "menu-images")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test-key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test-secret")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


class FakeS3Client:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def put_object(self, **params):
        if self.error:
            raise self.error
        self.calls.append(params)

    def head_bucket(self, **params):
        if self.error:
            raise self.error


class FakeResponse:
    def model_dump(self):
        return {"object": "chat.completion", "choices": [{"message": {"content": "Try the dosa"}}]}


class FakeCompletions:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return FakeResponse()


class FakeOpenAIClient:
    def __init__(self, error=None):
        self.chat = type("Chat", (), {})()
        self.chat.completions = FakeCompletions(error)


class TestObjectKeys:

    def test_sanitize_key_part(self):
        assert sanitize_key_part("Spice Route") == "spice-route"
        assert sanitize_key_part("Café #1") == "caf---1"

    def test_file_extension(self):
        assert file_extension("photo.final.PNG") == ".PNG"
        assert file_extension("photo") == ""
        assert file_extension(None) == ""

    def test_build_object_key(self):
        key = build_object_key("Spice Route", "Masala Dosa", "dosa.jpg")

        assert re.fullmatch(r"spice-route/masala-dosa-[0-9a-f-]{36}\.jpg", key)

    def test_keys_are_unique(self):
        assert build_object_key("a", "b", "c.png") != build_object_key("a", "b", "c.png")


class TestMockStorage:

    @pytest.mark.asyncio
    async def test_upload(self):
        storage = MockStorageService(base_url="http://cdn.local/")

        result = await storage.upload(b"img", "spice-route/dosa.png", "image/png")

        assert result.success is True
        assert result.url == "http://cdn.local/spice-route/dosa.png"
        assert storage.objects["spice-route/dosa.png"] == (b"img", "image/png")
        assert await storage.health_check() is True


class TestS3Storage:

    @pytest.mark.asyncio
    async def test_upload_puts_object_and_returns_public_url(self, aws_settings):
        storage = S3StorageService()
        storage._client = FakeS3Client()

        result = await storage.upload(b"img", "spice-route/dosa.png", "image/png")

        assert result.success is True
        assert result.url == "https://menu-images.s3.ap-south-1.amazonaws.com/spice-route/dosa.png"
        assert storage._client.calls == [{
            "Bucket": "menu-images",
            "Key": "spice-route/dosa.png",
            "Body": b"img",
            "ContentType": "image/png",
        }]

    @pytest.mark.asyncio
    async def test_upload_failure(self, aws_settings):
        storage = S3StorageService()
        storage._client = FakeS3Client(
            error=ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
        )

        result = await storage.upload(b"img", "k.png")

        assert result.success is False
        assert result.url is None
        assert "AccessDenied" in result.error_message
        assert await storage.health_check() is False

    def test_requires_bucket(self, monkeypatch):
        monkeypatch.delenv("AWS_BUCKET_NAME", raising=False)
        get_settings.cache_clear()
        try:
            with pytest.raises(ValueError, match="AWS_BUCKET_NAME"):
                S3StorageService()
        finally:
            get_settings.cache_clear()


class TestChatServices:

    @pytest.mark.asyncio
    async def test_mock_echoes_last_user_message(self):
        chat = MockChatService()

        result = await chat.complete([
            {"role": "system", "content": "You are a waiter"},
            {"role": "user", "content": "first"},
            {"role": "assistant", "content": "ok"},
            {"role": "user", "content": "second"},
        ])

        assert result.success is True
        assert result.data["choices"][0]["message"]["content"] == "[mock] second"

    @pytest.mark.asyncio
    async def test_openai_uses_fixed_model_configuration(self):
        client = FakeOpenAIClient()
        chat = OpenAIChatService(client=client)
        messages = [{"role": "user", "content": "What is vegan?"}]

        result = await chat.complete(messages)

        assert result.success is True
        assert result.data["choices"][0]["message"]["content"] == "Try the dosa"
        assert client.chat.completions.calls == [{
            "model": "gpt-4o",
            "messages": messages,
            "max_tokens": 16000,
            "temperature": 0.3,
        }]

    @pytest.mark.asyncio
    async def test_openai_error_is_reported(self):
        chat = OpenAIChatService(client=FakeOpenAIClient(error=OpenAIError("rate limited")))

        result = await chat.complete([{"role": "user", "content": "hi"}])

        assert result.success is False
        assert result.error_message == "rate limited"

    def test_openai_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        get_settings.cache_clear()
        try:
            with pytest.raises(ValueError, match="OPENAI_API_KEY"):
                OpenAIChatService()
        finally:
            get_settings.cache_clear()
