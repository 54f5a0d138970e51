"""Tests for AI file name suggestions (remote client faked)."""

from types import SimpleNamespace

import pytest

from image_converter.core.naming import NAMING_PROMPT, sanitize_name, suggest_name
from image_converter.exceptions.custom_exceptions import RemoteNameError


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, model, contents):
        self.calls.append((model, contents))
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def fake_client(text=None, error=None):
    return SimpleNamespace(models=FakeModels(text=text, error=error))


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("a-cute-cat-sleeping", "a-cute-cat-sleeping"),
        ('"A Cute Cat Sleeping"\n', "a-cute-cat-sleeping"),
        ("Sunset over the   Bay!", "sunset-over-the-bay"),
        ("red--car -- parked", "red-car-parked"),
        ("  -leading and trailing- ", "leading-and-trailing"),
        ("café crème.jpg", "caf-crmejpg"),
    ],
)
def test_sanitize_name(raw, expected):
    assert sanitize_name(raw) == expected


def test_suggest_name_uses_model_and_prompt():
    client = fake_client(text="'Mountain Lake At Dawn'")

    name = suggest_name(b"img", "image/png", model="gemini-test", client=client)

    assert name == "mountain-lake-at-dawn"
    model, contents = client.models.calls[0]
    assert model == "gemini-test"
    assert contents[0] == {"inline_data": {"data": b"img", "mime_type": "image/png"}}
    assert contents[1] == NAMING_PROMPT


def test_suggest_name_empty_reply_raises():
    with pytest.raises(RemoteNameError):
        suggest_name(b"img", "image/png", client=fake_client(text="!!!"))


def test_suggest_name_none_reply_raises():
    with pytest.raises(RemoteNameError):
        suggest_name(b"img", "image/png", client=fake_client(text=None))


def test_suggest_name_remote_error_raises():
    with pytest.raises(RemoteNameError):
        suggest_name(b"img", "image/png", client=fake_client(error=ConnectionError("offline")))


def test_suggest_name_without_api_key_raises(monkeypatch):
    monkeypatch.delenv("IMAGE_CONVERTER_TEST_KEY", raising=False)

    with pytest.raises(RemoteNameError):
        suggest_name(b"img", "image/png", api_key_env="IMAGE_CONVERTER_TEST_KEY")
