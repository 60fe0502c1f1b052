from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from bites_bot.app_factory import create_app
from bites_bot.commands import CommandInterpreter
from bites_bot.menu import build_default_catalog
from bites_bot.message_processor import MessageProcessor
from bites_bot.middleware import limiter
from bites_bot.state import ChatSession
from bites_bot.stores import InMemoryOrderStore, InMemorySessionStore
from bites_bot.transcription import BaseTranscriber, TranscriptionError
from bites_bot.tts import AudioStore, BaseTTSProvider, SynthesisError

TEST_USER = "whatsapp:+15551230001"

# 7:00 PM UTC, fixed so order ids and tracking output are predictable
FIXED_NOW = datetime(2024, 5, 1, 19, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: float) -> None:
        self.now += timedelta(minutes=minutes)


class FakeMessenger:
    """Records outbound messages instead of calling Twilio."""

    mock = True

    def __init__(self):
        self.sent: List[dict] = []
        self.fail = False
        self.fail_media = False

    def send(self, to: str, body: str, media_url: Optional[str] = None) -> dict:
        if self.fail or (media_url and self.fail_media):
            raise RuntimeError("Twilio is down")
        self.sent.append({"to": to, "body": body, "media_url": media_url})
        return {"status": "sent", "to": to, "mock": True}


class FakeTranscriber(BaseTranscriber):
    def __init__(self, text: str = "i want two cokes", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls = []

    @property
    def name(self) -> str:
        return "Fake"

    async def transcribe(self, audio: bytes, mime_type: str = "audio/ogg") -> str:
        self.calls.append((audio, mime_type))
        if self.error is not None:
            raise self.error
        return self.text


class FakeTTSProvider(BaseTTSProvider):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: List[str] = []

    @property
    def name(self) -> str:
        return "Fake"

    async def synthesize(self, text: str, voice_id: Optional[str] = None) -> bytes:
        self.calls.append(text)
        if self.fail:
            raise SynthesisError("synthesis failed")
        return b"ID3-fake-mp3"


async def fake_download(url: str) -> bytes:
    return b"OggS-fake-audio"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def catalog():
    return build_default_catalog()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sessions():
    return InMemorySessionStore()


@pytest.fixture
def orders():
    return InMemoryOrderStore()


@pytest.fixture
def session():
    return ChatSession(user_id=TEST_USER)


@pytest.fixture
def interpreter(catalog, orders, clock):
    return CommandInterpreter(catalog, orders, restaurant_name="Delicious Bites", clock=clock)


@pytest.fixture
def messenger():
    return FakeMessenger()


@pytest.fixture
def transcriber():
    return FakeTranscriber()


@pytest.fixture
def tts_provider():
    return FakeTTSProvider()


@pytest.fixture
def audio_store(tmp_path):
    return AudioStore(directory=tmp_path / "audio", base_url="https://bot.example.com")


@pytest.fixture
def processor(catalog, sessions, orders, interpreter, messenger, transcriber, tts_provider, audio_store):
    return MessageProcessor(
        catalog=catalog,
        sessions=sessions,
        orders=orders,
        interpreter=interpreter,
        messenger=messenger,
        transcriber=transcriber,
        tts_provider=tts_provider,
        audio_store=audio_store,
        media_downloader=fake_download,
        timeout=2.0,
    )


@pytest.fixture
def client(processor):
    """FastAPI TestClient serving the fake-backed processor.

    Rate limiting is disabled; tests that need it turn it back on.
    """
    limiter.enabled = False
    app = create_app(processor=processor)
    with TestClient(app) as test_client:
        yield test_client
    limiter.enabled = False
    limiter.reset()


@pytest.fixture
def transcription_error():
    return TranscriptionError("Could not transcribe audio")
