"""
Tests for speech providers (transcription and synthesis) and the audio store.

Provider SDK clients are replaced with fakes; nothing here touches the network.
"""
import asyncio
from types import SimpleNamespace

import pytest

import bites_bot.config as config_mod
import bites_bot.transcription as transcription_mod
import bites_bot.tts as tts_mod
from bites_bot.transcription import OpenAITranscriber, TranscriptionError, get_transcriber
from bites_bot.tts import AudioStore, OpenAITTSProvider, SynthesisError, get_tts_provider


class FakeTranscriptions:
    def __init__(self, text="i want two cokes", error=None):
        self.text = text
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeSpeech:
    def __init__(self, error=None):
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        return SimpleNamespace(content=b"ID3-mp3")


def _fake_openai(transcriptions=None, speech=None):
    return SimpleNamespace(audio=SimpleNamespace(transcriptions=transcriptions, speech=speech))


@pytest.fixture
def no_api_keys(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("ELEVENLABS_API_KEY", raising=False)
    monkeypatch.setattr(transcription_mod, "_transcriber_instance", None)
    monkeypatch.setattr(tts_mod, "_provider_instance", None)


# =============================================================================
# Transcription
# =============================================================================

class TestOpenAITranscriber:

    def test_transcribe(self):
        transcriber = OpenAITranscriber(api_key="sk-test")
        transcriptions = FakeTranscriptions()
        transcriber.client = _fake_openai(transcriptions=transcriptions)

        text = asyncio.run(transcriber.transcribe(b"OggS", "audio/ogg; codecs=opus"))

        assert text == "i want two cokes"
        assert transcriptions.kwargs["model"] == "whisper-1"
        assert transcriptions.kwargs["language"] == "en"
        filename, audio, mime_type = transcriptions.kwargs["file"]
        assert filename.startswith("voice.")
        assert audio == b"OggS"
        assert mime_type == "audio/ogg"

    def test_provider_error_is_wrapped(self):
        transcriber = OpenAITranscriber(api_key="sk-test")
        transcriber.client = _fake_openai(transcriptions=FakeTranscriptions(error=RuntimeError("429")))

        with pytest.raises(TranscriptionError):
            asyncio.run(transcriber.transcribe(b"OggS"))

    def test_requires_api_key(self, no_api_keys):
        with pytest.raises(ValueError):
            OpenAITranscriber()

    def test_factory_without_key(self, no_api_keys):
        with pytest.raises(ValueError):
            get_transcriber()

    def test_factory_returns_singleton(self, no_api_keys, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert get_transcriber() is get_transcriber()


# =============================================================================
# Synthesis
# =============================================================================

class TestOpenAITTSProvider:

    def test_synthesize(self):
        provider = OpenAITTSProvider(api_key="sk-test")
        speech = FakeSpeech()
        provider.client = _fake_openai(speech=speech)

        audio = asyncio.run(provider.synthesize("Your order is confirmed"))

        assert audio == b"ID3-mp3"
        assert speech.kwargs["input"] == "Your order is confirmed"
        assert speech.kwargs["voice"] == config_mod.TTS_VOICE
        assert speech.kwargs["response_format"] == "mp3"

    def test_unknown_voice_falls_back(self):
        provider = OpenAITTSProvider(api_key="sk-test")
        speech = FakeSpeech()
        provider.client = _fake_openai(speech=speech)

        asyncio.run(provider.synthesize("hi", voice_id="robot"))
        assert speech.kwargs["voice"] == "nova"

    def test_supported_voice_is_used(self):
        provider = OpenAITTSProvider(api_key="sk-test")
        speech = FakeSpeech()
        provider.client = _fake_openai(speech=speech)

        asyncio.run(provider.synthesize("hi", voice_id="onyx"))
        assert speech.kwargs["voice"] == "onyx"

    def test_provider_error_is_wrapped(self):
        provider = OpenAITTSProvider(api_key="sk-test")
        provider.client = _fake_openai(speech=FakeSpeech(error=RuntimeError("500")))

        with pytest.raises(SynthesisError):
            asyncio.run(provider.synthesize("hi"))

    def test_factory_without_key(self, no_api_keys):
        with pytest.raises(ValueError):
            get_tts_provider()

    def test_unknown_provider_defaults_to_openai(self, no_api_keys, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(config_mod, "TTS_PROVIDER", "bogus")
        assert get_tts_provider().name == "OpenAI"

    def test_elevenlabs_requires_key(self, no_api_keys):
        with pytest.raises(ValueError):
            get_tts_provider(tts_mod.TTSProvider.ELEVENLABS)


# =============================================================================
# Audio Store
# =============================================================================

class TestAudioStore:

    def test_creates_directory(self, tmp_path):
        store = AudioStore(directory=tmp_path / "nested" / "audio")
        assert store.directory.is_dir()

    def test_save_and_public_url(self, tmp_path):
        store = AudioStore(directory=tmp_path, base_url="https://bot.example.com/")
        filename = store.save(b"ID3")

        assert filename.endswith(".mp3")
        assert (tmp_path / filename).read_bytes() == b"ID3"
        assert store.public_url(filename) == f"https://bot.example.com/audio/{filename}"

    def test_filenames_are_unique(self, tmp_path):
        store = AudioStore(directory=tmp_path)
        assert store.save(b"a") != store.save(b"b")

    def test_delete_missing_file_is_quiet(self, tmp_path):
        AudioStore(directory=tmp_path).delete("missing.mp3")

    def test_file_removed_after_retention(self, tmp_path):
        store = AudioStore(directory=tmp_path, retention_seconds=0)

        async def save_and_wait():
            filename = store.save(b"ID3")
            assert (tmp_path / filename).exists()
            await asyncio.sleep(0.05)
            return filename

        filename = asyncio.run(save_and_wait())
        assert not (tmp_path / filename).exists()
