import pytest
from conftest import FakePlatform

from stemspark.domain.speech.controller import UNSUPPORTED_MESSAGE, SpeechController, SpeechStatus
from stemspark.domain.speech.voices import Voice


class Recorder:
    def __init__(self) -> None:
        self.ended = 0
        self.errors: list[str] = []

    def on_end(self) -> None:
        self.ended += 1

    def on_error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture
def rec() -> Recorder:
    return Recorder()


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_text_ends_immediately_without_audio(controller, platform, rec, text) -> None:
    controller.speak(text, "English", rec.on_end, rec.on_error)
    assert rec.ended == 1
    assert rec.errors == []
    assert platform.spoken == []
    assert controller.status is SpeechStatus.IDLE


def test_speak_plays_one_segment_and_reports_end(controller, platform, rec) -> None:
    controller.speak("Volcanoes are mountains.", "English", rec.on_end, rec.on_error)

    assert controller.status is SpeechStatus.PLAYING
    assert len(platform.spoken) == 1
    utt = platform.last_utterance
    assert utt.text == "Volcanoes are mountains."
    assert utt.lang == "en-US"
    assert utt.voice.voice_uri == "samantha"
    assert controller.session.cursor == 0

    platform.finish()
    assert rec.ended == 1
    assert rec.errors == []
    assert controller.status is SpeechStatus.IDLE
    assert controller.session.cursor is None


def test_speak_cancels_previous_playback_first(controller, platform, rec) -> None:
    controller.speak("one", "English", rec.on_end, rec.on_error)
    before = platform.cancels
    controller.speak("two", "English", rec.on_end, rec.on_error)
    assert platform.cancels == before + 1


@pytest.mark.parametrize(
    ("voice_uri", "language", "expected"),
    [
        ("daniel", "English", "daniel"),        # explicit URI wins
        ("missing", "English", "samantha"),     # unknown URI -> local exact locale
        (None, "en-AU", "samantha"),            # local base language
        (None, "Spanish", "paulina"),           # local base language beats remote exact locale
        (None, "Spanish (Mexico)", "paulina"),  # local exact locale
    ],
)
def test_voice_selection_precedence(controller, voice_uri, language, expected) -> None:
    from stemspark.domain.speech.language import map_language

    assert controller.select_voice(map_language(language), voice_uri).voice_uri == expected


def test_voice_selection_remote_voices_and_default() -> None:
    platform = FakePlatform(voices=[
        Voice(name="Anna", lang="de-AT", default=False, voice_uri="anna-at"),
        Voice(name="Petra", lang="de-DE", default=False, voice_uri="petra"),
    ])
    controller = SpeechController(platform)
    assert controller.select_voice("de-DE").voice_uri == "petra"   # any voice, exact locale
    assert controller.select_voice("de-CH").voice_uri == "anna-at"  # any voice, base language
    assert controller.select_voice("fr-FR") is None                 # platform default


def test_stop_returns_to_idle_from_any_state(controller, platform, rec) -> None:
    controller.stop()
    assert controller.status is SpeechStatus.IDLE

    controller.speak("hello", "English", rec.on_end, rec.on_error)
    controller.stop()
    assert controller.status is SpeechStatus.IDLE

    controller.speak("hello", "English", rec.on_end, rec.on_error)
    controller.pause()
    assert controller.status is SpeechStatus.PAUSED
    controller.stop()
    assert controller.status is SpeechStatus.IDLE
    assert controller.session.segments == []
    assert controller.session.cursor is None


def test_late_events_after_stop_are_ignored(controller, platform, rec) -> None:
    controller.speak("hello", "English", rec.on_end, rec.on_error)
    controller.stop()

    platform.fail("interrupted", 0)
    platform.fail("network", 0)
    platform.finish(0)

    assert rec.ended == 0
    assert rec.errors == []
    assert controller.status is SpeechStatus.IDLE


def test_new_speak_preempts_and_old_callbacks_never_fire(controller, platform) -> None:
    first, second = Recorder(), Recorder()
    controller.speak("first", "English", first.on_end, first.on_error)
    controller.speak("second", "English", second.on_end, second.on_error)

    # the platform reports the cancelled first utterance late
    platform.fail("interrupted", 0)
    assert first.errors == [] and second.errors == []
    assert controller.status is SpeechStatus.PLAYING

    platform.finish(1)
    assert first.ended == 0
    assert second.ended == 1


def test_genuine_error_is_reported_once_and_resets(controller, platform, rec) -> None:
    controller.speak("hello", "English", rec.on_end, rec.on_error)
    platform.fail("synthesis-failed")

    assert rec.errors == ["Speech synthesis error: synthesis-failed"]
    assert controller.status is SpeechStatus.IDLE

    platform.fail("synthesis-failed")
    platform.finish()
    assert len(rec.errors) == 1
    assert rec.ended == 0


def test_interruption_of_live_utterance_is_reported(controller, platform, rec) -> None:
    controller.speak("hello", "English", rec.on_end, rec.on_error)
    platform.fail("interrupted")
    assert rec.errors == ["Speech synthesis error: interrupted"]
    assert controller.status is SpeechStatus.IDLE


def test_pause_when_idle_and_resume_when_not_paused_are_noops(controller, platform, rec) -> None:
    controller.pause()
    assert controller.status is SpeechStatus.IDLE
    assert platform.paused is False

    controller.resume()
    assert controller.status is SpeechStatus.IDLE

    controller.speak("hello", "English", rec.on_end, rec.on_error)
    controller.resume()
    assert controller.status is SpeechStatus.PLAYING
    assert platform.paused is False


def test_pause_and_resume(controller, platform, rec) -> None:
    controller.speak("hello", "English", rec.on_end, rec.on_error)
    assert controller.is_speaking() is True

    controller.pause()
    assert controller.status is SpeechStatus.PAUSED
    assert controller.is_paused() is True
    assert controller.is_speaking() is False

    controller.pause()
    assert controller.status is SpeechStatus.PAUSED

    controller.resume()
    assert controller.status is SpeechStatus.PLAYING
    assert controller.is_paused() is False
    assert controller.is_speaking() is True


def test_without_platform_everything_is_unsupported(rec) -> None:
    controller = SpeechController(None)
    controller.speak("hello", "English", rec.on_end, rec.on_error)
    assert rec.errors == [UNSUPPORTED_MESSAGE]
    assert rec.ended == 0

    controller.pause()
    controller.resume()
    controller.stop()
    assert controller.status is SpeechStatus.IDLE
    assert controller.is_speaking() is False
    assert controller.voices.list() == []


def test_voice_test_unknown_uri(controller, platform, rec) -> None:
    controller.test("nobody", "Hello, this is a test.", "en-US", rec.on_error)
    assert rec.errors == ['Voice with URI "nobody" not found.']
    assert platform.spoken == []


def test_voice_test_halts_main_queue_and_uses_voice(controller, platform) -> None:
    main, preview = Recorder(), Recorder()
    controller.speak("long story", "English", main.on_end, main.on_error)
    cancels = platform.cancels

    controller.test("paulina", "Hola, esto es una prueba.", None, preview.on_error)

    assert platform.cancels == cancels + 1
    assert controller.status is SpeechStatus.IDLE
    utt = platform.last_utterance
    assert utt.voice.voice_uri == "paulina"
    assert utt.lang == "es-MX"

    platform.finish(0)
    assert main.ended == 0

    platform.fail("audio-busy")
    assert preview.errors == ["audio-busy"]
    assert main.errors == []
