import sys
import threading
import time
import pytest
from pathlib import Path

# Add project root (2 levels up from tests/) to sys.path so tests can import 'interpreter'
root = Path(__file__).resolve().parents[1]
if str(root) not in sys.path:
    sys.path.insert(0, str(root))


# Optionally set PYTHONPATH for runtime
import os
os.environ.setdefault('PYTHONPATH', str(root))


from interpreter.services.speech.output import SpeechOutput
from interpreter.services.translation.gateway import TranslationGateway


class FakeTranslator:
    """
    Blocking translator with per-text delays and failures.

    Runs in the gateway's thread pool, so bookkeeping is lock-protected.
    """

    def __init__(self, delays=None, fail_on=None, prepare_error=None, prepare_delay=0.0, result=None):
        self.delays = delays or {}
        self.fail_on = set(fail_on or ())
        self.prepare_error = prepare_error
        self.prepare_delay = prepare_delay
        self.result = result
        self.prepared = []
        self.calls = []
        self.completed = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def prepare(self, source_lang, target_lang):
        time.sleep(self.prepare_delay)
        self.prepared.append((source_lang, target_lang))
        if self.prepare_error is not None:
            raise self.prepare_error

    def translate(self, text, source_lang, target_lang):
        with self._lock:
            self.calls.append(text)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            time.sleep(self.delays.get(text, 0.0))
            if text in self.fail_on:
                raise RuntimeError("translation backend down")
            if self.result is not None:
                return self.result
            return f"[{target_lang}] {text}"
        finally:
            with self._lock:
                self.active -= 1
                self.completed.append(text)


class FakeSpeechDevice:
    """Speech device that records every call in order."""

    def __init__(self, ready=True, voices=None):
        self.ready = ready
        self.voices = set(voices) if voices else None
        self.events = []
        self.stops = 0

    def is_ready(self):
        return self.ready

    def set_voice(self, locale):
        if self.voices is not None and locale not in self.voices:
            return False
        self.events.append(("voice", locale))
        return True

    def enqueue_utterance(self, text, utterance_id):
        self.events.append(("speak", text, utterance_id))

    def stop(self):
        self.stops += 1

    @property
    def utterances(self):
        return [e for e in self.events if e[0] == "speak"]

    @property
    def texts(self):
        return [e[1] for e in self.utterances]

    @property
    def voice_changes(self):
        return [e[1] for e in self.events if e[0] == "voice"]


@pytest.fixture
def translator():
    return FakeTranslator()


@pytest.fixture
def device():
    return FakeSpeechDevice()


@pytest.fixture
def statuses():
    return []


@pytest.fixture
def speech(device, statuses):
    return SpeechOutput(device, on_status=statuses.append)


@pytest.fixture
def gateway(translator):
    return TranslationGateway(translator, timeout_sec=2.0)
