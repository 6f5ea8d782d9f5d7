# tts.py
# Spoken turn-by-turn guidance.
# Navigation events are turned into phrases on the caller's thread and spoken
# by a worker thread fed through a queue, so the navigation engine never
# waits for audio. Each phrase is played by pyttsx3 in a child interpreter.

import logging
import queue
import subprocess
import sys
import threading
from typing import Optional

from navigation.router.models import NavEvent, NavEventKind
from navigation.router.nav_config import NavConfig

logger = logging.getLogger(__name__)


ARRIVAL_PHRASE = "You have arrived at your destination"
OFF_ROUTE_PHRASE = "You are off route. Recalculating..."


# ---------------------------------------------------------------------------
# Phrasing
# ---------------------------------------------------------------------------

def format_distance_for_speech(meters: int) -> str:
    if meters < 100:
        return f"{meters} meters"
    if meters < 1000:
        return f"{(meters // 50) * 50} meters"
    km = meters / 1000.0
    if km < 2.0:
        return f"{km:.1f} kilometers"
    return f"{km:.0f} kilometers"


def format_announcement(instruction: str, distance_m: int) -> str:
    """'In 200 meters, Turn left', or just the instruction when distance is 0."""
    text = (instruction or "").strip()
    if distance_m > 0:
        return f"In {format_distance_for_speech(distance_m)}, {text}"
    return text


def phrase_for_event(event: NavEvent) -> Optional[str]:
    """Text to speak for an engine event, or None if the event is silent."""
    if event.kind is NavEventKind.INSTRUCTION_UPDATE:
        return format_announcement(event.text or "", event.distance_m or 0)
    if event.kind is NavEventKind.NAVIGATION_COMPLETED:
        return ARRIVAL_PHRASE
    if event.kind is NavEventKind.OFF_ROUTE:
        return OFF_ROUTE_PHRASE
    return None


def speech_script(text: str, rate: int) -> str:
    """Python source that speaks one phrase through pyttsx3 and exits."""
    return (
        "import pyttsx3\n"
        "engine = pyttsx3.init()\n"
        f"engine.setProperty('rate', {int(rate)})\n"
        f"engine.say({text!r})\n"
        "engine.runAndWait()"
    )


# ---------------------------------------------------------------------------
# Speaker
# ---------------------------------------------------------------------------

class VoiceGuidance:
    """
    Engine listener that speaks navigation events.

    Usage:
        voice = VoiceGuidance(config)
        engine.subscribe(voice.on_event)
        ...
        voice.shutdown()
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()
        self._enabled = self.config.voice_enabled
        self._queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        if not enabled:
            self._drain()
        logger.info(f"Voice guidance {'enabled' if enabled else 'disabled'}")

    def on_event(self, event: NavEvent) -> None:
        text = phrase_for_event(event)
        if not text:
            return
        # Arrival and off-route warnings are spoken even when guidance is muted.
        urgent = event.kind in (NavEventKind.NAVIGATION_COMPLETED, NavEventKind.OFF_ROUTE)
        self.speak(text, urgent=urgent)

    def speak(self, text: str, urgent: bool = False) -> None:
        text = (text or "").strip()
        if not text or not (self._enabled or urgent):
            return
        # Newest instruction wins; anything still waiting is out of date.
        self._drain()
        self._ensure_worker()
        self._queue.put(text)

    def shutdown(self, timeout: float = 5.0) -> None:
        """Let queued speech finish, then stop the worker thread."""
        if self._thread is None:
            return
        self._queue.join()
        self._queue.put(None)
        self._thread.join(timeout=timeout)
        self._thread = None

    # ------------------------------------------------------------------

    def _drain(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                return
            self._queue.task_done()

    def _ensure_worker(self) -> None:
        if self._thread is None or not self._thread.is_alive():
            self._thread = threading.Thread(target=self._worker, daemon=True)
            self._thread.start()

    def _say(self, text: str) -> None:
        # One interpreter per utterance: pyttsx3's runAndWait() is not
        # re-entrant when driven from a worker thread.
        logger.debug(f"Speaking: {text}")
        result = subprocess.run([sys.executable, "-c", speech_script(text, self.config.speech_rate)])
        if result.returncode != 0:
            logger.error(f"TTS process exited with code {result.returncode}")

    def _worker(self) -> None:
        while True:
            text = self._queue.get()
            try:
                if text is None:
                    return
                self._say(text)
            except Exception as e:
                logger.error(f"TTS error: {e}")
            finally:
                self._queue.task_done()
