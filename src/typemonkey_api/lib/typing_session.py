from dataclasses import asdict, dataclass, field
from logging import getLogger
from time import time
from typing import Any, Callable

from ..types.enums import Difficulty, TextType
from ..types.log import TRACE
from .typing_metrics import (
    calc_accuracy,
    calc_wpm,
    count_correct,
    round_half_up,
)

logger = getLogger(__name__)

BACKSPACE = "Backspace"


def now_ms() -> float:
    return time() * 1000


@dataclass(slots=True)
class Keystroke:
    """
    - timestamp: epoch milliseconds
    - time_from_start: milliseconds since the first key
    """

    character: str
    timestamp: float
    correct: bool
    time_from_start: float


@dataclass(slots=True)
class WPMSample:
    timestamp: float
    wpm: float


@dataclass(slots=True)
class AccuracySample:
    timestamp: float
    accuracy: float


@dataclass(slots=True)
class LiveStats:
    """
    - time_elapsed: seconds
    """

    wpm: int = 0
    accuracy: int = 0
    time_elapsed: int = 0
    total_characters: int = 0
    correct_characters: int = 0
    incorrect_characters: int = 0


@dataclass(slots=True)
class SessionResult:
    text: str
    stats: LiveStats
    missed_characters: int
    keystrokes: list[Keystroke] = field(default_factory=list)
    wpm_history: list[WPMSample] = field(default_factory=list)
    accuracy_history: list[AccuracySample] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None


class TypingSession:
    """
    Keystroke to metric pipeline for one passage.

    Every accepted key event recomputes the live stats by diffing the typed
    input against the passage index by index. A wpm / accuracy sample is
    taken every `sample_every` accepted events for the session graph.

    - duration: seconds, None for an untimed session that ends when the whole
      passage is typed
    """

    def __init__(
        self,
        text: str,
        sample_every: int = 5,
        duration: int | None = None,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        if not text:
            raise ValueError("text must not be empty")
        if sample_every <= 0:
            raise ValueError(f"sample_every must be positive, got: {sample_every}")

        self._text = text
        self._sample_every = sample_every
        self._duration = duration
        self._clock = clock

        self._typed: list[str] = []
        self._start_time: float | None = None
        self._end_time: float | None = None
        self._event_count = 0

        self._stats = LiveStats()
        self._keystrokes: list[Keystroke] = []
        self._wpm_history: list[WPMSample] = []
        self._accuracy_history: list[AccuracySample] = []

    @property
    def text(self) -> str:
        return self._text

    @property
    def typed(self) -> str:
        return "".join(self._typed)

    @property
    def started(self) -> bool:
        return self._start_time is not None

    @property
    def completed(self) -> bool:
        return self._end_time is not None

    @property
    def stats(self) -> LiveStats:
        return self._stats

    @property
    def wpm_history(self) -> list[WPMSample]:
        return self._wpm_history

    @property
    def accuracy_history(self) -> list[AccuracySample]:
        return self._accuracy_history

    @property
    def keystrokes(self) -> list[Keystroke]:
        return self._keystrokes

    def press(self, key: str, now: float | None = None) -> LiveStats:
        """
        Process a single key event, 'key' is either one character or a key
        name such as 'Backspace'. Returns the live stats after the event.
        """
        if self.completed:
            return self._stats

        now = self._clock() if now is None else now

        if key == BACKSPACE:
            if not self._typed:
                return self._stats
            self._typed.pop()

        elif len(key) == 1:
            if self._start_time is None:
                self._start_time = now
                logger.debug("session started")

            if len(self._typed) >= len(self._text):
                return self._stats

            index = len(self._typed)
            self._typed.append(key)
            self._keystrokes.append(
                Keystroke(
                    character=key,
                    timestamp=now,
                    correct=self._text[index] == key,
                    time_from_start=now - self._start_time,
                )
            )

        else:
            logger.log(TRACE, "ignore key: %s", key)
            return self._stats

        self._event_count += 1
        self._stats = self._calculate(now)

        if len(self._typed) == len(self._text):
            self._complete(now)
        elif self._event_count % self._sample_every == 0:
            self._sample(now)

        return self._stats

    def is_expired(self, now: float | None = None) -> bool:
        if self._duration is None or self._start_time is None:
            return False
        now = self._clock() if now is None else now
        return now - self._start_time >= self._duration * 1000

    def finish(self, now: float | None = None) -> LiveStats:
        """
        end the session before the whole passage is typed (timed sessions)
        """
        if self.completed:
            return self._stats

        now = self._clock() if now is None else now
        if self._start_time is None:
            self._start_time = now

        self._stats = self._calculate(now)
        self._complete(now)
        return self._stats

    def result(self) -> SessionResult:
        return SessionResult(
            text=self._text,
            stats=self._stats,
            missed_characters=len(self._text) - len(self._typed),
            keystrokes=list(self._keystrokes),
            wpm_history=list(self._wpm_history),
            accuracy_history=list(self._accuracy_history),
            start_time=self._start_time,
            end_time=self._end_time,
        )

    def to_submission(
        self,
        text_type: TextType = TextType.RANDOM,
        difficulty: Difficulty = Difficulty.MEDIUM,
        language: str = "english",
        text_source: str | None = None,
        is_public: bool = True,
    ) -> dict[str, Any]:
        """
        body for 'POST /api/v1/tests/submit', without the submission id
        """
        result = self.result()
        duration = self._duration
        if duration is None:
            duration = result.stats.time_elapsed

        metadata: dict[str, Any] = {}
        if result.start_time is not None:
            metadata["start_time"] = result.start_time
        if result.end_time is not None:
            metadata["end_time"] = result.end_time

        return {
            "test_config": {
                "text_type": text_type,
                "difficulty": difficulty,
                "duration": duration,
                "language": language,
                "word_count": len(self._text.split()),
            },
            "test_content": {
                "original_text": self._text,
                "text_source": text_source,
            },
            "results": {
                "wpm": result.stats.wpm,
                "accuracy": result.stats.accuracy,
                "time_elapsed": result.stats.time_elapsed,
                "total_characters": result.stats.total_characters,
                "correct_characters": result.stats.correct_characters,
                "incorrect_characters": result.stats.incorrect_characters,
                "missed_characters": result.missed_characters,
                "extra_characters": 0,
            },
            "keystroke_data": [asdict(item) for item in result.keystrokes],
            "wpm_history": [asdict(item) for item in result.wpm_history],
            "accuracy_history": [asdict(item) for item in result.accuracy_history],
            "metadata": metadata,
            "is_public": is_public,
        }

    def _elapsed(self, now: float) -> float:
        if self._start_time is None:
            return 0
        return now - self._start_time

    def _calculate(self, now: float) -> LiveStats:
        typed = self.typed
        total = len(typed)
        correct = count_correct(self._text, typed)
        elapsed = self._elapsed(now)

        return LiveStats(
            wpm=calc_wpm(correct, elapsed),
            accuracy=calc_accuracy(correct, total),
            time_elapsed=int(round_half_up(elapsed / 1000)),
            total_characters=total,
            correct_characters=correct,
            incorrect_characters=total - correct,
        )

    def _sample(self, now: float):
        elapsed = self._elapsed(now)
        self._wpm_history.append(WPMSample(timestamp=elapsed, wpm=self._stats.wpm))
        self._accuracy_history.append(
            AccuracySample(timestamp=elapsed, accuracy=self._stats.accuracy)
        )

    def _complete(self, now: float):
        self._end_time = now

        # the final accuracy is measured against the whole passage
        self._stats.accuracy = calc_accuracy(
            self._stats.correct_characters, len(self._text)
        )
        self._sample(now)
        logger.debug(
            "session completed, wpm: %s, accuracy: %s",
            self._stats.wpm,
            self._stats.accuracy,
        )
