"""
Typing metrics

Formulas shared by the live typing session and the server:
- wpm: (correct characters / 5) / elapsed minutes
- accuracy: correct / total * 100
- consistency: max(0, 100 - stddev(wpm samples) / mean * 100)

Whole-number results are rounded half up, the way the browser client rounds.
"""

from dataclasses import dataclass, field
from math import floor, sqrt
from typing import Iterable, Sequence

from ..types.enums import PerformanceRating

CHARS_PER_WORD = 5
MS_PER_MINUTE = 60_000


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return floor(value * factor + 0.5) / factor


def count_correct(target: str, typed: str) -> int:
    """
    characters typed past the end of target never count
    """
    return sum(1 for expected, actual in zip(target, typed) if expected == actual)


def calc_wpm(correct: int, elapsed_ms: float) -> int:
    if elapsed_ms <= 0:
        return 0
    minutes = elapsed_ms / MS_PER_MINUTE
    return int(round_half_up((correct / CHARS_PER_WORD) / minutes))


def calc_accuracy(correct: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(round_half_up(correct / total * 100))


def consistency_score(samples: Sequence[float]) -> float:
    """
    Lower deviation between the wpm samples means a higher score.
    Returns 0 when there are fewer than two samples.
    """
    if len(samples) < 2:
        return 0

    mean = sum(samples) / len(samples)
    if mean <= 0:
        return 0

    variance = sum((sample - mean) ** 2 for sample in samples) / len(samples)
    return max(0, 100 - (sqrt(variance) / mean) * 100)


def performance_rating(wpm: float, accuracy: float) -> PerformanceRating:
    if wpm >= 80 and accuracy >= 95:
        return PerformanceRating.EXCELLENT
    if wpm >= 60 and accuracy >= 90:
        return PerformanceRating.GOOD
    if wpm >= 40 and accuracy >= 80:
        return PerformanceRating.AVERAGE
    return PerformanceRating.NEEDS_IMPROVEMENT


def error_rate(incorrect: int, total: int) -> float:
    if total <= 0:
        return 0
    return round_half_up(incorrect / total * 100, 2)


def average_keystroke_time(time_from_start: Iterable[float]) -> float:
    values = list(time_from_start)
    if not values:
        return 0
    return sum(values) / len(values)


@dataclass(slots=True)
class TextStats:
    word_count: int
    character_count: int
    average_word_length: float


def text_stats(content: str) -> TextStats:
    words = content.split()
    if not words:
        return TextStats(word_count=0, character_count=len(content), average_word_length=0)

    return TextStats(
        word_count=len(words),
        character_count=len(content),
        average_word_length=sum(len(word) for word in words) / len(words),
    )


@dataclass(slots=True)
class BasicStats:
    wpm: float
    accuracy: float
    time_elapsed: float


@dataclass(slots=True)
class CharacterStats:
    total: int
    correct: int
    incorrect: int
    missed: int = 0
    extra: int = 0


@dataclass(slots=True)
class AdvancedStats:
    consistency_score: float
    performance_rating: PerformanceRating
    avg_keystroke_time: float
    error_rate: float


@dataclass(slots=True)
class DetailedStats:
    basic: BasicStats
    characters: CharacterStats
    advanced: AdvancedStats


def detailed_stats(
    wpm: float,
    accuracy: float,
    time_elapsed: float,
    total: int,
    correct: int,
    incorrect: int,
    missed: int = 0,
    extra: int = 0,
    wpm_samples: Sequence[float] = (),
    keystroke_times: Iterable[float] = (),
) -> DetailedStats:
    return DetailedStats(
        basic=BasicStats(wpm=wpm, accuracy=accuracy, time_elapsed=time_elapsed),
        characters=CharacterStats(
            total=total,
            correct=correct,
            incorrect=incorrect,
            missed=missed,
            extra=extra,
        ),
        advanced=AdvancedStats(
            consistency_score=consistency_score(wpm_samples),
            performance_rating=performance_rating(wpm, accuracy),
            avg_keystroke_time=average_keystroke_time(keystroke_times),
            error_rate=error_rate(incorrect, total),
        ),
    )


@dataclass(slots=True)
class GraphSummary:
    """
    - wpm_points / accuracy_points: last 'window' samples, oldest first
    """

    avg_wpm: int = 0
    peak_wpm: float = 0
    avg_accuracy: int = 0
    wpm_points: list[float] = field(default_factory=list)
    accuracy_points: list[float] = field(default_factory=list)


def graph_summary(
    wpm_history: Sequence[float],
    accuracy_history: Sequence[float],
    window: int = 20,
) -> GraphSummary:
    summary = GraphSummary(
        wpm_points=list(wpm_history[-window:]) if window > 0 else [],
        accuracy_points=list(accuracy_history[-window:]) if window > 0 else [],
    )

    if wpm_history:
        summary.avg_wpm = int(round_half_up(sum(wpm_history) / len(wpm_history)))
        summary.peak_wpm = max(wpm_history)

    if accuracy_history:
        summary.avg_accuracy = int(
            round_half_up(sum(accuracy_history) / len(accuracy_history))
        )

    return summary
