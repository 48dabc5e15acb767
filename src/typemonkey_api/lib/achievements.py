from dataclasses import dataclass
from typing import Callable


@dataclass(slots=True, frozen=True)
class AchievementRule:
    name: str
    description: str
    icon: str
    # (total_tests, wpm, accuracy) -> unlocked
    check: Callable[[int, float, float], bool]


RULES: list[AchievementRule] = [
    AchievementRule(
        name="First Steps",
        description="Completed your first typing test",
        icon="🎯",
        check=lambda total_tests, wpm, accuracy: total_tests == 1,
    ),
    AchievementRule(
        name="Century Club",
        description="Achieved 100+ WPM",
        icon="💯",
        check=lambda total_tests, wpm, accuracy: wpm >= 100,
    ),
    AchievementRule(
        name="Speed Demon",
        description="Achieved 80+ WPM",
        icon="⚡",
        check=lambda total_tests, wpm, accuracy: wpm >= 80,
    ),
    AchievementRule(
        name="Perfectionist",
        description="Achieved 99%+ accuracy",
        icon="🎯",
        check=lambda total_tests, wpm, accuracy: accuracy >= 99,
    ),
    AchievementRule(
        name="Dedicated Typist",
        description="Completed 100 typing tests",
        icon="🏆",
        check=lambda total_tests, wpm, accuracy: total_tests >= 100,
    ),
]


def evaluate(
    total_tests: int,
    wpm: float,
    accuracy: float,
    owned: set[str],
) -> list[AchievementRule]:
    """
    Returns rules newly unlocked by a submission.

    Arguments:
        - total_tests: user's test count after the submission is counted
        - owned: names of achievements the user already has
    """
    return [
        rule
        for rule in RULES
        if rule.name not in owned and rule.check(total_tests, wpm, accuracy)
    ]
