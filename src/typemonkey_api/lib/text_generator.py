from dataclasses import dataclass
from logging import getLogger
from random import choice, sample

from ..types.enums import Difficulty, TextCategory
from ..types.setting import Setting
from .text_pools import (
    COMMON_WORDS,
    DEFAULT_TEXTS,
    LITERATURE_WORD_COUNT,
    LITERATURE_WORDS,
    PROGRAMMING,
    QUOTES,
)
from .typing_metrics import text_stats

logger = getLogger(__name__)


@dataclass(slots=True)
class GeneratedText:
    title: str
    content: str
    category: str
    difficulty: str
    word_count: int
    character_count: int
    author: str | None = None


@dataclass(slots=True)
class TextOptions:
    categories: list[str]
    difficulties: list[str]
    languages: list[str]


class TextGenerator:
    """
    Generates practice passages from the built-in pools
    """

    def __init__(self, setting: Setting) -> None:
        self._setting = setting
        self._words: list[str] = list(LITERATURE_WORDS)

    def load_words(self):
        if self._setting.text.word_file is None:
            return

        with open(self._setting.text.word_file, "r") as f:
            extra = [word for word in f.read().split("\n") if word.strip()]
        self._words.extend(extra)

        logger.info(
            "load words from: %s, word count: %s",
            self._setting.text.word_file,
            len(self._words),
        )

    def generate(
        self,
        category: str = TextCategory.LITERATURE,
        difficulty: str = Difficulty.MEDIUM,
    ) -> GeneratedText:
        """
        unknown categories are generated as literature, unknown difficulties
        fall back to easy
        """
        try:
            level = Difficulty(difficulty)
        except ValueError:
            level = Difficulty.EASY
        label = level.value.capitalize()
        author = None

        if category == TextCategory.QUOTES:
            content = choice(QUOTES[level])
            title = f"{label} Quote"
            author = "Various Authors"
        elif category == TextCategory.PROGRAMMING:
            content = choice(PROGRAMMING[level])
            title = f"{label} Code"
        elif category == TextCategory.COMMON_WORDS:
            content = choice(COMMON_WORDS[level])
            title = f"{label} Word Practice"
        else:
            category = TextCategory.LITERATURE
            content = self._literature(LITERATURE_WORD_COUNT[level])
            title = f"{label} Literature"

        stats = text_stats(content)
        return GeneratedText(
            title=title,
            content=content,
            category=category,
            difficulty=level,
            word_count=stats.word_count,
            character_count=stats.character_count,
            author=author,
        )

    def default_text(self) -> GeneratedText:
        content = choice(DEFAULT_TEXTS)
        stats = text_stats(content)
        return GeneratedText(
            title="Default Practice Text",
            content=content,
            category="default",
            difficulty=Difficulty.MEDIUM,
            word_count=stats.word_count,
            character_count=stats.character_count,
        )

    def options(self) -> TextOptions:
        return TextOptions(
            categories=[
                TextCategory.QUOTES,
                TextCategory.LITERATURE,
                TextCategory.PROGRAMMING,
                TextCategory.COMMON_WORDS,
            ],
            difficulties=[item.value for item in Difficulty],
            languages=["english"],
        )

    def _literature(self, word_count: int) -> str:
        words: list[str] = []
        while len(words) < word_count:
            words.extend(sample(self._words, min(len(self._words), word_count - len(words))))

        text = " ".join(words)
        return text[0].upper() + text[1:] + "."
