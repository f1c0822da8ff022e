"""
Supported target languages and vocabulary entry access
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

VocabularyEntry = Mapping[str, str]


class KeyOf(Protocol):
    """Extracts the identifying target-language word from an entry"""

    def __call__(self, entry: VocabularyEntry) -> str: ...


def field_key(field_name: str) -> KeyOf:
    """Build a KeyOf that reads a named field of the entry"""

    def key_of(entry: VocabularyEntry) -> str:
        return entry[field_name]

    key_of.__name__ = f"key_of_{field_name}"
    return key_of


@dataclass(frozen=True)
class Language:
    """Target language configuration"""

    code: str
    name: str
    flag: str
    word_key: str

    @property
    def key_of(self) -> KeyOf:
        return field_key(self.word_key)


AVAILABLE_LANGUAGES: list[Language] = [
    Language(code="italian", name="Italian", flag="🇮🇹", word_key="italian"),
    Language(code="german", name="German", flag="🇩🇪", word_key="german"),
]


def get_language_config(language_code: str) -> Language:
    """Get language by code, falling back to the first available language"""
    for language in AVAILABLE_LANGUAGES:
        if language.code == language_code:
            return language

    logger.warning(
        f"Unknown language code '{language_code}', "
        f"using '{AVAILABLE_LANGUAGES[0].code}'"
    )
    return AVAILABLE_LANGUAGES[0]


def normalize_answer(text: str | None) -> str:
    """Normalize free-text answer for comparison"""
    if not text:
        return ""
    return text.strip().lower()


def check_answer(user_answer: str | None, entry: VocabularyEntry, key_of: KeyOf) -> bool:
    """Check a free-text answer against the entry's target word"""
    return normalize_answer(user_answer) == key_of(entry).lower()
