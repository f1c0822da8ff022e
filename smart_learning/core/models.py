"""
Data models for the smart learning engine
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TypedDict


class MasteryLevel(str, Enum):
    """Per-word mastery levels"""
    LEARNING = "learning"
    PRACTICED = "practiced"
    MASTERED = "mastered"


@dataclass
class WordProgress:
    """Mastery record for a single word in the active pool"""

    word: str
    attempts: int = 0
    correct: int = 0
    accuracy: float = 0.0
    last_seen: int = 0  # epoch ms, 0 = never answered
    mastery_level: MasteryLevel = MasteryLevel.LEARNING
    introduced_at: int = 0

    @classmethod
    def new(cls, word: str, now: int) -> "WordProgress":
        """Fresh record for a word entering the pool"""
        return cls(word=word, introduced_at=now)

    def copy(self) -> "WordProgress":
        return replace(self)


@dataclass
class SmartLearningState:
    """Full engine snapshot for one learner and language"""

    current_word_index: int = 0
    word_progress: dict[str, WordProgress] = field(default_factory=dict)
    session_started: int = 0
    total_words_introduced: int = 0

    def copy(self) -> "SmartLearningState":
        """Copy with independent progress records"""
        return replace(
            self,
            word_progress={
                key: progress.copy() for key, progress in self.word_progress.items()
            },
        )


class ProgressStats(TypedDict):
    """Aggregate progress statistics"""
    total: int
    learning: int
    practiced: int
    mastered: int
    overall_accuracy: float
