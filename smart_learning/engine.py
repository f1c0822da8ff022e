"""
Adaptive word selection engine

Keeps per-word mastery for a growing pool of the most frequent words,
widens the pool once most of it is practiced, and picks the next word
to test with a weakest-first policy plus occasional review of mastered words.
"""

import logging
import random
import time
from collections.abc import Callable, Sequence
from typing import Protocol

from .config import Settings, get_settings
from .core.models import MasteryLevel, ProgressStats, SmartLearningState, WordProgress
from .languages import KeyOf, VocabularyEntry, get_language_config
from .utils import calculate_accuracy

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Subset of the random module used by selection"""

    def random(self) -> float: ...

    def randrange(self, stop: int) -> int: ...


def current_time_ms() -> int:
    """Current time as integer epoch milliseconds"""
    return int(time.time() * 1000)


class SmartLearningEngine:
    """Stateless operations over a learner's SmartLearningState"""

    def __init__(
        self,
        key_of: KeyOf | None = None,
        rng: RandomSource | None = None,
        clock: Callable[[], int] | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self.key_of = key_of or get_language_config(settings.default_language).key_of
        self.rng = rng or random
        self.clock = clock or current_time_ms

        self.initial_pool_size = settings.initial_pool_size
        self.new_words_per_expansion = settings.new_words_per_expansion
        self.expansion_threshold = settings.expansion_threshold
        self.mastery_threshold = settings.mastery_threshold
        self.min_attempts_for_mastery = settings.min_attempts_for_mastery
        self.practiced_threshold = settings.practiced_threshold
        self.min_attempts_for_practiced = settings.min_attempts_for_practiced
        self.review_probability = settings.review_probability

    def initialize_progress(
        self, vocabulary: Sequence[VocabularyEntry], pool_size: int | None = None
    ) -> SmartLearningState:
        """
        Create a fresh state admitting the first words of the vocabulary

        Args:
            vocabulary: Entries ordered by frequency (most common first)
            pool_size: Number of words to start with (defaults to settings)

        Returns:
            New SmartLearningState
        """
        if pool_size is None:
            pool_size = self.initial_pool_size
        if pool_size < 1:
            logger.warning(f"Pool size {pool_size} is below 1, using 1")
            pool_size = 1

        now = self.clock()
        admitted = min(pool_size, len(vocabulary))

        state = SmartLearningState(
            current_word_index=admitted,
            session_started=now,
            total_words_introduced=admitted,
        )
        for entry in vocabulary[:admitted]:
            word = self.key_of(entry)
            state.word_progress[word] = WordProgress.new(word, now)

        logger.info(
            f"Initialized learning pool with {admitted} of {len(vocabulary)} words"
        )
        return state

    def update_word_progress(
        self, state: SmartLearningState, word: str, is_correct: bool
    ) -> SmartLearningState:
        """Record one answer for a word and re-evaluate its mastery"""
        now = self.clock()

        existing = state.word_progress.get(word)
        if existing is None:
            logger.warning(f"No progress for '{word}', creating initial record")
            progress = WordProgress.new(word, now)
        else:
            progress = existing.copy()

        progress.attempts += 1
        if is_correct:
            progress.correct += 1
        progress.accuracy = calculate_accuracy(progress.correct, progress.attempts)
        progress.last_seen = now

        new_level = self._evaluate_mastery(progress)
        if new_level is not None and new_level != progress.mastery_level:
            logger.info(
                f"'{word}' moved from {progress.mastery_level.value} "
                f"to {new_level.value}"
            )
            progress.mastery_level = new_level

        logger.debug(
            f"Answer for '{word}': correct={is_correct}, "
            f"attempts={progress.attempts}, accuracy={progress.accuracy:.2f}"
        )

        return SmartLearningState(
            current_word_index=state.current_word_index,
            word_progress={**state.word_progress, word: progress},
            session_started=state.session_started,
            total_words_introduced=state.total_words_introduced,
        )

    def _evaluate_mastery(self, progress: WordProgress) -> MasteryLevel | None:
        """Level matched by the current counters, None if no rule matches"""
        if (
            progress.attempts >= self.min_attempts_for_mastery
            and progress.accuracy >= self.mastery_threshold
        ):
            return MasteryLevel.MASTERED
        if (
            progress.attempts >= self.min_attempts_for_practiced
            and progress.accuracy >= self.practiced_threshold
        ):
            return MasteryLevel.PRACTICED
        return None

    def should_expand_vocabulary(
        self, state: SmartLearningState, vocabulary: Sequence[VocabularyEntry]
    ) -> bool:
        """Check whether enough of the pool is practiced to admit new words"""
        if state.current_word_index >= len(vocabulary):
            return False

        progresses = list(state.word_progress.values())
        if not progresses:
            return False

        practiced_or_mastered = sum(
            1
            for p in progresses
            if p.mastery_level in (MasteryLevel.PRACTICED, MasteryLevel.MASTERED)
        )
        return practiced_or_mastered / len(progresses) >= self.expansion_threshold

    def expand_vocabulary(
        self,
        state: SmartLearningState,
        vocabulary: Sequence[VocabularyEntry],
        pool_size: int,
    ) -> SmartLearningState:
        """Admit up to new_words_per_expansion words, bounded by pool_size"""
        new_word_count = min(
            self.new_words_per_expansion,
            len(vocabulary) - state.current_word_index,
            pool_size - len(state.word_progress),
        )
        new_word_count = max(0, new_word_count)

        new_state = state.copy()
        if new_word_count == 0:
            logger.debug("Vocabulary expansion skipped, no room for new words")
            return new_state

        now = self.clock()
        start = state.current_word_index
        for entry in vocabulary[start : start + new_word_count]:
            word = self.key_of(entry)
            new_state.word_progress[word] = WordProgress.new(word, now)

        new_state.current_word_index += new_word_count
        new_state.total_words_introduced += new_word_count

        logger.info(
            f"Expanded learning pool by {new_word_count} words "
            f"to {new_state.current_word_index}"
        )
        return new_state

    def select_next_word(
        self, state: SmartLearningState, vocabulary: Sequence[VocabularyEntry]
    ) -> VocabularyEntry | None:
        """
        Pick the next word to test from the active pool

        Mastered words are reviewed with review_probability (least recently
        seen first). Otherwise the weakest learning word is chosen, then the
        weakest practiced word, then a random mastered word.

        Returns:
            Vocabulary entry or None if the pool is empty
        """
        available_words = vocabulary[: state.current_word_index]
        if not available_words:
            return None

        now = self.clock()
        word_progresses = []
        for entry in available_words:
            word = self.key_of(entry)
            word_progresses.append(
                state.word_progress.get(word) or WordProgress.new(word, now)
            )

        learning_words = [
            p for p in word_progresses if p.mastery_level == MasteryLevel.LEARNING
        ]
        practiced_words = [
            p for p in word_progresses if p.mastery_level == MasteryLevel.PRACTICED
        ]
        mastered_words = [
            p for p in word_progresses if p.mastery_level == MasteryLevel.MASTERED
        ]

        should_review = (
            bool(mastered_words) and self.rng.random() < self.review_probability
        )

        if should_review:
            # min() keeps the first of equal items, so ties follow vocabulary order
            selected = min(mastered_words, key=lambda p: p.last_seen)
            logger.debug(f"Reviewing mastered word '{selected.word}'")
        else:
            practice_pool = learning_words or practiced_words
            if practice_pool:
                selected = min(practice_pool, key=lambda p: p.accuracy)
                logger.debug(
                    f"Practicing '{selected.word}' (accuracy={selected.accuracy:.2f})"
                )
            else:
                selected = mastered_words[self.rng.randrange(len(mastered_words))]
                logger.debug(f"All words mastered, picked '{selected.word}'")

        for entry in available_words:
            if self.key_of(entry) == selected.word:
                return entry
        return None

    def get_progress_stats(self, state: SmartLearningState) -> ProgressStats:
        """Aggregate counts per mastery level and mean per-word accuracy"""
        progresses = list(state.word_progress.values())
        learning = sum(1 for p in progresses if p.mastery_level == MasteryLevel.LEARNING)
        practiced = sum(
            1 for p in progresses if p.mastery_level == MasteryLevel.PRACTICED
        )
        mastered = sum(1 for p in progresses if p.mastery_level == MasteryLevel.MASTERED)

        overall_accuracy = (
            sum(p.accuracy for p in progresses) / len(progresses) if progresses else 0.0
        )

        return ProgressStats(
            total=len(progresses),
            learning=learning,
            practiced=practiced,
            mastered=mastered,
            overall_accuracy=overall_accuracy,
        )

    def record_answer(
        self,
        state: SmartLearningState,
        vocabulary: Sequence[VocabularyEntry],
        word: str,
        is_correct: bool,
        pool_size: int,
    ) -> SmartLearningState:
        """Update progress for an answer and widen the pool when it is ready"""
        new_state = self.update_word_progress(state, word, is_correct)
        if self.should_expand_vocabulary(new_state, vocabulary):
            new_state = self.expand_vocabulary(new_state, vocabulary, pool_size)
        return new_state
