"""
Snapshot codec for persisting engine state
"""

import logging
import math
from typing import Any

from ..utils import calculate_accuracy, extract_json_safely, format_json_safely
from .models import MasteryLevel, SmartLearningState, WordProgress

logger = logging.getLogger(__name__)


def storage_key(learner_scope: str, language_code: str) -> str:
    """Conventional key for a learner's state in a key-value store"""
    return f"{learner_scope}:smart_learning:{language_code}"


def _get_count(data: dict[str, Any], name: str) -> int:
    """Read a non-negative integer field, rejecting floats and booleans"""
    value = data[name]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def progress_to_dict(progress: WordProgress) -> dict[str, Any]:
    return {
        "word": progress.word,
        "attempts": progress.attempts,
        "correct": progress.correct,
        "accuracy": progress.accuracy,
        "lastSeen": progress.last_seen,
        "masteryLevel": progress.mastery_level.value,
        "introducedAt": progress.introduced_at,
    }


def progress_from_dict(data: dict[str, Any]) -> WordProgress:
    """
    Rebuild a word record, checking its counters are consistent

    Raises:
        ValueError: if a field is missing, mistyped or out of range
    """
    if not isinstance(data, dict):
        raise ValueError(f"Word progress must be an object, got {data!r}")

    try:
        word = data["word"]
        if not isinstance(word, str):
            raise ValueError(f"word must be a string, got {word!r}")

        attempts = _get_count(data, "attempts")
        correct = _get_count(data, "correct")
        if correct > attempts:
            raise ValueError(
                f"'{word}' has more correct answers ({correct}) "
                f"than attempts ({attempts})"
            )

        accuracy = data["accuracy"]
        if (
            isinstance(accuracy, bool)
            or not isinstance(accuracy, (int, float))
            or not math.isfinite(accuracy)
        ):
            raise ValueError(f"accuracy must be a number, got {accuracy!r}")
        expected_accuracy = calculate_accuracy(correct, attempts)
        if not math.isclose(accuracy, expected_accuracy, abs_tol=1e-9):
            raise ValueError(
                f"'{word}' accuracy {accuracy} does not match "
                f"{correct}/{attempts}"
            )

        mastery_level = MasteryLevel(data["masteryLevel"])
        if mastery_level != MasteryLevel.LEARNING and attempts < 3:
            raise ValueError(
                f"'{word}' is {mastery_level.value} after only {attempts} attempts"
            )

        return WordProgress(
            word=word,
            attempts=attempts,
            correct=correct,
            accuracy=float(accuracy),
            last_seen=_get_count(data, "lastSeen"),
            mastery_level=mastery_level,
            introduced_at=_get_count(data, "introducedAt"),
        )
    except KeyError as e:
        raise ValueError(f"Word progress is missing field {e}") from None


def state_to_dict(state: SmartLearningState) -> dict[str, Any]:
    """Convert state to a JSON-compatible snapshot"""
    return {
        "currentWordIndex": state.current_word_index,
        "wordProgress": {
            key: progress_to_dict(progress)
            for key, progress in state.word_progress.items()
        },
        "sessionStarted": state.session_started,
        "totalWordsIntroduced": state.total_words_introduced,
    }


def state_from_dict(data: dict[str, Any]) -> SmartLearningState:
    """
    Rebuild state from a snapshot

    Raises:
        ValueError: if the snapshot is structurally invalid
    """
    try:
        raw_progress = data["wordProgress"]
        if not isinstance(raw_progress, dict):
            raise ValueError("wordProgress must be an object")

        word_progress = {}
        for key, value in raw_progress.items():
            progress = progress_from_dict(value)
            if progress.word != key:
                raise ValueError(f"Progress for '{progress.word}' is stored under '{key}'")
            word_progress[key] = progress

        return SmartLearningState(
            current_word_index=_get_count(data, "currentWordIndex"),
            word_progress=word_progress,
            session_started=_get_count(data, "sessionStarted"),
            total_words_introduced=_get_count(data, "totalWordsIntroduced"),
        )
    except KeyError as e:
        raise ValueError(f"State snapshot is missing field {e}") from None
    except TypeError as e:
        raise ValueError(f"Invalid state snapshot: {e}") from None


def dump_state(state: SmartLearningState) -> str:
    """Serialize state to JSON text"""
    return format_json_safely(state_to_dict(state))


def load_state(text: str | None) -> SmartLearningState | None:
    """Deserialize state from JSON text, None if it can't be used"""
    data = extract_json_safely(text or "")
    if not data:
        return None

    try:
        return state_from_dict(data)
    except ValueError as e:
        logger.warning(f"Discarding unreadable learning state: {e}")
        return None
