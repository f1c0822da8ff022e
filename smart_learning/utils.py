"""
Utility functions for the smart learning engine
"""

import json
import logging
from typing import Any

from .core.models import ProgressStats

logger = logging.getLogger(__name__)


def extract_json_safely(json_str: str) -> dict[str, Any]:
    """Safely extract JSON object from string"""
    if not json_str:
        return {}

    try:
        data = json.loads(json_str)
    except (ValueError, TypeError, RecursionError):
        logger.warning(f"Failed to parse JSON: {json_str!r}")
        return {}

    if not isinstance(data, dict):
        logger.warning(f"Expected JSON object, got {type(data).__name__}")
        return {}
    return data


def format_json_safely(data: Any) -> str:
    """Safely format data as JSON string"""
    try:
        return json.dumps(data, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        logger.warning(f"Failed to serialize to JSON: {data}")
        return "{}"


def calculate_accuracy(correct: int, attempts: int) -> float:
    """Calculate accuracy as a ratio in [0, 1]"""
    if attempts <= 0:
        return 0.0
    return correct / attempts


def format_progress_stats(stats: ProgressStats) -> str:
    """Format progress statistics for display"""
    result = "📊 Your progress:\n\n"
    result += f"📚 Words in pool: {stats['total']}\n"
    result += f"🌱 Learning: {stats['learning']}\n"
    result += f"🔄 Practiced: {stats['practiced']}\n"
    result += f"⭐ Mastered: {stats['mastered']}\n"
    result += f"✅ Average accuracy: {stats['overall_accuracy']:.1%}\n"

    return result
