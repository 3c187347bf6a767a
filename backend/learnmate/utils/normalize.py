"""
Normalization utilities for model responses.

Models sometimes return lists where a string is expected, or objects
instead of strings in list fields. This module coerces them into the
shapes the learning-path models require.

Also includes JSON repair for malformed model output.
"""

import logging
from typing import Any, Dict, List, Optional

from json_repair import repair_json

logger = logging.getLogger(__name__)

# Priority order for extracting text from objects
TEXT_KEYS = (
    "topic",
    "title",
    "name",
    "text",
    "content",
    "value",
)


def repair_llm_json(
    raw_content: str,
    source: str = "model",
) -> Optional[Dict[str, Any]]:
    """
    Repair and parse potentially malformed JSON from model output.

    Uses json-repair library to fix common issues like:
    - Trailing commas
    - Unterminated strings at the end of a truncated reply
    - Missing quotes
    - Unescaped control characters

    Args:
        raw_content: Raw JSON string (may be malformed)
        source: Label for logging purposes

    Returns:
        Parsed dict if successful, None if repair failed

    Examples:
        >>> repair_llm_json('{"steps": [],}')  # trailing comma
        {"steps": []}
    """
    if not raw_content or not raw_content.strip():
        return None

    try:
        repaired = repair_json(raw_content, return_objects=True)

        if isinstance(repaired, dict):
            return repaired

        # Model might output the steps array without the wrapping object
        if isinstance(repaired, list):
            if len(repaired) == 1 and isinstance(repaired[0], dict):
                logger.info(f"[{source}] JSON repair: extracted dict from single-element array")
                return repaired[0]

            dicts_in_list = [item for item in repaired if isinstance(item, dict)]
            if dicts_in_list and all("title" in d for d in dicts_in_list):
                logger.info(f"[{source}] JSON repair: wrapped array of {len(dicts_in_list)} objects as steps")
                return {"steps": dicts_in_list}

        logger.warning(f"[{source}] JSON repair returned non-dict: {type(repaired)}")
        return None

    except Exception as e:
        logger.warning(f"[{source}] JSON repair failed: {e}")
        return None


def normalize_string_list(
    items: Any,
    field_name: str = "items",
    source: str = "model",
) -> List[str]:
    """
    Normalize a list that should contain strings but may contain objects.

    Args:
        items: The list to normalize (may be list of strings, objects, or mixed)
        field_name: Name of the field for logging purposes
        source: Label for logging purposes

    Returns:
        List[str]: Normalized list of non-empty strings, order preserved

    Examples:
        >>> normalize_string_list(["Recursion", "Closures"])
        ["Recursion", "Closures"]

        >>> normalize_string_list([{"topic": "Recursion"}, "Closures"])
        ["Recursion", "Closures"]
    """
    if not items:
        return []

    if not isinstance(items, list):
        logger.warning(
            f"[{source}] {field_name}: expected list, got {type(items).__name__}"
        )
        return []

    result: List[str] = []
    normalized_count = 0

    for item in items:
        if isinstance(item, str):
            if item.strip():
                result.append(item.strip())
        elif isinstance(item, dict):
            normalized_count += 1
            text = _extract_text_from_object(item)
            if text:
                result.append(text)
        elif item is not None:
            # Other types (int, float, bool) - convert to string
            result.append(str(item))

    if normalized_count > 0:
        logger.info(
            f"[{source}] {field_name}: normalized {normalized_count}/{len(items)} "
            f"object items to strings"
        )

    return result


def normalize_to_string(value: Any, joiner: str = "\n") -> str:
    """
    Normalize a value that should be a string but may be a list.

    Args:
        value: The value to normalize (string, list, or other)
        joiner: Separator used when joining list items

    Returns:
        str: Normalized string

    Examples:
        >>> normalize_to_string("hello")
        "hello"

        >>> normalize_to_string(["para 1", "para 2"])
        "para 1\\npara 2"
    """
    if value is None:
        return ""

    if isinstance(value, str):
        return value

    if isinstance(value, list):
        str_items = [str(item) for item in value if item]
        return joiner.join(str_items)

    return str(value)


def _extract_text_from_object(obj: dict) -> str:
    """
    Extract text value from an object using known key patterns.

    Falls back to first string value if no known keys found.
    """
    for key in TEXT_KEYS:
        if key in obj:
            value = obj[key]
            if isinstance(value, str) and value.strip():
                return value.strip()

    for value in obj.values():
        if isinstance(value, str) and value.strip():
            return value.strip()

    return ""
