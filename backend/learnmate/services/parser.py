"""
Response parser for generated learning paths.

The model is asked for {"steps": [{"title", "content"}, ...], "relatedTopics": [...]}
but does not always comply. Strategies are tried in a fixed order and the
first one that yields at least one step wins:

1. Strict JSON   - decode the reply (or a JSON object embedded in it)
2. Salvage       - regex out "title"/"content" pairs from broken JSON
3. Text          - split free prose on "Step N:" / "### Step N" markers

The text strategy always succeeds, so parse_learning_response never raises
and never returns an empty step list.
"""

import logging
import re
from typing import Any, Callable, Iterator, List, Optional

import orjson

from learnmate.models.learning import LearningStep, ParsedResponse
from learnmate.utils.normalize import normalize_string_list, normalize_to_string, repair_llm_json

logger = logging.getLogger(__name__)

# Placeholder titles for replies with no usable structure
TEXT_FALLBACK_TITLE = "Learning Guide"
EMPTY_CHUNKS_FALLBACK_TITLE = "Getting Started"

# Upper bound on embedded objects tried before the outer-brace slice
MAX_OBJECT_CANDIDATES = 8

# A JSON string body: anything but an unescaped quote or a lone backslash
_STRING_BODY = r'((?:[^"\\]|\\.)*)'

STEP_PAIR_PATTERN = re.compile(
    r'"title"\s*:\s*"' + _STRING_BODY + r'"\s*,\s*"content"\s*:\s*"' + _STRING_BODY + r'"'
)
# Array span: bracket characters inside quoted topics do not end it
RELATED_TOPICS_PATTERN = re.compile(
    r'"relatedTopics"\s*:\s*\[((?:[^\]"]|"(?:[^"\\]|\\.)*")*)\]'
)
QUOTED_STRING_PATTERN = re.compile(r'"' + _STRING_BODY + r'"')
STEP_BOUNDARY_PATTERN = re.compile(
    r"^(?:Step \d+:|### Step \d+:?)", re.IGNORECASE | re.MULTILINE
)


# =============================================================================
# ORCHESTRATOR
# =============================================================================

def parse_learning_response(raw_text: str) -> ParsedResponse:
    """
    Convert a raw model reply into a learning path.

    Never raises. A strategy that errors is logged and treated as having
    found nothing, and the text strategy guarantees at least one step.
    """
    raw_text = _utf8_safe(raw_text)

    strategies: List[tuple[str, Callable[[str], Optional[ParsedResponse]]]] = [
        ("strict_json", try_strict_json),
        ("salvage", try_salvage),
    ]

    for name, strategy in strategies:
        try:
            result = strategy(raw_text)
        except Exception:
            logger.exception(f"Parse strategy '{name}' failed unexpectedly")
            result = None

        if result is not None and result.steps:
            logger.info(
                f"Parsed learning path via {name}: {len(result.steps)} steps, "
                f"{len(result.related_topics)} related topics"
            )
            return result

        logger.warning(f"Parse strategy '{name}' found no steps, falling through")

    try:
        result = parse_as_text(raw_text)
    except Exception:
        logger.exception("Text parsing failed unexpectedly")
        result = _single_step(TEXT_FALLBACK_TITLE, raw_text)

    logger.info(f"Parsed learning path via text: {len(result.steps)} steps")
    return result


# =============================================================================
# STRICT JSON
# =============================================================================

def try_strict_json(text: str) -> Optional[ParsedResponse]:
    """
    Decode the reply as a learning-path JSON document.

    Candidates, in order: the whole reply, each balanced {...} object in
    it, then everything between the first "{" and the last "}". Returns
    None if no candidate decodes to an object with a usable "steps" list.
    """
    for candidate in _json_candidates(text):
        try:
            data = orjson.loads(candidate)
        except orjson.JSONDecodeError as e:
            logger.debug(f"JSON candidate rejected: {e}")
            continue

        parsed = _coerce_document(data, source="strict_json")
        if parsed is not None:
            return parsed

    return None


def _json_candidates(text: str) -> Iterator[str]:
    seen = set()

    def fresh(candidate: str) -> bool:
        if candidate in seen:
            return False
        seen.add(candidate)
        return True

    stripped = text.strip()
    if stripped and fresh(stripped):
        yield stripped

    for count, candidate in enumerate(_balanced_objects(text)):
        if count >= MAX_OBJECT_CANDIDATES:
            break
        if fresh(candidate):
            yield candidate

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        candidate = text[start:end + 1]
        if fresh(candidate):
            yield candidate


def _balanced_objects(text: str) -> Iterator[str]:
    """
    Yield top-level {...} spans, tracking depth outside string literals.

    Stops at the first object that never closes (a truncated reply).
    """
    pos = text.find("{")
    while pos != -1:
        depth = 0
        in_string = False
        escaped = False
        end = -1

        for i in range(pos, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
            elif ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    end = i
                    break

        if end == -1:
            return

        yield text[pos:end + 1]
        pos = text.find("{", end + 1)


def _coerce_document(data: Any, source: str) -> Optional[ParsedResponse]:
    """Validate a decoded document and coerce it to a ParsedResponse."""
    if not isinstance(data, dict):
        return None

    raw_steps = data.get("steps")
    if not isinstance(raw_steps, list):
        return None

    steps: List[LearningStep] = []
    for item in raw_steps:
        if not isinstance(item, dict):
            continue
        step = _make_step(
            _utf8_safe(normalize_to_string(item.get("title"), joiner=" ")),
            _utf8_safe(normalize_to_string(item.get("content"))),
        )
        if step:
            steps.append(step)

    if len(steps) < len(raw_steps):
        logger.info(f"[{source}] dropped {len(raw_steps) - len(steps)} malformed steps")

    if not steps:
        return None

    related = [
        _utf8_safe(topic)
        for topic in normalize_string_list(data.get("relatedTopics"), "relatedTopics", source)
    ]
    return ParsedResponse(steps=steps, related_topics=related)


# =============================================================================
# SALVAGE
# =============================================================================

def try_salvage(text: str) -> Optional[ParsedResponse]:
    """
    Recover steps from JSON-shaped text that does not decode as a whole.

    Each "title"/"content" pair is matched and decoded on its own, so one
    bad pair only loses that step. When no pair matches at all, the reply
    is handed to json-repair as a last attempt.
    """
    steps: List[LearningStep] = []

    for match in STEP_PAIR_PATTERN.finditer(text):
        try:
            title = _decode_json_string(match.group(1))
            content = _decode_json_string(match.group(2))
        except ValueError as e:
            logger.debug(f"Skipping undecodable step at offset {match.start()}: {e}")
            continue

        step = _make_step(title, content)
        if step:
            steps.append(step)

    if steps:
        return ParsedResponse(steps=steps, related_topics=extract_related_topics(text))

    return _try_repair(text)


def extract_related_topics(text: str) -> List[str]:
    """Pull the "relatedTopics" string array out of text, in encounter order."""
    match = RELATED_TOPICS_PATTERN.search(text)
    if not match:
        return []

    topics = []
    for topic_match in QUOTED_STRING_PATTERN.finditer(match.group(1)):
        try:
            topics.append(_decode_json_string(topic_match.group(1)))
        except ValueError:
            continue

    return normalize_string_list(topics, "relatedTopics", "salvage")


def _decode_json_string(body: str) -> str:
    """Resolve escape sequences by decoding body as a JSON string literal."""
    value = orjson.loads(f'"{body}"')
    if not isinstance(value, str):
        raise ValueError("not a JSON string")
    # Lone surrogates (a split emoji pair) decode but cannot be sent as UTF-8
    value.encode("utf-8")
    return value


def _try_repair(text: str) -> Optional[ParsedResponse]:
    if '"steps"' not in text:
        return None

    start = text.find("{")
    if start == -1:
        return None

    data = repair_llm_json(text[start:], source="salvage")
    parsed = _coerce_document(data, source="salvage")
    if parsed is not None:
        logger.info(f"[salvage] JSON repair recovered {len(parsed.steps)} steps")
    return parsed


# =============================================================================
# TEXT
# =============================================================================

def parse_as_text(text: str) -> ParsedResponse:
    """
    Split free prose into steps on "Step N:" / "### Step N" line markers.

    Text before the first marker is dropped. Each chunk's first line is
    the title and the rest is the content. Always returns at least one
    step: the whole reply under a placeholder title if nothing else works.
    """
    related = extract_related_topics(text)
    chunks = STEP_BOUNDARY_PATTERN.split(text)

    if len(chunks) <= 1:
        return _single_step(TEXT_FALLBACK_TITLE, text, related)

    steps: List[LearningStep] = []
    for chunk in chunks[1:]:
        lines = chunk.strip().split("\n")
        title = lines[0].strip().removesuffix(":")
        content = "\n".join(lines[1:]).strip()

        step = _make_step(title, content)
        if step:
            steps.append(step)

    if not steps:
        return _single_step(EMPTY_CHUNKS_FALLBACK_TITLE, text, related)

    return ParsedResponse(steps=steps, related_topics=related)


# =============================================================================
# HELPERS
# =============================================================================

def _make_step(title: str, content: str) -> Optional[LearningStep]:
    title = title.strip()
    if not title or not content.strip():
        return None
    return LearningStep(title=title, content=content)


def _utf8_safe(value: str) -> str:
    """Replace code points that cannot be encoded as UTF-8, such as lone surrogates."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return value.encode("utf-8", "replace").decode("utf-8")
    return value


def _single_step(title: str, text: str, related: Optional[List[str]] = None) -> ParsedResponse:
    # Content is the reply verbatim, even when blank
    return ParsedResponse(
        steps=[LearningStep(title=title, content=text)],
        related_topics=related or [],
    )
