"""Tests for the learning-path response parser."""

import pytest
from learnmate.services import parser
from learnmate.services.parser import (
    EMPTY_CHUNKS_FALLBACK_TITLE,
    TEXT_FALLBACK_TITLE,
    extract_related_topics,
    parse_as_text,
    parse_learning_response,
    try_salvage,
    try_strict_json,
)


def steps_of(result):
    return [(step.title, step.content) for step in result.steps]


# =============================================================================
# Orchestrator
# =============================================================================

def test_parse_strict_document_exactly():
    raw = '{"steps":[{"title":"A","content":"B"}],"relatedTopics":["X"]}'
    result = parse_learning_response(raw)
    assert result.model_dump(by_alias=True) == {
        "steps": [{"title": "A", "content": "B"}],
        "relatedTopics": ["X"],
    }


@pytest.mark.parametrize("raw", ["", "   \n\t ", "\x00\x01 binary-ish \xff", "}{", '{"steps": []}'])
def test_parse_always_returns_a_step(raw):
    result = parse_learning_response(raw)
    assert len(result.steps) >= 1


def test_parse_unstructured_text_is_wrapped_verbatim():
    raw = "Recursion is when a function calls itself.\n\nThat's it!"
    result = parse_learning_response(raw)
    assert steps_of(result) == [(TEXT_FALLBACK_TITLE, raw)]
    assert result.related_topics == []


def test_parse_empty_steps_list_falls_back_to_text():
    raw = '{"steps": []}'
    result = parse_learning_response(raw)
    assert steps_of(result) == [(TEXT_FALLBACK_TITLE, raw)]


def test_parse_uses_salvage_when_json_is_broken():
    raw = '{"steps": [{"title": "A", "content": "B"}, {"title": "C", "content": "D"},]}'
    result = parse_learning_response(raw)
    assert steps_of(result) == [("A", "B"), ("C", "D")]


def test_parse_uses_text_markers_when_no_json():
    result = parse_learning_response("Step 1: Intro\nHello\nStep 2: Next\nWorld")
    assert steps_of(result) == [("Intro", "Hello"), ("Next", "World")]


def test_parse_survives_strategy_crash(monkeypatch):
    def boom(text):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(parser, "try_strict_json", boom)
    raw = '{"steps": [{"title": "A", "content": "B"}]}'
    result = parse_learning_response(raw)
    assert steps_of(result) == [("A", "B")]


def test_parse_survives_every_strategy_crashing(monkeypatch):
    def boom(text):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(parser, "try_strict_json", boom)
    monkeypatch.setattr(parser, "try_salvage", boom)
    monkeypatch.setattr(parser, "parse_as_text", boom)
    result = parse_learning_response("anything")
    assert steps_of(result) == [(TEXT_FALLBACK_TITLE, "anything")]


# =============================================================================
# Strict JSON
# =============================================================================

def test_strict_ignores_surrounding_prose():
    raw = 'Here you go:\n{"steps":[{"title":"A","content":"B"}]}\nHope that helps!'
    result = try_strict_json(raw)
    assert result is not None
    assert steps_of(result) == [("A", "B")]
    assert result.related_topics == []


def test_strict_handles_code_fence():
    raw = '```json\n{"steps": [{"title": "A", "content": "B"}], "relatedTopics": ["X", "Y"]}\n```'
    result = try_strict_json(raw)
    assert steps_of(result) == [("A", "B")]
    assert result.related_topics == ["X", "Y"]


def test_strict_decodes_escapes():
    raw = r'{"steps":[{"title":"Say \"hi\"","content":"line1\nline2"}]}'
    result = try_strict_json(raw)
    assert steps_of(result) == [('Say "hi"', "line1\nline2")]


def test_strict_skips_brace_in_prose_and_in_strings():
    raw = 'Use {braces} wisely. {"steps":[{"title":"A","content":"close with } later"}]}'
    result = try_strict_json(raw)
    assert steps_of(result) == [("A", "close with } later")]


def test_strict_rejects_missing_steps():
    assert try_strict_json('{"lessons": [{"title": "A", "content": "B"}]}') is None


def test_strict_rejects_non_list_steps():
    assert try_strict_json('{"steps": "A then B"}') is None


def test_strict_rejects_text_without_braces():
    assert try_strict_json("no json here") is None


def test_strict_rejects_malformed_json():
    assert try_strict_json('{"steps": [{"title": "A", "content": "B"},]}') is None


def test_strict_drops_incomplete_steps():
    raw = '{"steps": [{"title": "A"}, "junk", {"title": "C", "content": "D"}, {"title": " ", "content": "E"}]}'
    result = try_strict_json(raw)
    assert steps_of(result) == [("C", "D")]


def test_strict_joins_list_content():
    raw = '{"steps": [{"title": "A", "content": ["para 1", "para 2"]}]}'
    result = try_strict_json(raw)
    assert steps_of(result) == [("A", "para 1\npara 2")]


def test_strict_normalizes_related_topic_objects():
    raw = '{"steps": [{"title": "A", "content": "B"}], "relatedTopics": [{"topic": "X"}, "", "Y"]}'
    result = try_strict_json(raw)
    assert result.related_topics == ["X", "Y"]


# =============================================================================
# Salvage
# =============================================================================

def test_salvage_recovers_pairs_from_trailing_comma():
    raw = '{"steps": [{"title": "A", "content": "B"}, {"title": "C", "content": "D"},]}'
    result = try_salvage(raw)
    assert steps_of(result) == [("A", "B"), ("C", "D")]


def test_salvage_decodes_escapes():
    raw = r'{"steps":[{"title":"Say \"hi\"","content":"line1\nline2"},]}'
    assert try_strict_json(raw) is None
    result = try_salvage(raw)
    assert steps_of(result) == [('Say "hi"', "line1\nline2")]


def test_salvage_skips_undecodable_pair():
    raw = r'{"steps": [{"title": "A", "content": "bad \x escape"}, {"title": "C", "content": "D"},]}'
    result = try_salvage(raw)
    assert steps_of(result) == [("C", "D")]


def test_salvage_keeps_steps_before_truncation():
    raw = '{"steps": [{"title": "A", "content": "B"}, {"title": "C", "content": "trunc'
    assert try_strict_json(raw) is None
    result = try_salvage(raw)
    assert steps_of(result) == [("A", "B")]


def test_salvage_collects_related_topics():
    raw = (
        'Sure!\n{"steps": [{"title": "A", "content": "B"},], '
        '"relatedTopics": ["Graphs", "Trees \\"advanced\\""]'
    )
    result = try_salvage(raw)
    assert result.related_topics == ["Graphs", 'Trees "advanced"']


def test_salvage_returns_none_without_pairs():
    assert try_salvage("Step 1: Intro\nHello") is None


def test_salvage_repairs_reordered_keys():
    raw = '{"steps": [{"content": "B", "title": "A"},]'
    result = try_salvage(raw)
    assert steps_of(result) == [("A", "B")]


# =============================================================================
# Text
# =============================================================================

def test_text_splits_on_step_markers():
    result = parse_as_text("Step 1: Intro\nHello\nStep 2: Next\nWorld")
    assert steps_of(result) == [("Intro", "Hello"), ("Next", "World")]


def test_text_drops_preamble():
    result = parse_as_text("Here is your guide.\nStep 1: Intro\nHello")
    assert steps_of(result) == [("Intro", "Hello")]


def test_text_splits_on_headings():
    raw = "### Step 1: Basics\nFirst lesson\n\n### Step 2\nLoops:\nSecond lesson"
    result = parse_as_text(raw)
    assert steps_of(result) == [("Basics", "First lesson"), ("Loops", "Second lesson")]


def test_text_markers_are_case_insensitive():
    result = parse_as_text("step 1: intro\nhello")
    assert steps_of(result) == [("intro", "hello")]


def test_text_marker_must_start_a_line():
    raw = "Read Step 1: carefully"
    result = parse_as_text(raw)
    assert steps_of(result) == [(TEXT_FALLBACK_TITLE, raw)]


def test_text_without_markers_wraps_input():
    raw = "  just prose  "
    result = parse_as_text(raw)
    assert steps_of(result) == [(TEXT_FALLBACK_TITLE, raw)]


def test_text_drops_chunks_without_content():
    result = parse_as_text("Step 1: Title only\nStep 2: Real\nBody")
    assert steps_of(result) == [("Real", "Body")]


def test_text_degenerate_chunks_fall_back():
    raw = "Step 1:\nStep 2: Title only"
    result = parse_as_text(raw)
    assert steps_of(result) == [(EMPTY_CHUNKS_FALLBACK_TITLE, raw)]


# =============================================================================
# Related topics
# =============================================================================

def test_extract_related_topics_in_order():
    text = 'blah "relatedTopics": ["A", "B", "C"] blah'
    assert extract_related_topics(text) == ["A", "B", "C"]


def test_extract_related_topics_missing():
    assert extract_related_topics('{"steps": []}') == []


def test_related_topics_same_under_every_strategy():
    topics = '"relatedTopics": ["A", "B", "C"]'
    strict = '{"steps": [{"title": "T", "content": "C"}], ' + topics + "}"
    salvage = '{"steps": [{"title": "T", "content": "C"},], ' + topics + "}"
    text = "Step 1: T\nC\n" + topics

    assert try_strict_json(strict).related_topics == ["A", "B", "C"]
    assert try_strict_json(salvage) is None
    assert try_salvage(salvage).related_topics == ["A", "B", "C"]
    assert parse_learning_response(text).related_topics == ["A", "B", "C"]


# =============================================================================
# Unencodable text
# =============================================================================

def test_strict_replaces_lone_surrogates():
    raw = r'{"steps":[{"title":"A \ud83d","content":"B \udc00 C"}],"relatedTopics":["X \ud83d"]}'
    result = parse_learning_response(raw)
    for value in [result.steps[0].title, result.steps[0].content, *result.related_topics]:
        value.encode("utf-8")
    assert result.steps[0].content.startswith("B ")


def test_salvage_skips_pair_with_lone_surrogate():
    raw = r'{"steps":[{"title":"A \ud83d","content":"B"},{"title":"C","content":"D"},]}'
    result = try_salvage(raw)
    assert steps_of(result) == [("C", "D")]


def test_related_topics_skip_lone_surrogate():
    assert extract_related_topics(r'"relatedTopics": ["ok", "bad \ud83d"]') == ["ok"]


def test_parse_raw_surrogate_characters():
    raw = "Just prose \ud83d here"
    result = parse_learning_response(raw)
    result.steps[0].content.encode("utf-8")
    assert result.steps[0].title == TEXT_FALLBACK_TITLE


def test_related_topics_with_brackets_inside_strings():
    text = '"relatedTopics": ["Arrays [1]", "B", "Maps \\"]\\" keys"]'
    assert extract_related_topics(text) == ["Arrays [1]", "B", 'Maps "]" keys']
