"""Tests for heuristic entity and relation extraction"""

import pytest

from graphweave.graph.node import EntityType
from graphweave.nlp import (
    classify_entity,
    detect_language,
    extract,
    extract_keywords,
    is_valid_candidate,
    split_sentences,
)


def _matched(relations):
    return {
        (r.source_text, r.relation_type, r.target_text) for r in relations if r.matched
    }


def test_chinese_sample_text():
    """Two pattern relations and three distinct entities from the sample"""
    entities, relations = extract("猫是一种动物。动物需要食物。")

    assert {e.text for e in entities} == {"猫", "动物", "食物"}
    assert [e.text for e in entities].count("动物") == 2
    assert _matched(relations) == {
        ("猫", "isA", "动物"),
        ("动物", "requires", "食物"),
    }

    is_a = next(r for r in relations if r.relation_type == "isA")
    assert is_a.base_weight == pytest.approx(0.8)
    assert is_a.confidence == pytest.approx(0.575)


def test_synthesized_relations_are_unmatched():
    _, relations = extract("猫是一种动物。动物需要食物。")
    kinds = {r.relation_type for r in relations if not r.matched}
    assert "sequential" in kinds
    assert "contextual" in kinds
    assert all(r.family == "synthesized" for r in relations if not r.matched)


def test_english_pattern():
    entities, relations = extract("Python is a kind of language.")
    assert ("Python", "isA", "language") in _matched(relations)
    # The generic "is a" pattern overlaps the consumed span and is skipped
    assert len([r for r in relations if r.matched]) == 1
    assert any(e.text == "Python" for e in entities)


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_empty_input(text):
    assert extract(text) == ([], [])


def test_regex_metacharacters_do_not_raise():
    """Entity text is matched literally everywhere"""
    entities, relations = extract("C++ (v2.0) [beta]* is a kind of tool? Yes+.")
    assert isinstance(entities, list)
    assert isinstance(relations, list)


def test_no_self_loops():
    _, relations = extract("动物是一种动物。")
    assert not [r for r in relations if r.source_text == r.target_text]


def test_extract_is_stateless():
    text = "猫是一种动物。动物需要食物。"
    first = extract(text)
    second = extract(text)
    assert first == second


@pytest.mark.parametrize(
    "text",
    ["123", "三百", "第一", "3rd", "first", "user_id", "x1", "这个", "的", "hello, world", "is"],
)
def test_invalid_candidates(text):
    assert not is_valid_candidate(text)


@pytest.mark.parametrize("text", ["Python", "动物", "machine learning", "state-of-art"])
def test_valid_candidates(text):
    assert is_valid_candidate(text)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Dr Smith", EntityType.PERSON),
        ("王先生", EntityType.PERSON),
        ("IBM", EntityType.ORGANIZATION),
        ("Acme Corp", EntityType.ORGANIZATION),
        ("北京大学", EntityType.ORGANIZATION),
        ("动物", EntityType.CONCEPT),
    ],
)
def test_classify_entity(text, expected):
    assert classify_entity(text) is expected


def test_detect_language():
    assert detect_language("猫是一种动物") == "zh"
    assert detect_language("Hello world") == "en"
    assert detect_language("") == "en"


def test_split_sentences_keeps_decimals_and_honorifics():
    sentences = split_sentences("Dr. Smith arrived. It cost 3.5 dollars! 好。")
    assert sentences == ["Dr. Smith arrived", "It cost 3.5 dollars", "好"]


def test_extract_keywords_relative_frequency():
    keywords = extract_keywords("the cat the dog")
    assert keywords[0] == ("the", pytest.approx(0.5))
    assert {k for k, _ in keywords} == {"the", "cat", "dog"}
    assert extract_keywords("") == []
