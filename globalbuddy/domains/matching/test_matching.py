"""
Tests for the matching domain: tokenizer, registry, bags, scorer, ranker.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from globalbuddy.config.errors import ConfigurationError
from globalbuddy.config.settings import Settings

from .bag import SemanticBagBuilder
from .contracts import BagBuilder, DocumentRanker
from .models import Document, ScoredResult
from .ranker import Ranker
from .registry import SynonymClass, SynonymRegistry
from .scorer import score, score_texts
from .selectors import community_text, post_text
from .tokenizer import is_unsegmented, tokenize

BTS_BODY = "推荐在 BTS 线附近找公寓，注意提前准备押金"


@pytest.fixture
def default_builder() -> SemanticBagBuilder:
    """Bag builder over the built-in synonym table."""
    return SemanticBagBuilder(SynonymRegistry.default())


@pytest.fixture
def overlapping_registry() -> SynonymRegistry:
    """Registry where 'y' belongs to two classes."""
    return SynonymRegistry.from_mapping({"a": ["x", "y"], "b": ["y", "z"]})


def _text(document: dict[str, Any]) -> str:
    return document["text"]


# --- Tokenizer Tests ---


def test_tokenize_lowercases_and_strips_punctuation() -> None:
    """Test punctuation becomes a separator and case is folded."""
    assert tokenize("Visa, Rent & FOOD!") == ["visa", "rent", "food"]


def test_tokenize_chinese_sentence() -> None:
    """Test full-width punctuation splits unspaced Chinese text."""
    assert tokenize(BTS_BODY) == ["推荐在", "bts", "线附近找公寓", "注意提前准备押金"]


def test_tokenize_keeps_digits() -> None:
    """Test digits survive, including inside CJK tokens."""
    assert tokenize("Room 302号, floor-3") == ["room", "302号", "floor", "3"]


def test_tokenize_underscore_is_not_a_letter() -> None:
    """Test underscores are treated as punctuation."""
    assert tokenize("second_hand") == ["second", "hand"]


def test_tokenize_empty_inputs() -> None:
    """Test empty, whitespace-only and None text."""
    assert tokenize("") == []
    assert tokenize("   \t\n ") == []
    assert tokenize("!!! ... ???") == []
    assert tokenize(None) == []


def test_tokenize_preserves_order_and_repeats() -> None:
    """Test the tokenizer returns a sequence, not a set."""
    assert tokenize("b a b") == ["b", "a", "b"]


def test_is_unsegmented() -> None:
    """Test script detection used for term spotting."""
    assert is_unsegmented("公寓") is True
    assert is_unsegmented("rent") is False
    assert is_unsegmented("公寓a") is False
    assert is_unsegmented("") is False


# --- Registry Tests ---


def test_default_registry_lookup() -> None:
    """Test a built-in term resolves to its class."""
    registry = SynonymRegistry.default()
    classes = registry.classes_containing("公寓")

    assert {c.name for c in classes} == {"housing"}
    assert "租房" in next(iter(classes))


def test_registry_unknown_token() -> None:
    """Test unknown tokens map to no classes."""
    registry = SynonymRegistry.default()
    assert registry.classes_containing("elevator") == frozenset()


def test_registry_overlapping_classes(overlapping_registry: SynonymRegistry) -> None:
    """Test a token in two classes returns both."""
    names = {c.name for c in overlapping_registry.classes_containing("y")}
    assert names == {"a", "b"}


def test_registry_preserves_class_order(overlapping_registry: SynonymRegistry) -> None:
    """Test the registry is an ordered collection."""
    assert [c.name for c in overlapping_registry] == ["a", "b"]
    assert len(overlapping_registry) == 2


def test_synonym_class_normalizes_terms() -> None:
    """Test terms are lowercased, stripped and de-duplicated."""
    synonym_class = SynonymClass(name="visa", terms=("Visa", " visa ", "VISA!", "签证"))
    assert synonym_class.terms == ("visa", "签证")


def test_synonym_class_is_immutable() -> None:
    """Test SynonymClass is frozen."""
    synonym_class = SynonymClass(name="visa", terms=("visa",))
    with pytest.raises(Exception):
        synonym_class.name = "changed"  # type: ignore


def test_registry_rejects_multi_token_term() -> None:
    """Test a phrase cannot be a synonym term."""
    with pytest.raises(ConfigurationError):
        SynonymRegistry.from_mapping({"housing": ["rent", "short term"]})


def test_registry_rejects_empty_class() -> None:
    """Test a class needs at least one term."""
    with pytest.raises(ConfigurationError):
        SynonymRegistry.from_mapping({"empty": []})


def test_registry_rejects_duplicate_names() -> None:
    """Test class names are unique."""
    with pytest.raises(ConfigurationError):
        SynonymRegistry(
            [
                SynonymClass(name="a", terms=("x",)),
                SynonymClass(name="a", terms=("y",)),
            ]
        )


def test_registry_from_json(tmp_path: Path) -> None:
    """Test loading classes from a JSON file."""
    path = tmp_path / "synonyms.json"
    path.write_text(json.dumps({"dining": ["吃饭", "餐馆"]}, ensure_ascii=False), encoding="utf-8")

    registry = SynonymRegistry.from_json(path)

    assert len(registry) == 1
    assert {c.name for c in registry.classes_containing("餐馆")} == {"dining"}


def test_registry_from_json_invalid(tmp_path: Path) -> None:
    """Test malformed or mis-shaped synonym files."""
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        SynonymRegistry.from_json(broken)

    wrong_shape = tmp_path / "shape.json"
    wrong_shape.write_text(json.dumps({"dining": "吃饭"}), encoding="utf-8")
    with pytest.raises(ConfigurationError):
        SynonymRegistry.from_json(wrong_shape)

    with pytest.raises(ConfigurationError):
        SynonymRegistry.from_json(tmp_path / "missing.json")


def test_registry_from_settings(tmp_path: Path) -> None:
    """Test the configured synonym file wins over the built-in table."""
    assert len(SynonymRegistry.from_settings(Settings(_env_file=None))) == len(
        SynonymRegistry.default()
    )

    path = tmp_path / "synonyms.json"
    path.write_text(json.dumps({"greeting": ["hello", "hi"]}), encoding="utf-8")
    registry = SynonymRegistry.from_settings(Settings(_env_file=None, synonyms_path=path))

    assert [c.name for c in registry] == ["greeting"]


def test_spot_terms() -> None:
    """Test CJK terms are spotted inside longer tokens, Latin terms are not."""
    registry = SynonymRegistry.default()
    assert registry.spot_terms("线附近找公寓") == ["公寓"]
    assert registry.spot_terms("公寓") == []
    assert registry.spot_terms("parent") == []


# --- Semantic Bag Tests ---


def test_bag_is_deduplicated() -> None:
    """Test repeated tokens count once."""
    builder = SemanticBagBuilder(SynonymRegistry.from_mapping({"dining": ["吃饭", "餐馆"]}))
    assert builder.build("吃饭 吃饭 吃饭") == frozenset({"吃饭", "餐馆"})


def test_bag_without_synonyms() -> None:
    """Test plain tokens pass through."""
    builder = SemanticBagBuilder(SynonymRegistry([]))
    assert builder.build("hello world hello") == frozenset({"hello", "world"})


def test_bag_unions_overlapping_classes(overlapping_registry: SynonymRegistry) -> None:
    """Test every class containing a token contributes its members."""
    builder = SemanticBagBuilder(overlapping_registry)

    assert builder.build("y") == frozenset({"x", "y", "z"})
    assert builder.build("x") == frozenset({"x", "y"})
    assert builder.build("y y x") == frozenset({"x", "y", "z"})


def test_bag_contains_all_raw_tokens(default_builder: SemanticBagBuilder) -> None:
    """Test the bag is never smaller than the distinct raw tokens."""
    text = "曼谷 租房 攻略 曼谷"
    bag = default_builder.build(text)

    assert set(tokenize(text)) <= bag
    assert len(bag) >= len(set(tokenize(text)))


def test_bag_spots_terms_in_unspaced_text(default_builder: SemanticBagBuilder) -> None:
    """Test a term inside a longer Chinese token expands its class."""
    bag = default_builder.build("推荐一家餐馆")

    assert "推荐一家餐馆" in bag
    assert {"餐馆", "吃饭", "用餐"} <= bag


def test_bag_does_not_spot_latin_substrings(default_builder: SemanticBagBuilder) -> None:
    """Test 'rent' is not found inside 'parent'."""
    assert default_builder.build("parent meeting") == frozenset({"parent", "meeting"})


def test_bag_empty_text(default_builder: SemanticBagBuilder) -> None:
    """Test empty text yields an empty bag."""
    assert default_builder.build("") == frozenset()
    assert default_builder.build(None) == frozenset()


# --- Scorer Tests ---


def test_score_formula() -> None:
    """Test |q ∩ t| / |q| and its asymmetry."""
    assert score(frozenset({"a", "b"}), frozenset({"a"})) == 0.5
    assert score(frozenset({"a"}), frozenset({"a", "b"})) == 1.0
    assert score(frozenset({"a", "b", "c", "d"}), frozenset({"c"})) == 0.25


def test_score_empty_inputs(default_builder: SemanticBagBuilder) -> None:
    """Test empty query scores 0, never NaN."""
    assert score(frozenset(), frozenset()) == 0.0
    assert score(frozenset(), frozenset({"a"})) == 0.0
    assert score(frozenset({"a"}), frozenset()) == 0.0
    assert score_texts("", "", default_builder) == 0.0
    assert score_texts(None, "anything", default_builder) == 0.0


def test_score_no_shared_concepts(default_builder: SemanticBagBuilder) -> None:
    """Test disjoint bags score exactly 0."""
    assert score_texts("签证", "二手 自行车", default_builder) == 0.0
    assert score_texts("visa", "apartment", default_builder) == 0.0


def test_score_synonym_bridging(default_builder: SemanticBagBuilder) -> None:
    """Test a synonym in the target matches without the literal query word."""
    assert "吃饭" not in "推荐一家餐馆"
    assert score_texts("吃饭", "推荐一家餐馆", default_builder) > 0


def test_score_housing_post(default_builder: SemanticBagBuilder) -> None:
    """Test '租房' matches a post that only mentions '公寓'."""
    assert score_texts("租房", BTS_BODY, default_builder) == 1.0


def test_score_cross_language(default_builder: SemanticBagBuilder) -> None:
    """Test English and Chinese terms in one class bridge each other."""
    assert score_texts("apartment", "找公寓", default_builder) == 1.0


@pytest.mark.parametrize(
    ("query", "target"),
    [
        ("租房 签证 二手", BTS_BODY),
        ("吃饭", "吃饭"),
        ("!!!", "???"),
        ("一个很长的问题 " * 50, "短"),
        ("a b c", ""),
        ("课程", "延世大学选课技巧"),
    ],
)
def test_score_in_unit_interval(
    default_builder: SemanticBagBuilder, query: str, target: str
) -> None:
    """Test every score lies in [0, 1]."""
    assert 0.0 <= score_texts(query, target, default_builder) <= 1.0


def test_score_is_deterministic(default_builder: SemanticBagBuilder) -> None:
    """Test repeated calls give identical results."""
    first = score_texts("租房 吃饭 visa", BTS_BODY, default_builder)
    second = score_texts("租房 吃饭 visa", BTS_BODY, default_builder)
    assert first == second


# --- Ranker Tests ---


@pytest.fixture
def plain_ranker() -> Ranker:
    """Ranker without synonyms, for exact scores."""
    return Ranker.from_registry(SynonymRegistry([]))


def test_rank_is_stable_for_ties(plain_ranker: Ranker) -> None:
    """Test [A(0.5), B(0.5), C(0.8)] ranks as C, A, B."""
    query = " ".join(f"t{i}" for i in range(10))
    documents = [
        {"id": "A", "text": "t0 t1 t2 t3 t4"},
        {"id": "B", "text": "t5 t6 t7 t8 t9"},
        {"id": "C", "text": "t0 t1 t2 t3 t4 t5 t6 t7"},
    ]

    results = plain_ranker.rank(query, documents, _text)

    assert [r.document["id"] for r in results] == ["C", "A", "B"]
    assert [r.score for r in results] == [0.8, 0.5, 0.5]


def test_rank_ties_follow_input_order(plain_ranker: Ranker) -> None:
    """Test many equal scores keep the caller's order."""
    documents = [{"id": str(i), "text": "match"} for i in range(20)]

    results = plain_ranker.rank("match", documents, _text)
    assert [r.document["id"] for r in results] == [str(i) for i in range(20)]

    reversed_results = plain_ranker.rank("match", list(reversed(documents)), _text)
    assert [r.document["id"] for r in reversed_results] == [str(i) for i in reversed(range(20))]


def test_rank_excludes_zero_scores(plain_ranker: Ranker) -> None:
    """Test zero-score documents never appear, whatever the limit."""
    documents = [
        {"id": "hit", "text": "visa office"},
        {"id": "miss", "text": "cooking class"},
    ]

    for limit in (None, 1, 10, 100):
        results = plain_ranker.rank("visa", documents, _text, limit=limit)
        assert [r.document["id"] for r in results] == ["hit"]


def test_rank_limit_truncates_after_sorting(plain_ranker: Ranker) -> None:
    """Test limit keeps the best results, not the first ones."""
    documents = [
        {"id": "low", "text": "a"},
        {"id": "high", "text": "a b"},
        {"id": "mid", "text": "b"},
    ]

    results = plain_ranker.rank("a b", documents, _text, limit=1)
    assert [r.document["id"] for r in results] == ["high"]

    assert plain_ranker.rank("a b", documents, _text, limit=0) == []


def test_rank_negative_limit(plain_ranker: Ranker) -> None:
    """Test a negative limit is a programming error."""
    with pytest.raises(ValueError):
        plain_ranker.rank("a", [{"text": "a"}], _text, limit=-1)


def test_rank_empty_query(plain_ranker: Ranker) -> None:
    """Test an empty or punctuation-only query matches nothing."""
    documents = [{"id": "1", "text": "anything"}]
    assert plain_ranker.rank("", documents, _text) == []
    assert plain_ranker.rank("？！", documents, _text) == []
    assert plain_ranker.rank(None, documents, _text) == []


def test_rank_empty_collection(plain_ranker: Ranker) -> None:
    """Test ranking nothing returns nothing."""
    assert plain_ranker.rank("visa", [], _text) == []


def test_rank_accepts_generators(plain_ranker: Ranker) -> None:
    """Test documents can be any iterable."""
    documents = ({"id": str(i), "text": "visa" if i % 2 else "food"} for i in range(4))
    results = plain_ranker.rank("visa", documents, _text)
    assert [r.document["id"] for r in results] == ["1", "3"]


def test_rank_documents_with_synonyms() -> None:
    """Test ranking Document models through the post selector."""
    ranker = Ranker.from_registry(SynonymRegistry.default())
    posts = [
        Document(id="food", title="上海哪里吃泰餐", body="静安寺附近有很多泰国餐厅"),
        Document(id="rent", title="曼谷租房攻略", body=BTS_BODY),
        Document(id="course", title="延世大学选课技巧", body="热门课程要抢先注册"),
    ]

    results = ranker.rank("租房", posts, post_text)

    assert len(results) == 1
    assert isinstance(results[0], ScoredResult)
    assert results[0].document.id == "rent"
    assert results[0].score > 0


def test_rank_is_deterministic() -> None:
    """Test identical inputs give identical rankings."""
    ranker = Ranker.from_registry(SynonymRegistry.default())
    documents = [
        {"id": "1", "text": "签证 公寓"},
        {"id": "2", "text": "宿舍"},
        {"id": "3", "text": "二手"},
    ]

    first = ranker.rank("租房 签证", documents, _text)
    second = ranker.rank("租房 签证", documents, _text)

    assert first == second


# --- Selector Tests ---


def test_post_text_from_mapping_and_model() -> None:
    """Test title and body are joined for rows and models."""
    assert post_text({"title": "曼谷租房攻略", "body": "找公寓"}) == "曼谷租房攻略 找公寓"
    assert post_text(Document(id="1", title="t", body="b")) == "t b"
    assert post_text({"title": "only title"}) == "only title "


def test_community_text_includes_tags() -> None:
    """Test description and tags are searchable community text."""
    community = {
        "title": "中国人在泰国留学",
        "description": "分享签证、租房、美食攻略等信息",
        "tags": ["签证", "美食", "租房"],
    }
    assert community_text(community) == "中国人在泰国留学 分享签证、租房、美食攻略等信息 签证 美食 租房"
    assert community_text({"title": "t", "description": None}) == "t"


# --- Contract Tests ---


def test_implementations_satisfy_contracts() -> None:
    """Test concrete classes satisfy the protocols."""
    builder = SemanticBagBuilder(SynonymRegistry.default())
    assert isinstance(builder, BagBuilder)
    assert isinstance(Ranker(builder), DocumentRanker)
    assert Ranker(builder).bag_builder is builder
