"""Tests for leaf normalization."""

from __future__ import annotations

from _builders import doc, link, p, text

from extrarich.normalizer import normalize
from extrarich.tracing import RecordingSink
from extrarich.types import Leaf


def test_merges_equal_neighbours() -> None:
    document = doc(p(text("Foo", "bold"), text("Bar", "bold"), text("!")))
    assert normalize(document) == 1
    assert document.children[0].children == [Leaf("FooBar", ["bold"]), Leaf("!")]


def test_merges_runs_of_three() -> None:
    document = doc(p(text("a"), text("b"), text("c")))
    assert normalize(document) == 2
    assert document.children[0].children == [Leaf("abc")]


def test_mark_order_does_not_matter() -> None:
    document = doc(p(text("a", "bold", "italic"), text("b", "italic", "bold")))
    normalize(document)
    assert document.children[0].children == [Leaf("ab", ["bold", "italic"])]


def test_different_data_stays_apart() -> None:
    document = doc(p(text("a", textColor="red"), text("b")))
    assert normalize(document) == 0
    assert len(document.children[0].children) == 2


def test_leaves_across_inline_are_not_merged() -> None:
    document = doc(p(text("a"), link(text("b")), text("c")))
    assert normalize(document) == 0


def test_inline_children_and_shifted_siblings() -> None:
    document = doc(
        p(text("a"), text("b"), link(text("x"), text("y")), text("c"), text("d"))
    )
    assert normalize(document) == 3
    paragraph = document.children[0]
    assert paragraph.children[0] == Leaf("ab")
    assert paragraph.children[1].children == [Leaf("xy")]
    assert paragraph.children[2] == Leaf("cd")


def test_empty_leaf_merges_away() -> None:
    document = doc(p(text("a"), text("")))
    normalize(document)
    assert document.children[0].children == [Leaf("a")]


def test_two_empty_leaves_keep_one() -> None:
    document = doc(p(text(""), text("")))
    normalize(document)
    assert document.children[0].children == [Leaf("")]


def test_subtree_only() -> None:
    document = doc(p(text("a"), text("b")), p(text("c"), text("d")))
    normalize(document, (1,))
    assert len(document.children[0].children) == 2
    assert document.children[1].children == [Leaf("cd")]


def test_publishes_one_transition() -> None:
    document = doc(p(text("a"), text("b"), text("c")))
    seen: list[object] = []
    document.subscribe(seen.append)
    normalize(document)
    assert len(seen) == 1


def test_already_normal_is_silent() -> None:
    document = doc(p(text("a", "bold"), text("b")))
    seen: list[object] = []
    document.subscribe(seen.append)
    sink = RecordingSink()
    assert normalize(document, sink=sink) == 0
    assert seen == []
    assert sink.events == []


def test_merge_events() -> None:
    sink = RecordingSink()
    normalize(doc(p(text("Foo"), text("Bar"))), sink=sink)
    (event,) = sink.find("normalize.merge")
    assert event.fields == {"path": (0, 0), "left": "Foo", "right": "Bar"}
