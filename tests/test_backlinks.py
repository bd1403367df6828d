"""
Test Suite for [[Title]] links and backlinks

Tests for:
1. Link parsing
2. Backlink recomputation (symmetry, case-insensitivity, missing titles)
3. Backlink context snippets and the link graph
"""

import random

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from study_buddy.models.note import SmartNote
from study_buddy.utils.backlinks import backlinks_for, build_link_graph, recompute_backlinks
from study_buddy.utils.wikilinks import backlink_context, outgoing_references, parse_internal_links


def _note(note_id, title, content=""):
    return SmartNote(id=note_id, title=title, content=content)


class TestParseLinks:
    """Tests for parse_internal_links"""

    def test_parses_titles(self):
        """Test: every [[Title]] is returned, case preserved"""
        links = parse_internal_links("See [[Quantum Computing]] and [[Neural Networks]]")
        assert links == {"Quantum Computing", "Neural Networks"}
        print("✅ Links parsed")

    def test_empty_and_plain_content(self):
        """Test: no links yields an empty set"""
        assert parse_internal_links("") == set()
        assert parse_internal_links("no links here [single] brackets") == set()

    def test_duplicates_and_html(self):
        """Test: repeated titles collapse; HTML around links is ignored"""
        content = "<p>[[Calculus]]</p><ul><li>[[Calculus]]</li><li>[[calculus]]</li></ul>"
        assert parse_internal_links(content) == {"Calculus", "calculus"}


class TestRecomputeBacklinks:
    """Tests for recompute_backlinks"""

    def test_backlinks_point_to_referencing_notes(self):
        """Test: A references B, so B.backlinks contains A"""
        a = _note("a", "Alpha", "Builds on [[Beta]]")
        b = _note("b", "Beta", "Standalone")
        recompute_backlinks([a, b])

        assert b.backlinks == ["a"]
        assert a.backlinks == []

    def test_case_insensitive_and_missing_titles(self):
        """Test: title match ignores case; references to unknown titles are dropped"""
        a = _note("a", "Alpha", "[[BETA]] and [[Gamma]]")
        b = _note("b", "beta")
        recompute_backlinks([a, b])

        assert b.backlinks == ["a"]
        assert a.backlinks == []

    def test_no_duplicates_from_repeated_references(self):
        """Test: one referencing note appears once even when it mentions the title twice"""
        a = _note("a", "Alpha", "[[Beta]] ... [[beta]] ... [[Beta]]")
        b = _note("b", "Beta")
        recompute_backlinks([a, b])
        assert b.backlinks == ["a"]

    def test_stale_backlinks_are_reset(self):
        """Test: recomputation starts from scratch"""
        a = _note("a", "Alpha", "nothing")
        b = _note("b", "Beta")
        b.backlinks = ["a", "zzz"]
        recompute_backlinks([a, b])
        assert b.backlinks == []

    def test_symmetric_regardless_of_order(self):
        """Test: B in A.backlinks iff B's content references A's title, for any note order"""
        notes = [
            _note("1", "Quantum Computing", "See [[Neural Networks]]"),
            _note("2", "Neural Networks", "Compare [[Quantum Computing]] and [[Calculus]]"),
            _note("3", "Calculus", "Used by [[neural networks]]"),
            _note("4", "Orphan", "Links to [[Nothing]]"),
        ]
        expected = {"1": {"2"}, "2": {"1", "3"}, "3": {"2"}, "4": set()}

        rng = random.Random(42)
        for _ in range(5):
            shuffled = [n.model_copy(deep=True) for n in notes]
            rng.shuffle(shuffled)
            recompute_backlinks(shuffled)
            for note in shuffled:
                assert set(note.backlinks) == expected[note.id]

        print("✅ Backlinks symmetric under reordering")


class TestBacklinkViews:
    """Tests for the backlink panel, context snippets and link graph"""

    def test_backlinks_for_excludes_self(self):
        """Test: a note mentioning its own title is not its own backlink in the panel"""
        a = _note("a", "Alpha", "I am [[Alpha]]")
        b = _note("b", "Beta", "See [[alpha]]")
        assert [n.id for n in backlinks_for(a, [a, b])] == ["b"]

    def test_panel_agrees_with_index_on_duplicate_titles(self):
        """Test: with two notes titled the same, only the first one is credited in both views"""
        first = _note("first", "Topic")
        second = _note("second", "topic")
        ref = _note("ref", "Ref", "About [[Topic]]")
        notes = [first, second, ref]
        recompute_backlinks(notes)

        assert first.backlinks == ["ref"]
        assert second.backlinks == []
        assert [n.id for n in backlinks_for(first, notes)] == ["ref"]
        assert backlinks_for(second, notes) == []

    def test_context_snippet(self):
        """Test: snippet surrounds the mention with ellipses on cut ends"""
        content = "A" * 60 + "[[Foo]]" + "B" * 60
        snippet = backlink_context(content, "foo")

        assert snippet.startswith("...")
        assert snippet.endswith("...")
        assert "[[Foo]]" in snippet

    def test_context_strips_tags(self):
        """Test: HTML tags become spaces; short content is not cut"""
        assert backlink_context("<p>See [[Foo]]</p>", "Foo") == " See [[Foo]] "
        assert backlink_context("<p>No mention</p>", "Foo") == ""

    def test_outgoing_references(self):
        """Test: references resolve to ids, unknown titles to None"""
        a = _note("a", "Alpha", "[[Beta]] [[Missing]]")
        b = _note("b", "Beta")
        assert outgoing_references(a, [a, b]) == [("Beta", "b"), ("Missing", None)]

    def test_link_graph(self):
        """Test: edges go from referencing to referenced note"""
        a = _note("a", "Alpha", "[[Beta]]")
        b = _note("b", "Beta", "[[Gamma]]")
        graph = build_link_graph([a, b])

        assert set(graph.nodes) == {"a", "b"}
        assert list(graph.edges) == [("a", "b")]
