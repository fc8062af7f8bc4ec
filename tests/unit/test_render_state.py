#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the renderer bookkeeping classes."""

import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from rfcxml.renderers.base import CitationKind, MatterPhase
from rfcxml.renderers.state import (
    AttributeQueue,
    CitationCollator,
    MatterStateMachine,
    MatterTransition,
    RenderState,
    SectionNestingTracker,
    merge_attributes,
    reference_filename,
)


@pytest.mark.unit
class TestAttributeQueue:
    """Test queuing and draining of block attributes."""

    def test_drain_returns_sets_in_order(self):
        """Test that drained attribute sets keep their queue order."""
        queue = AttributeQueue()
        queue.enqueue({"anchor": "intro"})
        queue.enqueue({"style": "numbers"})

        assert queue.drain_all() == [{"anchor": "intro"}, {"style": "numbers"}]

    def test_drain_clears_queue(self):
        """Test that attributes are handed out only once."""
        queue = AttributeQueue()
        queue.enqueue({"anchor": "intro"})
        queue.drain_all()

        assert queue.drain_all() == []
        assert len(queue) == 0

    def test_drain_empty_queue(self):
        """Test draining with nothing queued."""
        assert AttributeQueue().drain_all() == []

    def test_enqueue_copies_mapping(self):
        """Test that later changes to the caller's mapping do not leak in."""
        queue = AttributeQueue()
        attributes = {"anchor": "a"}
        queue.enqueue(attributes)
        attributes["anchor"] = "b"

        assert queue.drain_all() == [{"anchor": "a"}]

    def test_discard_counts_dropped_sets(self):
        """Test that discard reports how many sets were dropped."""
        queue = AttributeQueue()
        queue.enqueue({"a": "1"})
        queue.enqueue({"b": "2"})

        assert queue.discard() == 2
        assert queue.discard() == 0


@pytest.mark.unit
class TestMergeAttributes:
    """Test merging of attribute sets."""

    def test_last_value_wins(self):
        """Test that a later set overrides an earlier value."""
        assert merge_attributes({"anchor": "a"}, {"anchor": "b"}) == {"anchor": "b"}

    def test_first_position_is_kept(self):
        """Test that overriding keeps the attribute's original position."""
        merged = merge_attributes({"anchor": "a", "title": "t"}, {"style": "s", "anchor": "b"})

        assert list(merged) == ["anchor", "title", "style"]

    def test_no_sets(self):
        """Test merging nothing."""
        assert merge_attributes() == {}


@pytest.mark.unit
class TestSectionNestingTracker:
    """Test section open/close bookkeeping."""

    def test_deeper_heading_closes_nothing(self):
        """Test that descending one level opens without closing."""
        tracker = SectionNestingTracker()

        assert tracker.open_heading(1) == 0
        assert tracker.open_heading(2) == 0
        assert tracker.depth == 2

    def test_sibling_heading_closes_one(self):
        """Test that a heading at the current level closes its sibling."""
        tracker = SectionNestingTracker()
        tracker.open_heading(1)
        tracker.open_heading(2)

        assert tracker.open_heading(2) == 1
        assert tracker.depth == 2

    def test_one_two_two_one_scenario(self):
        """Test headings at levels 1, 2, 2, 1 leave one section open."""
        tracker = SectionNestingTracker()
        closes = [tracker.open_heading(level) for level in [1, 2, 2, 1]]

        assert closes == [0, 0, 1, 2]
        assert tracker.depth == 1
        assert tracker.flush_all() == 1

    def test_close_count_follows_depth_formula(self):
        """Test that a heading at level L closes depth - L + 1 sections."""
        tracker = SectionNestingTracker()
        for level in [1, 2, 3, 4]:
            tracker.open_heading(level)

        assert tracker.open_heading(2) == 4 - 2 + 1
        assert tracker.depth == 2

    def test_skipped_levels_close_only_open_sections(self):
        """Test that jumping from level 1 to 3 and back stays balanced."""
        tracker = SectionNestingTracker()
        tracker.open_heading(1)
        tracker.open_heading(3)

        assert tracker.depth == 2
        assert tracker.level == 3
        assert tracker.open_heading(2) == 1
        assert tracker.depth == 2

    def test_level_below_one_is_clamped(self, caplog):
        """Test that a level of 0 is treated as a top-level heading."""
        tracker = SectionNestingTracker()
        tracker.open_heading(1)

        with caplog.at_level(logging.DEBUG, logger="rfcxml"):
            assert tracker.open_heading(0) == 1
        assert tracker.level == 1
        assert "treated as 1" in caplog.text

    def test_flush_all_is_idempotent(self):
        """Test that flushing twice closes nothing the second time."""
        tracker = SectionNestingTracker()
        tracker.open_heading(1)
        tracker.open_heading(2)

        assert tracker.flush_all() == 2
        assert tracker.flush_all() == 0
        assert tracker.depth == 0
        assert tracker.level == 0

    @given(st.lists(st.integers(min_value=1, max_value=6), max_size=40))
    def test_opens_always_balance_closes(self, levels):
        """Test that opens equal closes after the final flush for any outline."""
        tracker = SectionNestingTracker()
        opened = closed = 0
        for level in levels:
            closed += tracker.open_heading(level)
            opened += 1
            assert closed <= opened
            assert tracker.depth == opened - closed
        closed += tracker.flush_all()

        assert opened == closed


@pytest.mark.unit
class TestMatterStateMachine:
    """Test front, main and back matter transitions."""

    def test_starts_in_front_matter(self):
        """Test the initial phase."""
        assert MatterStateMachine().phase == MatterPhase.FRONT

    def test_forward_transitions(self):
        """Test front to main to back."""
        machine = MatterStateMachine()

        assert machine.advance_to(MatterPhase.MAIN) == MatterTransition(MatterPhase.FRONT, MatterPhase.MAIN)
        assert machine.advance_to(MatterPhase.BACK) == MatterTransition(MatterPhase.MAIN, MatterPhase.BACK)
        assert machine.phase == MatterPhase.BACK

    def test_front_to_back_skips_main(self):
        """Test that main matter is optional."""
        machine = MatterStateMachine()

        assert machine.advance_to(MatterPhase.BACK) == MatterTransition(MatterPhase.FRONT, MatterPhase.BACK)

    def test_same_phase_is_no_op(self):
        """Test that re-entering the current phase produces no transition."""
        machine = MatterStateMachine()
        machine.advance_to(MatterPhase.BACK)

        assert machine.advance_to(MatterPhase.BACK) is None
        assert machine.phase == MatterPhase.BACK

    def test_backward_transition_is_ignored(self, caplog):
        """Test that moving backwards is refused with a warning."""
        machine = MatterStateMachine()
        machine.advance_to(MatterPhase.BACK)

        with caplog.at_level(logging.WARNING, logger="rfcxml"):
            assert machine.advance_to(MatterPhase.MAIN) is None
        assert machine.phase == MatterPhase.BACK
        assert "back matter back to main matter" in caplog.text

    @given(st.lists(st.sampled_from(list(MatterPhase)), max_size=20))
    def test_transitions_are_monotonic(self, requested):
        """Test that emitted transitions form a subsequence of front, main, back."""
        machine = MatterStateMachine()
        entered = [MatterPhase.FRONT]
        for phase in requested:
            transition = machine.advance_to(phase)
            if transition is not None:
                assert transition.previous == entered[-1]
                entered.append(transition.current)

        assert entered == sorted(set(entered))


@pytest.mark.unit
class TestReferenceFilename:
    """Test derivation of reference filenames from citation targets."""

    def test_rfc_target(self):
        """Test RFC targets use the RFC reference library naming."""
        assert reference_filename("RFC2119") == "reference.RFC.2119.xml"

    def test_internet_draft_target(self):
        """Test Internet-Draft targets keep the I-D prefix."""
        assert reference_filename("I-D.ietf-foo-bar") == "reference.I-D.ietf-foo-bar.xml"

    def test_other_target_is_encoded(self):
        """Test that dots and unsafe characters are percent-encoded."""
        assert reference_filename("W3C.REC-xml") == "reference.W3C%2EREC-xml.xml"
        assert reference_filename("a/b c") == "reference.a%2Fb%20c.xml"

    def test_custom_prefix(self):
        """Test that the prefix is configurable."""
        assert reference_filename("RFC8174", prefix="bib/reference.") == "bib/reference.RFC.8174.xml"

    def test_lookalike_targets_do_not_collide(self):
        """Test targets that differ only in encoding-relevant characters."""
        targets = ["RFC.2119", "RFC2119", "RFC%2E2119", "I-D.x", "I-D%2Ex", "I-D.x.y", "I-D.x%2Ey"]
        names = {reference_filename(t) for t in targets}

        assert len(names) == len(targets)

    @given(st.text(min_size=1, max_size=20), st.text(min_size=1, max_size=20))
    def test_distinct_targets_give_distinct_names(self, first, second):
        """Test that derivation is collision-free."""
        if first != second:
            assert reference_filename(first) != reference_filename(second)


@pytest.mark.unit
class TestCitationCollator:
    """Test collection and grouping of citations."""

    def test_record_deduplicates_targets(self):
        """Test that a target is recorded once."""
        collator = CitationCollator()
        collator.record("RFC2119", CitationKind.NORMATIVE)
        collator.record("RFC2119", CitationKind.NORMATIVE)

        assert len(collator) == 1
        assert "RFC2119" in collator

    def test_insertion_order(self):
        """Test that records keep first-citation order by default."""
        collator = CitationCollator()
        for target in ["RFC8174", "RFC2119", "RFC0001"]:
            collator.record(target, CitationKind.INFORMATIVE)

        assert [r.target_id for r in collator.records()] == ["RFC8174", "RFC2119", "RFC0001"]

    def test_sorted_order(self):
        """Test sorting by target identifier."""
        collator = CitationCollator(order="sorted")
        for target in ["RFC8174", "RFC2119", "I-D.b"]:
            collator.record(target, CitationKind.INFORMATIVE)

        assert [r.target_id for r in collator.records()] == ["I-D.b", "RFC2119", "RFC8174"]

    def test_groups_by_kind(self):
        """Test partitioning into informative and normative groups."""
        collator = CitationCollator()
        collator.record("RFC2119", CitationKind.NORMATIVE)
        collator.record("RFC7322", CitationKind.INFORMATIVE)

        assert [r.target_id for r in collator.group(CitationKind.NORMATIVE)] == ["RFC2119"]
        assert [r.target_id for r in collator.group(CitationKind.INFORMATIVE)] == ["RFC7322"]

    def test_conflict_last_wins(self, caplog):
        """Test that the latest kind wins under the default policy."""
        collator = CitationCollator()
        collator.record("RFC2119", CitationKind.INFORMATIVE)

        with caplog.at_level(logging.WARNING, logger="rfcxml"):
            record = collator.record("RFC2119", CitationKind.NORMATIVE)
        assert record.kind == CitationKind.NORMATIVE
        assert "RFC2119" in caplog.text

    def test_conflict_first_wins(self):
        """Test the first-wins policy."""
        collator = CitationCollator(conflict="first")
        collator.record("RFC2119", CitationKind.INFORMATIVE)
        record = collator.record("RFC2119", CitationKind.NORMATIVE)

        assert record.kind == CitationKind.INFORMATIVE

    def test_conflict_keeps_position(self):
        """Test that changing a record's kind does not move it."""
        collator = CitationCollator()
        collator.record("A", CitationKind.INFORMATIVE)
        collator.record("B", CitationKind.INFORMATIVE)
        collator.record("A", CitationKind.NORMATIVE)

        assert [r.target_id for r in collator.records()] == ["A", "B"]

    def test_later_filename_fills_missing(self):
        """Test that an explicit filename given later is kept."""
        collator = CitationCollator()
        collator.record("X", CitationKind.INFORMATIVE)
        collator.record("X", CitationKind.INFORMATIVE, "refs/x.xml")

        assert collator.records()[0].filename == "refs/x.xml"

    def test_clear(self):
        """Test forgetting all records."""
        collator = CitationCollator()
        collator.record("X", CitationKind.INFORMATIVE)
        collator.clear()

        assert len(collator) == 0

    @given(
        st.lists(
            st.tuples(st.sampled_from(["RFC1", "RFC2", "RFC3", "I-D.a", "W3C.x"]), st.sampled_from(list(CitationKind))),
            max_size=30,
        )
    )
    def test_groups_cover_distinct_targets(self, citations):
        """Test that the two groups together hold each distinct target exactly once."""
        collator = CitationCollator()
        for target, kind in citations:
            collator.record(target, kind)

        grouped = [r.target_id for r in collator.group(CitationKind.INFORMATIVE)]
        grouped += [r.target_id for r in collator.group(CitationKind.NORMATIVE)]

        assert sorted(grouped) == sorted({target for target, _ in citations})


@pytest.mark.unit
class TestRenderState:
    """Test the state bundle."""

    def test_defaults(self):
        """Test a fresh render state."""
        state = RenderState()

        assert state.section_depth == 0
        assert state.matter_phase == MatterPhase.FRONT
        assert state.title_block is None
        assert not state.root_open
        assert len(state.attributes) == 0
        assert len(state.citations) == 0

    def test_states_do_not_share_members(self):
        """Test that separate renders get separate bookkeeping."""
        first, second = RenderState(), RenderState()
        first.sections.open_heading(1)
        first.attributes.enqueue({"a": "b"})

        assert second.section_depth == 0
        assert len(second.attributes) == 0
