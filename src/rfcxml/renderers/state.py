#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/rfcxml/renderers/state.py
"""Structural bookkeeping for callback renderers.

A renderer sees its document as a flat sequence of calls but has to emit a
properly nested tree. The classes in this module hold everything that must
survive between calls:

- AttributeQueue: attributes waiting for the next block-level element
- SectionNestingTracker: which sections are open and what a new heading closes
- MatterStateMachine: front, main and back matter, strictly in that order
- CitationCollator: distinct citation targets grouped for the reference sections

They only do bookkeeping and never write output; the renderer turns their
answers into markup. RenderState bundles one of each for a single render.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote

from rfcxml.ast.nodes import TitleBlock
from rfcxml.constants import (
    DEFAULT_CITATION_CONFLICT,
    DEFAULT_CITATION_ORDER,
    DEFAULT_REFERENCE_PREFIX,
    CitationConflictPolicy,
    CitationOrder,
)
from rfcxml.renderers.base import AttributeSet, CitationKind, MatterPhase

logger = logging.getLogger(__name__)

_RFC_TARGET = re.compile(r"RFC(\d+)")
_DRAFT_TARGET = re.compile(r"I-D\.(.+)", re.DOTALL)


class AttributeQueue:
    """Attributes attached to the next block-level element.

    Attribute sets are queued in the order they appear in the source and
    handed out exactly once: ``drain_all`` returns everything queued since
    the previous drain and leaves the queue empty.
    """

    def __init__(self) -> None:
        self._pending: list[AttributeSet] = []

    def enqueue(self, attributes: AttributeSet) -> None:
        """Append one attribute set."""
        self._pending.append(dict(attributes))

    def drain_all(self) -> list[AttributeSet]:
        """Return and clear all queued attribute sets."""
        drained, self._pending = self._pending, []
        return drained

    def discard(self) -> int:
        """Drop anything still queued; returns how many sets were dropped."""
        count = len(self._pending)
        self._pending = []
        return count

    def __len__(self) -> int:
        return len(self._pending)


def merge_attributes(*attribute_sets: AttributeSet) -> dict[str, str]:
    """Merge attribute sets into one ordered mapping.

    A name keeps the position of its first occurrence and the value of its
    last one.

    Examples
    --------
        >>> merge_attributes({"anchor": "a", "title": "x"}, {"anchor": "b"})
        {'anchor': 'b', 'title': 'x'}

    """
    merged: dict[str, str] = {}
    for attributes in attribute_sets:
        for name, value in attributes.items():
            merged[name] = str(value)
    return merged


class SectionNestingTracker:
    """Open sections, tracked by the outline level that opened each one.

    ``depth`` is always the number of section containers open in the
    output. A heading closes every open section at its own level or
    deeper and then opens one new section, so in a well formed outline a
    heading at level ``L`` with ``depth >= L`` closes ``depth - L + 1``
    sections. Outlines that skip levels (1 then 3) still balance, because
    only containers that were actually opened get closed.
    """

    def __init__(self) -> None:
        self._levels: list[int] = []

    @property
    def depth(self) -> int:
        """Number of currently open section containers."""
        return len(self._levels)

    @property
    def level(self) -> int:
        """Outline level of the innermost open section, 0 when none is open."""
        return self._levels[-1] if self._levels else 0

    def open_heading(self, level: int) -> int:
        """Register a heading and return how many sections it closes.

        Levels below 1 are treated as 1.
        """
        if level < 1:
            logger.debug("Heading level %d treated as 1", level)
            level = 1
        closes = 0
        while self._levels and self._levels[-1] >= level:
            self._levels.pop()
            closes += 1
        self._levels.append(level)
        return closes

    def flush_all(self) -> int:
        """Close every open section; returns how many were open."""
        closes = len(self._levels)
        self._levels.clear()
        return closes


@dataclass(frozen=True)
class MatterTransition:
    """A change of document matter."""

    previous: MatterPhase
    current: MatterPhase


class MatterStateMachine:
    """Front, main and back matter, entered in that order only.

    The machine starts in front matter. Main matter is optional, so front
    may go straight to back; nothing ever moves backwards.
    """

    def __init__(self) -> None:
        self._phase = MatterPhase.FRONT

    @property
    def phase(self) -> MatterPhase:
        """The matter output currently belongs to."""
        return self._phase

    def advance_to(self, phase: MatterPhase) -> Optional[MatterTransition]:
        """Move to ``phase``.

        Returns
        -------
        MatterTransition or None
            The transition to emit, or None when ``phase`` is the current
            matter or lies behind it.

        """
        if phase == self._phase:
            return None
        if phase < self._phase:
            logger.warning(
                "Ignoring switch from %s matter back to %s matter",
                self._phase.name.lower(),
                phase.name.lower(),
            )
            return None
        transition = MatterTransition(previous=self._phase, current=phase)
        self._phase = phase
        return transition


@dataclass
class CitationRecord:
    """One distinct cited document."""

    target_id: str
    kind: CitationKind
    filename: Optional[str] = None


def reference_filename(target_id: str, prefix: str = DEFAULT_REFERENCE_PREFIX) -> str:
    """Derive the reference file included for a citation target.

    RFCs and Internet-Drafts get the names used by the xml2rfc reference
    libraries; any other target is percent-encoded. Encoding escapes ``.``
    and ``%`` as well, so distinct targets always map to distinct names.

    Parameters
    ----------
    target_id : str
        Citation target identifier
    prefix : str, default "reference."
        Filename prefix

    Returns
    -------
    str
        Reference filename

    Examples
    --------
        >>> reference_filename("RFC2119")
        'reference.RFC.2119.xml'
        >>> reference_filename("I-D.ietf-foo-bar")
        'reference.I-D.ietf-foo-bar.xml'
        >>> reference_filename("W3C.REC-xml")
        'reference.W3C%2EREC-xml.xml'

    """
    rfc = _RFC_TARGET.fullmatch(target_id)
    if rfc:
        return f"{prefix}RFC.{rfc.group(1)}.xml"
    draft = _DRAFT_TARGET.fullmatch(target_id)
    if draft:
        return f"{prefix}I-D.{_encode_target(draft.group(1))}.xml"
    return f"{prefix}{_encode_target(target_id)}.xml"


def _encode_target(text: str) -> str:
    return quote(text, safe="-_").replace(".", "%2E").replace("~", "%7E")


class CitationCollator:
    """Distinct citation targets, grouped for the reference sections.

    Parameters
    ----------
    order : {"insertion", "sorted"}, default "insertion"
        Order of records inside each group
    conflict : {"last", "first"}, default "last"
        Which kind wins when one target is recorded with both kinds

    """

    def __init__(
        self,
        order: CitationOrder = DEFAULT_CITATION_ORDER,
        conflict: CitationConflictPolicy = DEFAULT_CITATION_CONFLICT,
    ) -> None:
        self.order = order
        self.conflict = conflict
        self._records: dict[str, CitationRecord] = {}

    def record(self, target_id: str, kind: CitationKind, filename: Optional[str] = None) -> CitationRecord:
        """Record a citation of ``target_id``.

        Recording an already known target keeps its position. A different
        kind is resolved by the conflict policy; a filename given later
        fills in one that was missing.
        """
        existing = self._records.get(target_id)
        if existing is None:
            record = CitationRecord(target_id=target_id, kind=kind, filename=filename or None)
            self._records[target_id] = record
            return record

        if existing.kind != kind:
            logger.warning(
                "Citation %s is both %s and %s; keeping %s (policy: %s)",
                target_id,
                existing.kind.value,
                kind.value,
                kind.value if self.conflict == "last" else existing.kind.value,
                self.conflict,
            )
            if self.conflict == "last":
                existing.kind = kind
        if filename and not existing.filename:
            existing.filename = filename
        return existing

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, target_id: object) -> bool:
        return target_id in self._records

    def records(self) -> list[CitationRecord]:
        """All records, in the configured order."""
        records = list(self._records.values())
        if self.order == "sorted":
            records.sort(key=lambda r: r.target_id)
        return records

    def group(self, kind: CitationKind) -> list[CitationRecord]:
        """Records of one kind, in the configured order."""
        return [r for r in self.records() if r.kind == kind]

    def clear(self) -> None:
        """Forget every record."""
        self._records.clear()


@dataclass
class RenderState:
    """Everything a renderer remembers between calls for one document.

    Parameters
    ----------
    attributes : AttributeQueue
        Attributes waiting for the next block
    sections : SectionNestingTracker
        Open sections
    matter : MatterStateMachine
        Current document matter
    citations : CitationCollator
        Recorded citations
    title_block : TitleBlock or None
        Title metadata, set at most once
    root_open : bool
        Whether the document root and front matter containers were written

    """

    attributes: AttributeQueue = field(default_factory=AttributeQueue)
    sections: SectionNestingTracker = field(default_factory=SectionNestingTracker)
    matter: MatterStateMachine = field(default_factory=MatterStateMachine)
    citations: CitationCollator = field(default_factory=CitationCollator)
    title_block: Optional[TitleBlock] = None
    root_open: bool = False

    @property
    def section_depth(self) -> int:
        """Number of open section containers."""
        return self.sections.depth

    @property
    def matter_phase(self) -> MatterPhase:
        """Current document matter."""
        return self.matter.phase


__all__ = [
    "AttributeQueue",
    "CitationCollator",
    "CitationRecord",
    "MatterStateMachine",
    "MatterTransition",
    "RenderState",
    "SectionNestingTracker",
    "merge_attributes",
    "reference_filename",
]
