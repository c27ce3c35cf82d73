"""
Chunk Packer - Greedy token-budget packing of boundary units

Accumulates paragraphs into segments whose estimated token count stays
within max_tokens. A unit that is too large on its own is subdivided one
level finer (paragraph -> sentences -> words) and packed again at that
level. A single word longer than the budget is the only thing ever emitted
over budget.

The running size of the pending units is kept incrementally; the reported
token count is still the estimate of the exact segment text.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .boundaries import TextSpan, split_paragraphs, split_sentences, split_words
from .token_counter import TokenEstimator

logger = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"
INLINE_SEPARATOR = " "

# Subdivision levels, coarsest first.
_PARAGRAPH, _SENTENCE, _WORD = 0, 1, 2


@dataclass(frozen=True)
class Segment:
    """
    An intermediate chunk travelling through the pipeline.

    body is the text taken from the source; overlap is the context prefix
    added by the overlap stage. token_count always describes content.
    """

    body: str
    token_count: int
    start: Optional[int]
    end: Optional[int]
    paragraph_index: Optional[int] = None
    overlap: str = ""

    @property
    def content(self) -> str:
        if self.overlap:
            return f"{self.overlap} {self.body}"
        return self.body


class ChunkPacker:
    """Packs boundary units into segments bounded by max_tokens."""

    def __init__(self, max_tokens: int, estimator: TokenEstimator):
        self.max_tokens = max_tokens
        self.estimator = estimator

    def pack(self, text: str) -> list[Segment]:
        """
        Pack text paragraph by paragraph.

        Args:
            text: The full document text.

        Returns:
            Segments in document order, without overlap.
        """
        paragraphs = split_paragraphs(text)
        segments = self._pack_level(paragraphs, _PARAGRAPH)
        logger.debug(
            f"Packed {len(paragraphs)} paragraphs into {len(segments)} segments"
        )
        return segments

    def pack_words(self, text: str) -> list[Segment]:
        """Pack text at word granularity, ignoring paragraph structure."""
        return self._pack_level(split_words(text), _WORD)

    # -------------------------------------------------------------------------
    # Internal methods
    # -------------------------------------------------------------------------

    def _pack_level(self, units: list[TextSpan], level: int) -> list[Segment]:
        separator = PARAGRAPH_SEPARATOR if level == _PARAGRAPH else INLINE_SEPARATOR
        separator_size = self.estimator.measure(separator)
        segments: list[Segment] = []
        pending: list[TextSpan] = []
        # Raw measure of separator.join(pending), kept incrementally
        pending_size = 0

        for unit in units:
            unit_size = self.estimator.measure(unit.text)
            if self.estimator.tokens_for(unit_size) > self.max_tokens:
                if pending:
                    segments.append(self._make_segment(pending, separator))
                    pending, pending_size = [], 0
                segments.extend(self._split_oversized(unit, level))
                continue

            candidate_size = pending_size + separator_size + unit_size if pending else unit_size
            if pending and self.estimator.tokens_for(candidate_size) > self.max_tokens:
                segments.append(self._make_segment(pending, separator))
                pending, pending_size = [unit], unit_size
            else:
                pending.append(unit)
                pending_size = candidate_size

        if pending:
            segments.append(self._make_segment(pending, separator))

        return segments

    def _split_oversized(self, unit: TextSpan, level: int) -> list[Segment]:
        if level == _PARAGRAPH:
            return self._pack_level(split_sentences(unit), _SENTENCE)
        if level == _SENTENCE:
            return self._pack_level(split_words(unit), _WORD)

        logger.warning(
            f"Word of {self.estimator.estimate(unit.text)} tokens exceeds "
            f"max_tokens={self.max_tokens}; emitting it as its own chunk"
        )
        return [self._make_segment([unit], INLINE_SEPARATOR)]

    def _make_segment(self, units: list[TextSpan], separator: str) -> Segment:
        body = separator.join(u.text for u in units)
        return Segment(
            body=body,
            token_count=self.estimator.estimate(body),
            start=units[0].start,
            end=units[-1].end,
            paragraph_index=units[0].paragraph_index,
        )
