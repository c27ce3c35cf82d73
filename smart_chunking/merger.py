"""
Chunk Merger - Removes undersized segments by merging forward

Scans left to right. A segment below min_tokens absorbs the following
segments while the merged content still fits max_tokens. When the next
merge would exceed max_tokens, merging stops and the undersized segment
is kept as-is (an unavoidable fragment, e.g. the last one of a document).

Absorbed segments contribute only their body: their overlap prefix was
copied from text that is already part of the merged segment. Token counts
are re-estimated from the merged content after every merge.
"""

import dataclasses
import logging

from .packer import PARAGRAPH_SEPARATOR, Segment
from .token_counter import TokenEstimator

logger = logging.getLogger(__name__)


class ChunkMerger:
    """Merges segments that fall below the min_tokens floor."""

    def __init__(self, min_tokens: int, max_tokens: int, estimator: TokenEstimator):
        self.min_tokens = min_tokens
        self.max_tokens = max_tokens
        self.estimator = estimator

    def merge(self, segments: list[Segment]) -> list[Segment]:
        merged: list[Segment] = []
        i = 0

        while i < len(segments):
            current = segments[i]

            while current.token_count < self.min_tokens and i + 1 < len(segments):
                combined = self._combine(current, segments[i + 1])
                if combined.token_count > self.max_tokens:
                    break
                current = combined
                i += 1

            merged.append(current)
            i += 1

        if len(merged) != len(segments):
            logger.debug(f"Merged {len(segments)} segments into {len(merged)}")
        return merged

    def _combine(self, first: Segment, second: Segment) -> Segment:
        body = first.body + PARAGRAPH_SEPARATOR + second.body
        combined = dataclasses.replace(first, body=body, end=second.end)
        return dataclasses.replace(
            combined, token_count=self.estimator.estimate(combined.content)
        )
