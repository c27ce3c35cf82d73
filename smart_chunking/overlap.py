"""
Overlap Weaver - Trailing-context prefixes between consecutive chunks

Every segment except the first is prefixed with the last words of the
previous packed segment, as many as fit within overlap_tokens. The overlap
is counted in the segment's token_count but is not checked against
max_tokens unless strict mode is enabled.
"""

import dataclasses
import logging
from typing import Optional

from .packer import Segment
from .token_counter import TokenEstimator

logger = logging.getLogger(__name__)


class OverlapWeaver:
    """Adds bounded trailing context from each segment to the next."""

    def __init__(
        self,
        overlap_tokens: int,
        estimator: TokenEstimator,
        max_tokens: Optional[int] = None,
    ):
        """
        Args:
            overlap_tokens: Budget for the copied prefix.
            estimator: Estimator shared with the rest of the run.
            max_tokens: If set (strict mode), overlap words are dropped from
                the front until the overlapped segment fits this budget.
        """
        self.overlap_tokens = overlap_tokens
        self.estimator = estimator
        self.max_tokens = max_tokens

    def weave(self, segments: list[Segment]) -> list[Segment]:
        if self.overlap_tokens <= 0 or len(segments) < 2:
            return list(segments)

        woven = [segments[0]]
        for previous, current in zip(segments, segments[1:]):
            overlap = self.overlap_from(previous.body)
            if overlap and self.max_tokens is not None:
                overlap = self._fit_to_budget(overlap, current.body)
            woven.append(self._with_overlap(current, overlap))
        return woven

    def overlap_from(self, text: str) -> str:
        """
        Collect whole words from the end of text within overlap_tokens.

        Returns:
            The collected words in original order, joined by spaces.
        """
        words = text.split()
        space = self.estimator.measure(" ")
        size = 0
        start = len(words)
        for i in range(len(words) - 1, -1, -1):
            candidate = self.estimator.measure(words[i])
            if start < len(words):
                candidate += space + size
            if self.estimator.tokens_for(candidate) > self.overlap_tokens:
                break
            size = candidate
            start = i
        return " ".join(words[start:])

    def _fit_to_budget(self, overlap: str, body: str) -> str:
        words = overlap.split()
        space = self.estimator.measure(" ")
        # Measure of " ".join(words) + " " + body
        size = sum(self.estimator.measure(w) + space for w in words) + self.estimator.measure(body)
        start = 0
        while start < len(words) and self.estimator.tokens_for(size) > self.max_tokens:
            size -= self.estimator.measure(words[start]) + space
            start += 1
        if start:
            logger.debug(f"Strict overlap trimmed to {len(words) - start} words")
        return " ".join(words[start:])

    def _with_overlap(self, segment: Segment, overlap: str) -> Segment:
        if not overlap:
            return segment
        updated = dataclasses.replace(segment, overlap=overlap)
        return dataclasses.replace(
            updated, token_count=self.estimator.estimate(updated.content)
        )
