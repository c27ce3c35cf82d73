"""
Token Estimator for the Chunking Pipeline

Token counts are heuristic estimates, not tokenizer output. Two ratios are
supported:

- characters: ceil(len(text) / 4)
- words:      ceil(word_count(text) * 1.33)

A single TokenEstimator is created per chunking run and passed to every
stage, so packing, overlap, merging and image folding all budget against
the same numbers.

Usage:
    from smart_chunking.token_counter import TokenEstimator, EstimationMethod

    estimator = TokenEstimator(EstimationMethod.WORDS)
    n = estimator.estimate("This is an example sentence.")
"""

from dataclasses import dataclass
from enum import Enum

CHARS_PER_TOKEN = 4

# 1.33 tokens per word as an integer ratio: 100 words are exactly 133 tokens.
_TOKENS_PER_HUNDRED_WORDS = 133


class EstimationMethod(str, Enum):
    """Heuristic used to approximate token counts."""

    CHARACTERS = "characters"
    WORDS = "words"


def word_count(text: str) -> int:
    """Number of whitespace-separated words in text."""
    if not text:
        return 0
    return len(text.split())


@dataclass(frozen=True)
class TokenEstimator:
    """
    Deterministic, monotonic token-count approximation.

    An estimate is a ceiling ratio over a raw measure (characters or
    words). Measures are additive over whitespace joins:
    measure(a + sep + b) == measure(a) + measure(sep) + measure(b), which
    lets callers keep a running total instead of re-measuring joined text.
    """

    method: EstimationMethod = EstimationMethod.CHARACTERS

    def measure(self, text: str) -> int:
        """Raw size of text: its length, or its word count."""
        if not text:
            return 0
        if self.method is EstimationMethod.WORDS:
            return word_count(text)
        return len(text)

    def tokens_for(self, measure: int) -> int:
        """Apply the ceiling ratio to a raw measure."""
        if self.method is EstimationMethod.WORDS:
            return -(-measure * _TOKENS_PER_HUNDRED_WORDS // 100)
        return -(-measure // CHARS_PER_TOKEN)

    def estimate(self, text: str) -> int:
        """
        Estimate the number of tokens in a text string.

        Args:
            text: The text to measure.

        Returns:
            Estimated token count; 0 for empty text.
        """
        return self.tokens_for(self.measure(text))

    def estimate_batch(self, texts: list[str]) -> list[int]:
        """Estimate tokens for a list of texts, one count per input."""
        return [self.estimate(t) for t in texts]


_default_estimator = TokenEstimator()


def count_tokens(text: str) -> int:
    """Estimate tokens with the default (character-ratio) estimator."""
    return _default_estimator.estimate(text)


def count_tokens_batch(texts: list[str]) -> list[int]:
    """Batch form of count_tokens."""
    return _default_estimator.estimate_batch(texts)
