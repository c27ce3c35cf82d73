"""
Boundary Tokenizer for the Chunking Pipeline

Decomposes text into ordered, non-overlapping boundary units at three
granularities: paragraphs, sentences and words. Every unit remembers its
character offsets in the original text, so chunks built from units can be
traced back to their source.

Design:
- Paragraphs are maximal runs of non-blank lines; one or more blank lines
  separate them. Text with only single newlines is scanned line by line
  with the same rule, so it stays one paragraph.
- Sentences end at a run of terminal punctuation (.!?), optionally followed
  by closing quotes or brackets, that is followed by whitespace or the end
  of the text. Splitting only at whitespace means no word is ever cut.
- Words are runs of non-whitespace characters.
- No external dependencies (no spaCy, no NLTK)

Usage:
    from smart_chunking.boundaries import split_paragraphs, split_sentences

    paragraphs = split_paragraphs("First paragraph.\\n\\nSecond one.")
    sentences = split_sentences(paragraphs[0])
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

_SENTENCE_END_PATTERN = re.compile(
    r"[.!?]+[\"'”’\)\]]*(?=\s|\Z)"
)

_WORD_PATTERN = re.compile(r"\S+")


@dataclass(frozen=True)
class TextSpan:
    """A boundary unit and its [start, end) offsets in the source text."""

    text: str
    start: int
    end: int
    paragraph_index: Optional[int] = None


def _as_span(text: Union[str, TextSpan, None]) -> Optional[TextSpan]:
    if text is None:
        return None
    if isinstance(text, TextSpan):
        return text
    return TextSpan(text=text, start=0, end=len(text))


def _sub_span(span: TextSpan, lo: int, hi: int) -> Optional[TextSpan]:
    """Slice span.text[lo:hi], trimming surrounding whitespace."""
    raw = span.text[lo:hi]
    stripped = raw.strip()
    if not stripped:
        return None
    start = span.start + lo + (len(raw) - len(raw.lstrip()))
    return TextSpan(
        text=stripped,
        start=start,
        end=start + len(stripped),
        paragraph_index=span.paragraph_index,
    )


def split_paragraphs(text: Optional[str]) -> list[TextSpan]:
    """
    Split text into paragraphs separated by blank lines.

    Args:
        text: Plain text as produced by the extraction step.

    Returns:
        Paragraph spans in document order, each with its paragraph_index
        set. Whitespace-only input returns an empty list.
    """
    if not text or not text.strip():
        return []

    paragraphs: list[TextSpan] = []
    start: Optional[int] = None
    end = 0
    offset = 0

    for line in text.splitlines(keepends=True):
        if line.strip():
            if start is None:
                start = offset + (len(line) - len(line.lstrip()))
            end = offset + len(line.rstrip())
        elif start is not None:
            paragraphs.append(
                TextSpan(text[start:end], start, end, len(paragraphs))
            )
            start = None
        offset += len(line)

    if start is not None:
        paragraphs.append(TextSpan(text[start:end], start, end, len(paragraphs)))

    return paragraphs


def split_sentences(text: Union[str, TextSpan, None]) -> list[TextSpan]:
    """
    Split a paragraph into sentences, keeping terminal punctuation attached.

    A trailing fragment without terminal punctuation becomes its own
    sentence. Offsets are relative to the text the span came from.

    Args:
        text: A paragraph span, or a plain string (offsets then start at 0).

    Returns:
        Sentence spans in order. Empty/whitespace input returns [].
    """
    span = _as_span(text)
    if span is None or not span.text.strip():
        return []

    sentences: list[TextSpan] = []
    cursor = 0
    for match in _SENTENCE_END_PATTERN.finditer(span.text):
        sentence = _sub_span(span, cursor, match.end())
        if sentence:
            sentences.append(sentence)
        cursor = match.end()

    tail = _sub_span(span, cursor, len(span.text))
    if tail:
        sentences.append(tail)

    return sentences


def split_words(text: Union[str, TextSpan, None]) -> list[TextSpan]:
    """Split text into whitespace-delimited word spans."""
    span = _as_span(text)
    if span is None:
        return []
    return [
        TextSpan(
            text=m.group(),
            start=span.start + m.start(),
            end=span.start + m.end(),
            paragraph_index=span.paragraph_index,
        )
        for m in _WORD_PATTERN.finditer(span.text)
    ]
