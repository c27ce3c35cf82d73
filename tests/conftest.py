"""
Pytest fixtures for the chunking tests.
"""

import pytest

from smart_chunking import ChunkingOptions, RawDocument, TokenEstimator


def make_document_text(paragraphs: int = 12, sentences: int = 6) -> str:
    """Deterministic multi-paragraph text with numbered sentences."""
    blocks = []
    for p in range(paragraphs):
        blocks.append(" ".join(
            f"Paragraph {p} sentence {s} explains a detail of the system."
            for s in range(sentences)
        ))
    return "\n\n".join(blocks)


def strip_overlap(chunk) -> str:
    """Chunk content without the prefix copied from the previous chunk."""
    return chunk.content[len(chunk.overlap_text):]


def non_whitespace(text: str) -> str:
    return "".join(text.split())


@pytest.fixture
def estimator():
    """Default character-ratio estimator."""
    return TokenEstimator()


@pytest.fixture
def document_text():
    return make_document_text()


@pytest.fixture
def small_options():
    """Options small enough to force several chunks on document_text."""
    return ChunkingOptions(max_tokens=120, min_tokens=30, overlap_tokens=20)


@pytest.fixture
def sample_document(document_text):
    return RawDocument(
        text=document_text,
        file_name="uploads/system_overview.pdf",
        file_type="application/pdf",
        word_count=len(document_text.split()),
        page_count=3,
    )
