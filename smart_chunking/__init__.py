"""
Smart Chunking - Paragraph-aware chunking for RAG ingestion

Splits extracted document text into bounded, overlapping chunks that keep
paragraph and sentence boundaries intact, merges undersized fragments and
interleaves image descriptions at their document position.

Quick Start:
    from smart_chunking import DocumentChunker, ChunkingOptions, ImageReference

    chunker = DocumentChunker(ChunkingOptions(max_tokens=800, min_tokens=100))
    chunks = chunker.chunk(
        text,
        image_references=[ImageReference(description="A bar chart", position=120)],
    )
    for chunk in chunks:
        print(chunk.chunk_index, chunk.token_count, chunk.source_type.value)
"""

__version__ = "1.0.0"

from .chunker import DocumentChunker, chunk_text, make_document_id
from .service import ChunkingService
from .config import ChunkingServiceConfig
from .models import (
    Chunk,
    ChunkingOptions,
    ChunkingResult,
    ChunkingStats,
    ImageReference,
    RawDocument,
    SourceType,
    reindex,
)
from .exceptions import (
    ChunkingError,
    ChunkValidationError,
    ConfigurationError,
    format_error_chain,
)
from .boundaries import TextSpan, split_paragraphs, split_sentences, split_words
from .images import ImageInterleaver, detect_image_references, references_from_text
from .token_counter import EstimationMethod, TokenEstimator, count_tokens

__all__ = [
    "__version__",
    # Orchestration
    "DocumentChunker",
    "chunk_text",
    "make_document_id",
    "ChunkingService",
    "ChunkingServiceConfig",
    # Models
    "Chunk",
    "ChunkingOptions",
    "ChunkingResult",
    "ChunkingStats",
    "ImageReference",
    "RawDocument",
    "SourceType",
    "reindex",
    # Exceptions
    "ChunkingError",
    "ChunkValidationError",
    "ConfigurationError",
    "format_error_chain",
    # Building blocks
    "TextSpan",
    "split_paragraphs",
    "split_sentences",
    "split_words",
    "ImageInterleaver",
    "detect_image_references",
    "references_from_text",
    "EstimationMethod",
    "TokenEstimator",
    "count_tokens",
]
