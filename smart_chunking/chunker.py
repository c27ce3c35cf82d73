"""
Document Chunker - Core chunking logic for the RAG pipeline

Takes extracted plain text (and optionally captioned images) and produces
an ordered list of bounded, overlapping, paragraph-aware chunks.

Algorithm:
1. Split the text into paragraphs (blank-line separated).
2. Greedily pack paragraphs into segments up to max_tokens; oversized
   paragraphs are split into sentences, oversized sentences into words.
3. Prefix every segment but the first with trailing words of its
   predecessor (overlap).
4. Merge segments below min_tokens with their neighbours.
5. Fold image descriptions into the chunk at their position, or insert
   them as standalone chunks.
6. Assign dense chunk indices.

Each stage returns a new list; the same TokenEstimator is used throughout.

Usage:
    from smart_chunking import DocumentChunker, ChunkingOptions

    chunker = DocumentChunker(ChunkingOptions(max_tokens=800))
    chunks = chunker.chunk(text, image_references=references)
    print(DocumentChunker.stats(chunks))
"""

import logging
from pathlib import Path
from typing import Optional

from .images import ImageInterleaver
from .merger import ChunkMerger
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
from .overlap import OverlapWeaver
from .packer import ChunkPacker, Segment
from .token_counter import TokenEstimator

logger = logging.getLogger(__name__)


class DocumentChunker:
    """
    Splits extracted document text into retrieval-ready chunks.

    Holds only configuration; a single instance can be shared between
    threads.
    """

    def __init__(
        self,
        options: Optional[ChunkingOptions] = None,
        estimator: Optional[TokenEstimator] = None,
    ):
        self.options = options or ChunkingOptions()
        self.estimator = estimator or TokenEstimator(self.options.estimation)

    def chunk(
        self,
        text: str,
        image_references: Optional[list[ImageReference]] = None,
    ) -> list[Chunk]:
        """
        Chunk a document's text.

        Args:
            text: Extracted plain text. Empty text is not an error.
            image_references: Optional captioned images to interleave.

        Returns:
            Chunks in document order with chunk_index 0..N-1.
        """
        options = self.options
        references = image_references or []

        if not text or not text.strip():
            if not references:
                return []
            segments: list[Segment] = []
        else:
            # Step 1-2: Boundary-aware packing
            packer = ChunkPacker(options.max_tokens, self.estimator)
            if options.preserve_paragraphs:
                segments = packer.pack(text)
            else:
                segments = packer.pack_words(text)

            # Step 3: Overlap
            weaver = OverlapWeaver(
                options.overlap_tokens,
                self.estimator,
                max_tokens=options.max_tokens if options.strict_overlap else None,
            )
            segments = weaver.weave(segments)

            # Step 4: Merge undersized segments
            merger = ChunkMerger(options.min_tokens, options.max_tokens, self.estimator)
            segments = merger.merge(segments)

        chunks = self._to_chunks(segments)

        # Step 5: Images
        if references:
            interleaver = ImageInterleaver(options.max_tokens, self.estimator)
            chunks = interleaver.interleave(chunks, references)

        # Step 6: Final re-index
        chunks = reindex(chunks)

        if text and text.strip() and not chunks:
            logger.warning("Non-empty text produced no chunks")
        logger.debug(f"Chunked {len(text or '')} characters into {len(chunks)} chunks")
        return chunks

    def chunk_document(
        self,
        document: RawDocument,
        image_references: Optional[list[ImageReference]] = None,
    ) -> ChunkingResult:
        """
        Chunk a RawDocument into a ChunkingResult with statistics.

        Args:
            document: Output of the extraction step.
            image_references: Optional captioned images to interleave.

        Returns:
            ChunkingResult with all chunks and statistics.
        """
        chunks = self.chunk(document.text, image_references)
        result = ChunkingResult(
            document_id=make_document_id(document.file_name),
            file_name=document.file_name,
            options=self.options,
            chunks=chunks,
            stats=self.stats(chunks),
        )
        logger.info(
            f"Chunked {document.file_name}: {result.total_chunks} chunks, "
            f"{result.stats.total_tokens} tokens"
        )
        return result

    def chunk_from_file(
        self,
        json_path: str,
        image_references: Optional[list[ImageReference]] = None,
    ) -> ChunkingResult:
        """Load a RawDocument from JSON and chunk it."""
        return self.chunk_document(RawDocument.load(json_path), image_references)

    @staticmethod
    def stats(chunks: list[Chunk]) -> ChunkingStats:
        """Compute statistics about a chunk list (pure). The average is not rounded."""
        if not chunks:
            return ChunkingStats()

        token_counts = [c.token_count for c in chunks]
        return ChunkingStats(
            total_chunks=len(chunks),
            total_tokens=sum(token_counts),
            average_tokens_per_chunk=sum(token_counts) / len(token_counts),
            min_tokens=min(token_counts),
            max_tokens=max(token_counts),
        )

    # -------------------------------------------------------------------------
    # Internal methods
    # -------------------------------------------------------------------------

    def _to_chunks(self, segments: list[Segment]) -> list[Chunk]:
        return [
            Chunk(
                content=segment.content,
                token_count=segment.token_count,
                chunk_index=i,
                start_position=segment.start,
                end_position=segment.end,
                source_type=SourceType.TEXT,
                paragraph_index=segment.paragraph_index,
                overlap_text=segment.overlap,
            )
            for i, segment in enumerate(segments)
        ]


def make_document_id(file_name: str) -> str:
    """Generate a document ID from the source file path."""
    # Normalize Windows backslashes for cross-platform compatibility
    normalized = file_name.replace("\\", "/")
    return Path(normalized).stem or "document"


def chunk_text(
    text: str,
    options: Optional[ChunkingOptions] = None,
    image_references: Optional[list[ImageReference]] = None,
) -> list[Chunk]:
    """Functional entry point: chunk text with the given options."""
    return DocumentChunker(options).chunk(text, image_references)
