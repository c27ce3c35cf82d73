"""Tests for smart_chunking.chunker."""

import pytest

from conftest import make_document_text, non_whitespace, strip_overlap
from smart_chunking.chunker import DocumentChunker, chunk_text, make_document_id
from smart_chunking.models import (
    Chunk,
    ChunkingOptions,
    ImageReference,
    SourceType,
    reindex,
)
from smart_chunking.token_counter import EstimationMethod, TokenEstimator


class TestScenarios:
    def test_short_paragraphs_single_chunk(self):
        """Short paragraphs fit into a single chunk."""
        text = "Para one short text.\n\nPara two short text."
        chunks = DocumentChunker().chunk(text)
        assert len(chunks) == 1
        assert chunks[0].content == text
        assert chunks[0].token_count == 11
        assert chunks[0].chunk_index == 0
        assert chunks[0].source_type == SourceType.TEXT

    def test_oversized_paragraph_split_at_sentences(self):
        """An oversized paragraph splits at sentence boundaries."""
        sentences = [f"Sentence {i:04d} talks about chunking." for i in range(223)]
        text = " ".join(sentences)
        options = ChunkingOptions(max_tokens=1000, min_tokens=50, overlap_tokens=0)
        chunks = DocumentChunker(options).chunk(text)

        assert len(chunks) == 3
        assert [c.token_count for c in chunks] == [999, 999, 9]
        for chunk in chunks:
            assert chunk.content.endswith("chunking.")
        assert chunks[1].content.startswith("Sentence 0111")

    def test_undersized_middle_chunk_kept(self):
        """A small chunk whose successor does not fit stays as-is."""
        text = "\n\n".join(["a" * 3980, "b" * 160, "c" * 3960])
        options = ChunkingOptions(max_tokens=1000, min_tokens=50, overlap_tokens=0)
        chunks = DocumentChunker(options).chunk(text)
        assert [c.token_count for c in chunks] == [995, 40, 990]
        assert chunks[1].content == "b" * 160

    def test_empty_text(self):
        """Empty text yields no chunks."""
        assert DocumentChunker().chunk("") == []

    def test_whitespace_only_text(self):
        """Whitespace-only text yields no chunks."""
        assert DocumentChunker().chunk("  \n\n\t ") == []

    def test_image_folded_into_chunk(self):
        """A description that fits is appended to its target chunk."""
        text = " ".join(["lorem"] * 400)
        description = " ".join(["pixel"] * 33)
        refs = [ImageReference(description=description, position=100)]
        chunks = DocumentChunker().chunk(text, refs)

        assert len(chunks) == 1
        assert chunks[0].has_images is True
        assert chunks[0].token_count == 655
        assert chunks[0].content.endswith(f"[Image Description: {description}]")

    def test_image_standalone_when_chunk_full(self):
        """A description that does not fit becomes its own image chunk."""
        text = " ".join(["lorem"] * 660)
        description = " ".join(["pixel"] * 33)
        refs = [ImageReference(description=description, position=100)]
        chunks = DocumentChunker().chunk(text, refs)

        assert len(chunks) == 2
        assert chunks[0].has_images is False
        assert chunks[0].token_count == 990
        assert chunks[1].source_type == SourceType.IMAGE
        assert chunks[1].start_position is None
        assert chunks[1].token_count == 55
        assert chunks[1].chunk_index == 1

    def test_images_without_text(self):
        """Images are emitted even when there is no text."""
        refs = [ImageReference(description="Company logo", position=0, page_number=1)]
        chunks = DocumentChunker().chunk("", refs)
        assert len(chunks) == 1
        assert chunks[0].content == "[Image Description: Company logo]"
        assert chunks[0].page_number == 1


class TestProperties:
    def test_lossless_reconstruction(self, document_text, small_options):
        """Non-overlap text rebuilds the document."""
        chunks = DocumentChunker(small_options).chunk(document_text)
        assert len(chunks) > 1
        rebuilt = "".join(strip_overlap(c) for c in chunks)
        assert non_whitespace(rebuilt) == non_whitespace(document_text)

    def test_lossless_without_paragraphs(self, document_text):
        """Word packing is lossless and carries no paragraph index."""
        options = ChunkingOptions(
            max_tokens=60, min_tokens=10, overlap_tokens=8, preserve_paragraphs=False
        )
        chunks = DocumentChunker(options).chunk(document_text)
        rebuilt = "".join(strip_overlap(c) for c in chunks)
        assert non_whitespace(rebuilt) == non_whitespace(document_text)
        assert all(c.paragraph_index is None for c in chunks)

    def test_overlap_is_suffix_of_previous_chunk(self, document_text, small_options):
        """Each overlap is a suffix of the previous chunk."""
        chunks = DocumentChunker(small_options).chunk(document_text)
        overlapped = [c for c in chunks[1:] if c.overlap_text]
        assert overlapped
        for previous, current in zip(chunks, chunks[1:]):
            if not current.overlap_text:
                continue
            base = " ".join(strip_overlap(previous).split())
            assert base.endswith(current.overlap_text)
            assert current.content.startswith(current.overlap_text + " ")

    def test_dense_indices_and_ordered_positions(self, document_text, small_options):
        """Indices are dense and positions ordered."""
        chunks = DocumentChunker(small_options).chunk(document_text)
        assert [c.chunk_index for c in chunks] == list(range(len(chunks)))
        starts = [c.start_position for c in chunks if c.start_position is not None]
        assert starts == sorted(starts)

    def test_reindex_is_idempotent(self, document_text, small_options):
        """Reindexing a finished list changes nothing."""
        chunks = DocumentChunker(small_options).chunk(document_text)
        assert reindex(chunks) == chunks
        assert reindex(reindex(chunks)) == chunks

    def test_empty_description_changes_nothing(self, document_text, small_options):
        """Empty descriptions are ignored."""
        chunker = DocumentChunker(small_options)
        refs = [ImageReference(description="", position=40)]
        assert chunker.chunk(document_text, refs) == chunker.chunk(document_text)

    def test_strict_overlap_respects_max(self, document_text):
        """Strict overlap keeps every chunk within max_tokens."""
        options = ChunkingOptions(
            max_tokens=90, min_tokens=20, overlap_tokens=30, strict_overlap=True
        )
        chunks = DocumentChunker(options).chunk(document_text)
        assert all(c.token_count <= 90 for c in chunks)

    def test_merge_floor(self, document_text, small_options):
        """Every chunk but the last reaches min_tokens."""
        chunks = DocumentChunker(small_options).chunk(document_text)
        assert all(c.token_count >= small_options.min_tokens for c in chunks[:-1])

    def test_token_count_matches_estimator(self, document_text):
        """Counts use the configured estimator."""
        options = ChunkingOptions(
            max_tokens=100, min_tokens=20, overlap_tokens=10,
            estimation=EstimationMethod.WORDS,
        )
        estimator = TokenEstimator(EstimationMethod.WORDS)
        chunks = DocumentChunker(options).chunk(document_text)
        for chunk in chunks:
            assert chunk.token_count == estimator.estimate(chunk.content)

    def test_deterministic(self, document_text, small_options):
        """Identical input gives identical chunks."""
        first = DocumentChunker(small_options).chunk(document_text)
        second = DocumentChunker(small_options).chunk(document_text)
        assert first == second

    def test_larger_document(self):
        """Default options handle a larger document losslessly."""
        text = make_document_text(paragraphs=40, sentences=9)
        chunks = DocumentChunker().chunk(text)
        assert all(c.token_count <= 1000 + 75 + 1 for c in chunks)
        rebuilt = "".join(strip_overlap(c) for c in chunks)
        assert non_whitespace(rebuilt) == non_whitespace(text)


class TestStats:
    def test_empty(self):
        """No chunks gives zeroed statistics."""
        stats = DocumentChunker.stats([])
        assert stats.total_chunks == 0
        assert stats.total_tokens == 0
        assert stats.average_tokens_per_chunk == 0.0
        assert stats.min_tokens == 0
        assert stats.max_tokens == 0

    def test_values(self):
        """Totals and the token range are computed."""
        chunks = [
            Chunk(content="a" * 40, token_count=10, chunk_index=0),
            Chunk(content="b" * 120, token_count=30, chunk_index=1),
        ]
        stats = DocumentChunker.stats(chunks)
        assert stats.total_chunks == 2
        assert stats.total_tokens == 40
        assert stats.average_tokens_per_chunk == pytest.approx(20.0)
        assert (stats.min_tokens, stats.max_tokens) == (10, 30)

    def test_average_is_exact(self):
        """The average is reported unrounded."""
        chunks = [
            Chunk(content="a" * 40, token_count=10, chunk_index=0),
            Chunk(content="b" * 60, token_count=15, chunk_index=1),
        ]
        assert DocumentChunker.stats(chunks).average_tokens_per_chunk == 12.5


class TestChunkDocument:
    def test_result_fields(self, sample_document, small_options):
        """The result carries document metadata and statistics."""
        result = DocumentChunker(small_options).chunk_document(sample_document)
        assert result.document_id == "system_overview"
        assert result.file_name == "uploads/system_overview.pdf"
        assert result.options == small_options
        assert result.total_chunks == len(result.chunks)
        assert result.stats.total_tokens == sum(c.token_count for c in result.chunks)

    def test_chunk_from_file(self, tmp_path, sample_document, small_options):
        """Saved documents chunk like their text."""
        path = tmp_path / "document.json"
        sample_document.save(str(path))
        result = DocumentChunker(small_options).chunk_from_file(str(path))
        expected = DocumentChunker(small_options).chunk(sample_document.text)
        assert result.chunks == expected


class TestHelpers:
    def test_make_document_id(self):
        """Document ids are file stems."""
        assert make_document_id("reports/annual.pdf") == "annual"
        assert make_document_id("C:\\docs\\report.pdf") == "report"
        assert make_document_id("") == "document"

    def test_chunk_text(self, document_text, small_options):
        """chunk_text is a shortcut for DocumentChunker.chunk."""
        assert chunk_text(document_text, small_options) == (
            DocumentChunker(small_options).chunk(document_text)
        )

    def test_shared_estimator_injected(self):
        """An injected estimator is used as-is."""
        estimator = TokenEstimator(EstimationMethod.WORDS)
        chunker = DocumentChunker(estimator=estimator)
        assert chunker.estimator is estimator
