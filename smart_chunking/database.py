"""
Database Shape Adapter

Converts chunking output into the row shape a persistence layer stores:
one DatabaseChunk per chunk, plus a FileProcessingResult describing the
parent file. Also validates rows before they are handed over and computes
per-type statistics.

Nothing here talks to a database; storing the rows (atomically) is the
caller's job.

Usage:
    result = DocumentChunker().chunk_document(document)
    file_result = prepare_for_database(result, document)
    report = validate_chunks(file_result.chunks)
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from .models import Chunk, ChunkingResult, RawDocument, SourceType

CHUNKING_STRATEGY = "paragraph-based"


class DatabaseChunk(BaseModel):
    """A chunk row as stored by the persistence layer."""
    content: str
    token_count: int
    chunk_index: int
    start_position: Optional[int] = None
    end_position: Optional[int] = None
    chunk_type: str = SourceType.TEXT.value
    source_metadata: dict[str, Any] = Field(default_factory=dict)


class ChunkValidationReport(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)


class ChunkDistributionStats(BaseModel):
    """Statistics over stored chunk rows, including the type distribution."""
    total_chunks: int = 0
    total_tokens: int = 0
    average_tokens_per_chunk: float = 0.0
    min_tokens_per_chunk: int = 0
    max_tokens_per_chunk: int = 0
    chunk_type_distribution: dict[str, int] = Field(default_factory=dict)
    chunks_with_images: int = 0
    text_chunks: int = 0
    image_chunks: int = 0
    table_chunks: int = 0
    diagram_chunks: int = 0


class FileProcessingResult(BaseModel):
    """File-level record plus all chunk rows for one processed document."""
    document_id: str
    file_name: str
    file_type: str
    file_size: int = 0
    total_chunks: int = 0
    total_tokens: int = 0
    word_count: int = 0
    page_count: Optional[int] = None
    has_images: bool = False
    image_count: int = 0
    chunks: list[DatabaseChunk] = Field(default_factory=list)
    processing_metadata: dict[str, Any] = Field(default_factory=dict)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.model_dump(mode="json"), ensure_ascii=False, indent=indent)

    def save(self, path: str) -> None:
        Path(path).write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: str) -> "FileProcessingResult":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)


def to_database_chunks(
    chunks: list[Chunk],
    extracted_at: Optional[datetime] = None,
) -> list[DatabaseChunk]:
    """Convert chunks to database rows, moving metadata into source_metadata."""
    timestamp = (extracted_at or datetime.utcnow()).isoformat()
    return [
        DatabaseChunk(
            content=chunk.content,
            token_count=chunk.token_count,
            chunk_index=chunk.chunk_index,
            start_position=chunk.start_position,
            end_position=chunk.end_position,
            chunk_type=chunk.source_type.value,
            source_metadata={
                "paragraph_index": chunk.paragraph_index,
                "page_number": chunk.page_number,
                "has_images": chunk.has_images,
                "image_descriptions": list(chunk.image_descriptions),
                "extracted_at": timestamp,
            },
        )
        for chunk in chunks
    ]


def validate_chunks(records: list[DatabaseChunk]) -> ChunkValidationReport:
    """
    Check rows before insertion.

    Flags empty content, non-positive token counts, negative or non-dense
    chunk indices and unknown chunk types.
    """
    errors: list[str] = []
    known_types = {t.value for t in SourceType}

    for position, record in enumerate(records):
        if not record.content or not record.content.strip():
            errors.append(f"Chunk {position} has empty content")
        if record.token_count <= 0:
            errors.append(f"Chunk {position} has invalid token count: {record.token_count}")
        if record.chunk_index < 0:
            errors.append(f"Chunk {position} has invalid chunk index: {record.chunk_index}")
        elif record.chunk_index != position:
            errors.append(
                f"Chunk {position} has non-sequential chunk index: {record.chunk_index}"
            )
        if record.chunk_type not in known_types:
            errors.append(f"Chunk {position} has invalid chunk type: {record.chunk_type}")

    return ChunkValidationReport(valid=not errors, errors=errors)


def generate_chunking_stats(records: list[DatabaseChunk]) -> ChunkDistributionStats:
    """Totals, token range and per-type counts over chunk rows."""
    if not records:
        return ChunkDistributionStats()

    token_counts = [r.token_count for r in records]
    distribution: dict[str, int] = {}
    for record in records:
        distribution[record.chunk_type] = distribution.get(record.chunk_type, 0) + 1

    return ChunkDistributionStats(
        total_chunks=len(records),
        total_tokens=sum(token_counts),
        average_tokens_per_chunk=sum(token_counts) / len(token_counts),
        min_tokens_per_chunk=min(token_counts),
        max_tokens_per_chunk=max(token_counts),
        chunk_type_distribution=distribution,
        chunks_with_images=sum(
            1 for r in records if r.source_metadata.get("has_images") is True
        ),
        text_chunks=distribution.get(SourceType.TEXT.value, 0),
        image_chunks=distribution.get(SourceType.IMAGE.value, 0),
        table_chunks=distribution.get(SourceType.TABLE.value, 0),
        diagram_chunks=distribution.get(SourceType.DIAGRAM.value, 0),
    )


def prepare_for_database(
    result: ChunkingResult,
    document: RawDocument,
    file_size: int = 0,
    image_count: Optional[int] = None,
) -> FileProcessingResult:
    """
    Build the file-level record for a chunked document.

    Args:
        result: Output of DocumentChunker.chunk_document.
        document: The document that was chunked.
        file_size: Size of the uploaded file in bytes.
        image_count: Images in the source file. Defaults to the number of
            image descriptions placed into the chunks.

    Returns:
        FileProcessingResult ready for storage.
    """
    records = to_database_chunks(result.chunks, extracted_at=result.created_at)
    if image_count is None:
        image_count = sum(len(chunk.image_descriptions) for chunk in result.chunks)
    return FileProcessingResult(
        document_id=result.document_id,
        file_name=document.file_name,
        file_type=document.file_type,
        file_size=file_size,
        total_chunks=len(records),
        total_tokens=sum(r.token_count for r in records),
        word_count=document.word_count,
        page_count=document.page_count,
        has_images=image_count > 0,
        image_count=image_count,
        chunks=records,
        processing_metadata={
            "processed_at": datetime.utcnow().isoformat(),
            "chunking_strategy": (
                CHUNKING_STRATEGY if result.options.preserve_paragraphs else "word-based"
            ),
            "max_tokens_per_chunk": result.options.max_tokens,
            "min_tokens_per_chunk": result.options.min_tokens,
            "overlap_tokens": result.options.overlap_tokens,
            "token_estimation": result.options.estimation.value,
        },
    )
