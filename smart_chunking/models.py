"""
Data Models for the Chunking Pipeline

Defines:
1. ChunkingOptions - Budgets for chunk size, overlap and merging
2. RawDocument - Extracted plain text handed to the chunker
3. ImageReference - A captioned image/figure and its document position
4. Chunk - A single chunk with positional and image metadata
5. ChunkingStats - Reduction over a chunk list
6. ChunkingResult - Complete chunking output for one document

Design Principles:
- Pydantic v2 for validation and serialization
- Closed, typed chunk metadata instead of a free-form dict
- Save/load pattern for JSON round trips

Usage:
    options = ChunkingOptions(max_tokens=800, min_tokens=100)
    result = DocumentChunker(options).chunk_document(document)
    result.save("chunks.json")
"""

import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigurationError
from .token_counter import EstimationMethod


class SourceType(str, Enum):
    """Origin of a chunk's content."""

    TEXT = "text"
    IMAGE = "image"
    TABLE = "table"
    DIAGRAM = "diagram"


class ChunkingOptions(BaseModel):
    """
    Configuration for one chunking run.

    Invalid values raise ConfigurationError instead of being clamped.
    """
    max_tokens: int = Field(
        1000,
        description="Hard ceiling for the size of a packed chunk",
    )
    min_tokens: int = Field(
        150,
        description="Floor below which a chunk is merged with its neighbours",
    )
    overlap_tokens: int = Field(
        75,
        description="Trailing context copied from the previous chunk",
    )
    preserve_paragraphs: bool = Field(
        True,
        description="Split at paragraph/sentence boundaries; False packs words directly",
    )
    estimation: EstimationMethod = Field(
        EstimationMethod.CHARACTERS,
        description="Token estimation heuristic used for the whole run",
    )
    strict_overlap: bool = Field(
        False,
        description="Trim overlap so that no overlapped chunk exceeds max_tokens",
    )

    def model_post_init(self, __context: Any) -> None:
        for name in ("max_tokens", "min_tokens", "overlap_tokens"):
            value = getattr(self, name)
            if value < 0:
                raise ConfigurationError(
                    f"{name} must not be negative (got {value})",
                    option=name,
                )
        if self.min_tokens >= self.max_tokens:
            raise ConfigurationError(
                f"min_tokens ({self.min_tokens}) must be less than "
                f"max_tokens ({self.max_tokens})",
                option="min_tokens",
            )


class RawDocument(BaseModel):
    """Plain text produced by the (external) extraction step."""
    model_config = ConfigDict(frozen=True)

    text: str = Field("", description="Extracted plain text")
    file_name: str = Field(..., min_length=1, description="Original file name")
    file_type: str = Field("text/plain", description="MIME type of the source file")
    word_count: int = Field(0, ge=0)
    page_count: Optional[int] = Field(None, ge=0)

    def save(self, path: str) -> None:
        Path(path).write_text(self.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: str) -> "RawDocument":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)


class ImageReference(BaseModel):
    """
    An image or figure detected in the source document.

    An empty description means captioning failed; such references are
    dropped without error.
    """
    model_config = ConfigDict(frozen=True)

    description: str = Field("", description="Caption text for the image")
    position: int = Field(..., ge=0, description="Character offset in the source text")
    page_number: Optional[int] = Field(None, ge=1)
    kind: SourceType = Field(
        SourceType.IMAGE,
        description="Source type used when the image becomes its own chunk",
    )


class Chunk(BaseModel):
    """
    A single chunk, ready for embedding and storage.
    """
    content: str = Field(..., min_length=1, description="Final chunk text")
    token_count: int = Field(..., ge=1, description="Estimated tokens in content")
    chunk_index: int = Field(
        ...,
        ge=0,
        description="Position in the final chunk sequence (0-indexed, dense)",
    )
    start_position: Optional[int] = Field(
        None,
        description="Offset of the first source character, if traceable",
    )
    end_position: Optional[int] = Field(
        None,
        description="Offset one past the last source character, if traceable",
    )
    source_type: SourceType = SourceType.TEXT
    paragraph_index: Optional[int] = Field(
        None,
        description="Source paragraph the chunk starts in",
    )
    has_images: bool = False
    image_descriptions: list[str] = Field(default_factory=list)
    page_number: Optional[int] = None
    overlap_text: str = Field(
        "",
        description="Prefix of content copied from the previous chunk",
    )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def reindex(chunks: list[Chunk]) -> list[Chunk]:
    """
    Assign dense chunk_index values 0..N-1 in list order.

    Chunks that already carry the right index are returned unchanged, so
    re-indexing an already indexed list is a no-op.
    """
    return [
        chunk if chunk.chunk_index == i else chunk.model_copy(update={"chunk_index": i})
        for i, chunk in enumerate(chunks)
    ]


class ChunkingStats(BaseModel):
    """Statistics about a chunk list."""
    total_chunks: int = 0
    total_tokens: int = 0
    average_tokens_per_chunk: float = 0.0
    min_tokens: int = 0
    max_tokens: int = 0


class ChunkingResult(BaseModel):
    """
    Complete result of chunking a document.
    """
    document_id: str = Field(..., description="Unique document identifier")
    file_name: str = Field("", description="Name of the source file")
    options: ChunkingOptions = Field(..., description="Options used for chunking")
    chunks: list[Chunk] = Field(default_factory=list)
    stats: ChunkingStats = Field(default_factory=ChunkingStats)
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When chunking was performed",
    )

    @property
    def total_chunks(self) -> int:
        return len(self.chunks)

    def get_chunk(self, index: int) -> Optional[Chunk]:
        """Find a chunk by its chunk_index."""
        for chunk in self.chunks:
            if chunk.chunk_index == index:
                return chunk
        return None

    def get_neighbors(self, index: int) -> tuple[Optional[Chunk], Optional[Chunk]]:
        """Get the previous and next chunks for context expansion."""
        if self.get_chunk(index) is None:
            return None, None
        return self.get_chunk(index - 1), self.get_chunk(index + 1)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    def save(self, path: str) -> None:
        """Save chunking result to a JSON file."""
        Path(path).write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: str) -> "ChunkingResult":
        """Load chunking result from a JSON file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)


class ChunkRequest(BaseModel):
    text: str = ""
    file_name: str = Field("document.txt", min_length=1)
    file_type: str = "text/plain"
    options: ChunkingOptions = Field(default_factory=ChunkingOptions)
    image_references: list[ImageReference] = Field(default_factory=list)
    save: bool = False


class ChunkResponse(BaseModel):
    document_id: str
    total_chunks: int
    total_tokens: int
    chunks: list[Chunk] = Field(default_factory=list)
    output_path: Optional[str] = None
