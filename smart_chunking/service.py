import logging
from typing import Optional

from .chunker import DocumentChunker
from .config import ChunkingServiceConfig
from .database import (
    ChunkDistributionStats,
    FileProcessingResult,
    prepare_for_database,
    validate_chunks,
)
from .exceptions import ChunkValidationError
from .images import references_from_text
from .models import ChunkingResult, ImageReference, RawDocument
from .storage import ChunkingStorage

logger = logging.getLogger(__name__)


class ChunkingService:
    def __init__(self, config: ChunkingServiceConfig | None = None):
        self.config = config or ChunkingServiceConfig()
        self.chunker = DocumentChunker(self.config.options)
        self.storage = ChunkingStorage(self.config.data_dir)

    def chunk(
        self,
        document: RawDocument,
        image_references: Optional[list[ImageReference]] = None,
    ) -> ChunkingResult:
        references = list(image_references or [])
        if self.config.detect_text_references:
            references.extend(references_from_text(document.text))
        return self.chunker.chunk_document(document, references)

    def to_file_result(
        self,
        result: ChunkingResult,
        document: RawDocument,
        file_size: int = 0,
    ) -> FileProcessingResult:
        file_result = prepare_for_database(result, document, file_size=file_size)
        report = validate_chunks(file_result.chunks)
        if not report.valid:
            raise ChunkValidationError(report.errors)
        if document.text.strip() and not file_result.chunks:
            logger.warning(
                f"{document.file_name}: extracted text produced zero chunks"
            )
        return file_result

    def process(
        self,
        document: RawDocument,
        image_references: Optional[list[ImageReference]] = None,
        file_size: int = 0,
    ) -> FileProcessingResult:
        result = self.chunk(document, image_references)
        return self.to_file_result(result, document, file_size=file_size)

    def save(self, file_result: FileProcessingResult) -> str:
        paths = self.storage.save(file_result)
        logger.info(f"Saved {file_result.total_chunks} chunks to {paths.chunk_file}")
        return str(paths.chunk_file)

    def process_and_save(
        self,
        document: RawDocument,
        image_references: Optional[list[ImageReference]] = None,
        file_size: int = 0,
    ) -> tuple[FileProcessingResult, str]:
        file_result = self.process(document, image_references, file_size=file_size)
        return file_result, self.save(file_result)

    def latest(self, document_id: str) -> Optional[FileProcessingResult]:
        return self.storage.load_latest(document_id)

    def latest_stats(self, document_id: str) -> Optional[ChunkDistributionStats]:
        files = self.storage.list_results(document_id)
        if not files:
            return None
        return self.storage.load_stats(files[-1])

    def process_file(self, document_path: str) -> tuple[FileProcessingResult, str]:
        return self.process_and_save(RawDocument.load(document_path))
