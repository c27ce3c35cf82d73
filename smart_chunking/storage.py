"""
Chunk Storage - JSON files per processed document

Layout:
    <data_dir>/<document_id>/chunks/<document_id>_<UTC timestamp>.json
    <data_dir>/<document_id>/chunks/<document_id>_<UTC timestamp>.stats.json

The first file is the FileProcessingResult (file row plus chunk rows); the
sidecar holds the ChunkDistributionStats of those rows so listings do not
have to load every chunk. Timestamps sort lexically, so the newest run of
a document is the last file in name order.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .database import ChunkDistributionStats, FileProcessingResult, generate_chunking_stats

logger = logging.getLogger(__name__)

_STATS_SUFFIX = ".stats.json"


@dataclass
class ChunkingPaths:
    document_id: str
    chunk_dir: Path
    chunk_file: Path
    stats_file: Path


class ChunkingStorage:
    """Writes and reads chunking runs below data_dir."""

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def chunk_dir(self, document_id: str) -> Path:
        return self.data_dir / document_id / "chunks"

    def build_paths(self, document_id: str) -> ChunkingPaths:
        timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S_%f")
        chunk_dir = self.chunk_dir(document_id)
        chunk_dir.mkdir(parents=True, exist_ok=True)
        stem = f"{document_id}_{timestamp}"
        return ChunkingPaths(
            document_id=document_id,
            chunk_dir=chunk_dir,
            chunk_file=chunk_dir / f"{stem}.json",
            stats_file=chunk_dir / f"{stem}{_STATS_SUFFIX}",
        )

    def save(self, result: FileProcessingResult) -> ChunkingPaths:
        """Write the result and its statistics sidecar."""
        paths = self.build_paths(result.document_id)
        result.save(str(paths.chunk_file))
        stats = generate_chunking_stats(result.chunks)
        paths.stats_file.write_text(stats.model_dump_json(indent=2), encoding="utf-8")
        logger.debug(f"Wrote {paths.chunk_file.name} and stats sidecar")
        return paths

    def list_results(self, document_id: str) -> list[Path]:
        """Saved result files of a document, oldest first."""
        chunk_dir = self.chunk_dir(document_id)
        if not chunk_dir.is_dir():
            return []
        return sorted(
            p for p in chunk_dir.glob(f"{document_id}_*.json")
            if not p.name.endswith(_STATS_SUFFIX)
        )

    def load_latest(self, document_id: str) -> Optional[FileProcessingResult]:
        """The most recent saved result, or None if the document has none."""
        files = self.list_results(document_id)
        if not files:
            return None
        return FileProcessingResult.load(str(files[-1]))

    def load_stats(self, chunk_file: Path) -> ChunkDistributionStats:
        """Read the sidecar of a result file, recomputing it if missing."""
        stats_file = chunk_file.with_name(chunk_file.name[: -len(".json")] + _STATS_SUFFIX)
        if stats_file.exists():
            return ChunkDistributionStats.model_validate_json(
                stats_file.read_text(encoding="utf-8")
            )
        return generate_chunking_stats(FileProcessingResult.load(str(chunk_file)).chunks)
