"""Chunk an extracted text file and save the result.

Usage:
  python scripts/chunk_file.py --input extracted.txt
  python scripts/chunk_file.py --input extracted.txt --images captions.json --max-tokens 800
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from smart_chunking import (
    ChunkingOptions,
    ChunkingService,
    ChunkingServiceConfig,
    ConfigurationError,
    EstimationMethod,
    ImageReference,
    RawDocument,
)
from smart_chunking.database import generate_chunking_stats
from smart_chunking.logging_config import configure_logging
from smart_chunking.token_counter import word_count


def _load_references(path: Path) -> list[ImageReference]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return [ImageReference.model_validate(item) for item in data]


def main() -> None:
    parser = argparse.ArgumentParser(description="Chunk an extracted text file.")
    parser.add_argument("--input", required=True, help="Path to the extracted text file")
    parser.add_argument("--images", help="JSON list of image references")
    parser.add_argument("--data-dir", default="data/chunking", help="Output directory")
    parser.add_argument("--max-tokens", type=int, default=1000)
    parser.add_argument("--min-tokens", type=int, default=150)
    parser.add_argument("--overlap-tokens", type=int, default=75)
    parser.add_argument("--no-paragraphs", action="store_true", help="Pack words directly")
    parser.add_argument(
        "--strict-overlap",
        action="store_true",
        help="Trim overlaps so no chunk exceeds --max-tokens",
    )
    parser.add_argument(
        "--estimation",
        choices=[m.value for m in EstimationMethod],
        default=EstimationMethod.CHARACTERS.value,
    )
    parser.add_argument("--detect-figures", action="store_true", help="Add figure mentions found in the text")
    args = parser.parse_args()

    try:
        env_config = ChunkingServiceConfig.from_env()
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc
    logger = configure_logging(env_config)

    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input not found: {input_path}")

    try:
        options = ChunkingOptions(
            max_tokens=args.max_tokens,
            min_tokens=args.min_tokens,
            overlap_tokens=args.overlap_tokens,
            preserve_paragraphs=not args.no_paragraphs,
            estimation=EstimationMethod(args.estimation),
            strict_overlap=args.strict_overlap,
        )
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc

    text = input_path.read_text(encoding="utf-8")
    document = RawDocument(
        text=text,
        file_name=input_path.name,
        file_type="text/plain",
        word_count=word_count(text),
    )
    references = _load_references(Path(args.images)) if args.images else []

    service = ChunkingService(ChunkingServiceConfig(
        data_dir=args.data_dir,
        options=options,
        detect_text_references=args.detect_figures,
        log_level=env_config.log_level,
        log_file=env_config.log_file,
    ))
    file_result, output_path = service.process_and_save(
        document,
        references,
        file_size=input_path.stat().st_size,
    )

    stats = generate_chunking_stats(file_result.chunks)
    logger.info(
        f"{stats.total_chunks} chunks ({stats.text_chunks} text, "
        f"{stats.image_chunks + stats.diagram_chunks} image), "
        f"{stats.total_tokens} tokens, avg {stats.average_tokens_per_chunk:.1f}"
    )
    print(f"document_id: {file_result.document_id}")
    print(f"chunk_path: {output_path}")


if __name__ == "__main__":
    main()
