"""
Image Interleaving - Folds image descriptions into the chunk sequence

Two parts:
1. ImageInterleaver places captioned ImageReferences at their document
   position: folded into the chunk that covers the position when the
   budget allows, otherwise as a standalone chunk right after it.
2. detect_image_references / references_from_text find textual mentions
   of figures ("Figure 3", "see diagram", "[image]") so that documents
   without a captioning step still get figure chunks.

Target selection:
- the first chunk whose [start_position, end_position] contains the
  position (a position on a shared boundary goes to the earlier chunk)
- else the nearest preceding chunk by start_position
- else the first chunk

Usage:
    interleaver = ImageInterleaver(max_tokens=1000, estimator=TokenEstimator())
    chunks = interleaver.interleave(chunks, references)
"""

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from typing import Optional

from .models import Chunk, ImageReference, SourceType, reindex
from .token_counter import TokenEstimator

logger = logging.getLogger(__name__)

IMAGE_DESCRIPTION_TEMPLATE = "[Image Description: {description}]"

# Index used for standalone image chunks when there are no text chunks.
_NO_TARGET = -1


def format_description(description: str) -> str:
    return IMAGE_DESCRIPTION_TEMPLATE.format(description=description)


def locate_target(chunks: list[Chunk], position: int) -> Optional[int]:
    """
    Find the index (into chunks) of the chunk an image position belongs to.

    Returns:
        List index of the target chunk, or None if chunks is empty.
    """
    if not chunks:
        return None

    nearest: Optional[int] = None
    for i, chunk in enumerate(chunks):
        if chunk.start_position is None:
            continue
        end = chunk.end_position if chunk.end_position is not None else chunk.start_position
        if chunk.start_position <= position <= end:
            return i
        if chunk.start_position <= position:
            if nearest is None or chunk.start_position > chunks[nearest].start_position:
                nearest = i

    return nearest if nearest is not None else 0


class ImageInterleaver:
    """Places image descriptions into a finished chunk sequence."""

    def __init__(self, max_tokens: int, estimator: TokenEstimator):
        self.max_tokens = max_tokens
        self.estimator = estimator

    def interleave(
        self,
        chunks: list[Chunk],
        references: list[ImageReference],
    ) -> list[Chunk]:
        """
        Fold or insert every non-blank reference, preserving document order.

        Args:
            chunks: Text chunks in document order.
            references: Image references in any order.

        Returns:
            A new chunk list with dense chunk_index values.
        """
        usable = [r for r in references if r.description.strip()]
        if len(usable) < len(references):
            logger.debug(
                f"Dropped {len(references) - len(usable)} image reference(s) "
                f"with empty descriptions"
            )
        if not usable:
            return reindex(list(chunks))

        updated = list(chunks)
        inserted: dict[int, list[Chunk]] = defaultdict(list)
        folded = 0

        for reference in sorted(usable, key=lambda r: r.position):
            description = reference.description.strip()
            target = locate_target(updated, reference.position)

            if target is not None:
                candidate = self._fold(updated[target], description, reference)
                if candidate.token_count <= self.max_tokens:
                    updated[target] = candidate
                    folded += 1
                    continue

            key = _NO_TARGET if target is None else target
            inserted[key].append(self._standalone(description, reference))

        ordered: list[Chunk] = list(inserted.get(_NO_TARGET, []))
        for i, chunk in enumerate(updated):
            ordered.append(chunk)
            ordered.extend(inserted.get(i, []))

        logger.debug(
            f"Interleaved {len(usable)} image(s): {folded} folded, "
            f"{len(usable) - folded} standalone"
        )
        return reindex(ordered)

    def _fold(
        self,
        chunk: Chunk,
        description: str,
        reference: ImageReference,
    ) -> Chunk:
        content = f"{chunk.content}\n\n{format_description(description)}"
        return chunk.model_copy(update={
            "content": content,
            "token_count": self.estimator.estimate(content),
            "has_images": True,
            "image_descriptions": chunk.image_descriptions + [description],
            "page_number": (
                chunk.page_number if chunk.page_number is not None
                else reference.page_number
            ),
        })

    def _standalone(self, description: str, reference: ImageReference) -> Chunk:
        content = format_description(description)
        return Chunk(
            content=content,
            token_count=self.estimator.estimate(content),
            chunk_index=0,
            source_type=reference.kind,
            has_images=True,
            image_descriptions=[description],
            page_number=reference.page_number,
        )


# =============================================================================
# TEXT-BASED FIGURE DETECTION
# =============================================================================

_REFERENCE_PATTERNS = [
    re.compile(r"(?:figure|fig\.?)\s*\d+", re.IGNORECASE),
    re.compile(r"(?:image|img)\s*\d*", re.IGNORECASE),
    re.compile(r"(?:diagram|chart|graph)\s*\d*", re.IGNORECASE),
    re.compile(r"(?:screenshot|photo|picture)", re.IGNORECASE),
    re.compile(r"\[image[^\]]*\]", re.IGNORECASE),
    re.compile(r"\(see\s+(?:figure|image|diagram)", re.IGNORECASE),
]

_CONTEXT_CHARS = 50
_MIN_DISTANCE = 20


@dataclass(frozen=True)
class DetectedReference:
    """A textual mention of a figure, with surrounding context."""

    position: int
    context: str
    kind: str


def _classify(match_text: str) -> str:
    lowered = match_text.lower()
    if "fig" in lowered:
        return "diagram"
    if "chart" in lowered or "graph" in lowered:
        return "chart"
    if any(word in lowered for word in ("image", "img", "photo", "picture")):
        return "image"
    if "diagram" in lowered:
        return "diagram"
    return "other"


def detect_image_references(text: str) -> list[DetectedReference]:
    """
    Find mentions of figures, images and diagrams in text.

    Patterns match anywhere, including inside longer words ("paragraph"
    contains "graph"). A match closer than 20 characters to any earlier
    match, in pattern order, is dropped.

    Returns:
        Detected references sorted by position.
    """
    if not text:
        return []

    found: list[DetectedReference] = []
    for pattern in _REFERENCE_PATTERNS:
        for match in pattern.finditer(text):
            start = max(0, match.start() - _CONTEXT_CHARS)
            end = min(len(text), match.end() + _CONTEXT_CHARS)
            found.append(DetectedReference(
                position=match.start(),
                context=text[start:end].strip(),
                kind=_classify(match.group()),
            ))

    # Compared against every earlier match, including ones dropped themselves
    kept = [
        reference
        for i, reference in enumerate(found)
        if not any(
            abs(earlier.position - reference.position) < _MIN_DISTANCE
            for earlier in found[:i]
        )
    ]

    return sorted(kept, key=lambda r: r.position)


def references_from_text(text: str) -> list[ImageReference]:
    """Turn detected figure mentions into ImageReferences."""
    references = []
    for detected in detect_image_references(text):
        context = " ".join(detected.context.split())
        references.append(ImageReference(
            description=f"[Referenced {detected.kind}] {context}",
            position=detected.position,
            kind=SourceType.DIAGRAM if detected.kind in ("diagram", "chart") else SourceType.IMAGE,
        ))
    return references
