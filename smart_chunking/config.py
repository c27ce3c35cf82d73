from dataclasses import dataclass, field
import os
from typing import Optional

from .exceptions import ConfigurationError
from .logging_config import resolve_level
from .models import ChunkingOptions
from .token_counter import EstimationMethod

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ChunkingServiceConfig:
    data_dir: str = "data/chunking"
    options: ChunkingOptions = field(default_factory=ChunkingOptions)
    detect_text_references: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ChunkingServiceConfig":
        def _int(name: str, default: int) -> int:
            value = os.environ.get(name)
            if not value:
                return default
            try:
                return int(value)
            except ValueError as exc:
                raise ConfigurationError(
                    f"{name} must be an integer (got {value!r})", option=name
                ) from exc

        def _bool(name: str, default: bool) -> bool:
            value = os.environ.get(name)
            if not value:
                return default
            lowered = value.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ConfigurationError(
                f"{name} must be a boolean (got {value!r})", option=name
            )

        defaults = ChunkingOptions()
        estimation = os.environ.get("CHUNKING_ESTIMATION", defaults.estimation.value)
        try:
            method = EstimationMethod(estimation)
        except ValueError as exc:
            raise ConfigurationError(
                f"CHUNKING_ESTIMATION must be one of "
                f"{[m.value for m in EstimationMethod]} (got {estimation!r})",
                option="CHUNKING_ESTIMATION",
            ) from exc

        options = ChunkingOptions(
            max_tokens=_int("CHUNKING_MAX_TOKENS", defaults.max_tokens),
            min_tokens=_int("CHUNKING_MIN_TOKENS", defaults.min_tokens),
            overlap_tokens=_int("CHUNKING_OVERLAP_TOKENS", defaults.overlap_tokens),
            preserve_paragraphs=_bool("CHUNKING_PRESERVE_PARAGRAPHS", defaults.preserve_paragraphs),
            estimation=method,
            strict_overlap=_bool("CHUNKING_STRICT_OVERLAP", defaults.strict_overlap),
        )
        log_level = os.environ.get("CHUNKING_LOG_LEVEL", cls.log_level)
        resolve_level(log_level)

        return cls(
            data_dir=os.environ.get("CHUNKING_DATA_DIR", cls.data_dir),
            options=options,
            detect_text_references=_bool("CHUNKING_DETECT_TEXT_REFERENCES", False),
            log_level=log_level,
            log_file=os.environ.get("CHUNKING_LOG_FILE") or None,
        )
