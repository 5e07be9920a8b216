"""Data models for patch decisions."""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

from common.constants import (
    DEFAULT_CONTEXT_LINES,
    DEFAULT_SIZE_THRESHOLD,
    SOURCE_LABEL,
    TARGET_LABEL,
)
from common.env import env

from .errors import ConfigurationError

# Immutable sequence of lines, terminators stripped
TextBuffer = tuple[str, ...]

FINGERPRINT_PATTERN = re.compile(r"^([a-z0-9]+):([0-9a-f]{64})$")


class RejectionReason(str, Enum):
    """Why a patch was not worth shipping."""

    PATCH_TOO_LARGE = "patch_too_large"
    EMPTY_SOURCE = "empty_source"


class Recommendation(str, Enum):
    """What the client should do instead of applying a patch."""

    FULL_DOWNLOAD = "full_download"


class ErrorKind(str, Enum):
    """Failures that abort an evaluation."""

    INPUT_UNREADABLE = "input_unreadable"
    PERSIST_FAILURE = "persist_failure"


@dataclass(frozen=True)
class Delta:
    """One edit over half-open, 0-based line ranges of the old and new text."""

    kind: Literal["insert", "delete", "change"]
    old_start: int
    old_end: int
    new_start: int
    new_end: int


# Ordered deltas turning the old lines into the new lines
EditScript = tuple[Delta, ...]


@dataclass(frozen=True)
class Fingerprint:
    """Algorithm-tagged hex digest of some content."""

    algorithm: str
    digest: str

    def __str__(self) -> str:
        return f"{self.algorithm}:{self.digest}"

    @property
    def short(self) -> str:
        """First 8 hex characters, used in artifact names."""
        return self.digest[:8]

    @classmethod
    def parse(cls, text: str) -> "Fingerprint":
        """Parse the ``<algorithm>:<hex>`` form.

        Raises:
            ValueError: If the text is not a 256-bit tagged digest
        """
        match = FINGERPRINT_PATTERN.match(text)
        if match is None:
            raise ValueError(f"Invalid fingerprint: {text!r}")
        return cls(algorithm=match.group(1), digest=match.group(2))


@dataclass(frozen=True)
class SizeStats:
    """Byte sizes behind a patch decision."""

    old_size: int
    new_size: int
    patch_size: int
    size_ratio: float | None  # None when the source is empty
    operation_count: int


@dataclass(frozen=True)
class Accepted:
    """A patch that is worth shipping."""

    patch_document: str | None
    persisted_path: Path | None
    source_fingerprint: Fingerprint
    target_fingerprint: Fingerprint
    stats: SizeStats

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """A patch that should not be shipped; the client falls back to ``recommendation``."""

    reason: RejectionReason
    recommendation: Recommendation
    stats: SizeStats

    @property
    def success(self) -> bool:
        return False


@dataclass(frozen=True)
class Failed:
    """An evaluation aborted by an I/O problem."""

    error_kind: ErrorKind
    message: str

    @property
    def success(self) -> bool:
        return False


PatchOutcome = Accepted | Rejected | Failed


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for the patch decision engine."""

    size_threshold: float = DEFAULT_SIZE_THRESHOLD
    context_lines: int = DEFAULT_CONTEXT_LINES
    source_label: str = SOURCE_LABEL
    target_label: str = TARGET_LABEL

    def __post_init__(self):
        if not self.size_threshold > 0:
            raise ConfigurationError(f"size_threshold must be > 0, got {self.size_threshold}")
        if self.context_lines < 0:
            raise ConfigurationError(f"context_lines must be >= 0, got {self.context_lines}")

    @classmethod
    def from_env(
        cls,
        size_threshold: float | None = None,
        context_lines: int | None = None,
    ) -> "EngineConfig":
        """
        Build a config from PATCH_SIZE_THRESHOLD and PATCH_CONTEXT_LINES.

        Explicit arguments take precedence over the environment.

        Raises:
            ConfigurationError: If a value cannot be parsed or is out of range
        """
        try:
            if size_threshold is None:
                size_threshold = env.patch_size_threshold()
            if context_lines is None:
                context_lines = env.patch_context_lines()
        except ValueError as e:
            raise ConfigurationError(f"Invalid patch configuration in environment: {e}") from e

        return cls(size_threshold=size_threshold, context_lines=context_lines)
