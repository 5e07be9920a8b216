"""
Decide between shipping a patch and a full download.

The engine diffs two versions of a text, renders a unified patch, and checks
the patch size against the source size. Accepted patches come back with
fingerprints of both versions and, when asked, are written to disk.
Everything is computed per call; an engine instance holds only its config.
"""

from pathlib import Path

from common.logger import get_logger

from .differencer import compute_edit_script, split_lines
from .errors import InputUnreadableError, PersistFailureError
from .formatter import format_unified
from .hasher import fingerprint
from .models import (
    Accepted,
    EngineConfig,
    ErrorKind,
    Failed,
    PatchOutcome,
    Rejected,
    SizeStats,
)
from .storage import resolve_destination, write_patch_file
from .threshold import classify

logger = get_logger(__name__)


def _decode(content: str | bytes, label: str) -> tuple[str, bytes]:
    """Return the text and its UTF-8 bytes, whichever form was given."""
    if isinstance(content, str):
        try:
            return content, content.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InputUnreadableError(
                f"{label} text cannot be encoded as UTF-8 at position {e.start}: {e.reason}"
            ) from e
    try:
        return content.decode("utf-8"), content
    except UnicodeDecodeError as e:
        raise InputUnreadableError(f"{label} text is not valid UTF-8: {e}") from e


def read_text(path: str | Path, label: str) -> str:
    """
    Read a file as UTF-8 text.

    Raises:
        InputUnreadableError: If the file cannot be opened or decoded
    """
    path = Path(path)
    try:
        return path.read_bytes().decode("utf-8")
    except OSError as e:
        raise InputUnreadableError(f"Cannot read {label} file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise InputUnreadableError(f"{label} file {path} is not valid UTF-8: {e}") from e


class PatchDecisionEngine:
    """Turns two texts into an Accepted, Rejected or Failed outcome."""

    def __init__(self, config: EngineConfig | None = None):
        self.config = config or EngineConfig()

    def evaluate(
        self,
        old_text: str | bytes,
        new_text: str | bytes,
        persist_to: str | Path | None = None,
        include_content: bool = True,
    ) -> PatchOutcome:
        """
        Evaluate whether new_text should be shipped as a patch against old_text.

        Args:
            old_text: Source version, decoded text or UTF-8 bytes
            new_text: Target version, decoded text or UTF-8 bytes
            persist_to: Directory (or ".diff" file path) to write an accepted patch to
            include_content: Put the patch text in the outcome

        Returns:
            Accepted, Rejected, or Failed for unreadable input and write errors
        """
        try:
            old_text, old_data = _decode(old_text, "old")
            new_text, new_data = _decode(new_text, "new")
        except InputUnreadableError as e:
            logger.error(str(e))
            return Failed(error_kind=ErrorKind.INPUT_UNREADABLE, message=str(e))

        old_lines = split_lines(old_text)
        new_lines = split_lines(new_text)

        script = compute_edit_script(old_lines, new_lines)
        patch_text = format_unified(
            old_lines,
            new_lines,
            script,
            context_lines=self.config.context_lines,
            source_label=self.config.source_label,
            target_label=self.config.target_label,
        )

        old_size = len(old_data)
        new_size = len(new_data)
        patch_size = len(patch_text.encode("utf-8"))

        verdict = classify(
            patch_size, old_size, self.config.size_threshold, unchanged=not script
        )
        stats = SizeStats(
            old_size=old_size,
            new_size=new_size,
            patch_size=patch_size,
            size_ratio=verdict.size_ratio,
            operation_count=len(script),
        )

        if not verdict.accepted:
            logger.info(
                f"Patch rejected ({verdict.reason.value}): "
                f"{patch_size} patch bytes for {old_size} source bytes"
            )
            return Rejected(
                reason=verdict.reason,
                recommendation=verdict.recommendation,
                stats=stats,
            )

        source_fp = fingerprint(old_data)
        target_fp = fingerprint(new_data)

        persisted_path = None
        if persist_to not in (None, ""):
            destination = resolve_destination(persist_to, source_fp, target_fp)
            try:
                persisted_path = write_patch_file(destination, patch_text)
            except PersistFailureError as e:
                logger.error(str(e))
                return Failed(error_kind=ErrorKind.PERSIST_FAILURE, message=str(e))

        logger.info(
            f"Patch accepted: {len(script)} operation(s), "
            f"ratio {verdict.size_ratio:.3f}"
            + (f", saved to {persisted_path}" if persisted_path else "")
        )

        return Accepted(
            patch_document=patch_text if include_content else None,
            persisted_path=persisted_path,
            source_fingerprint=source_fp,
            target_fingerprint=target_fp,
            stats=stats,
        )

    def evaluate_files(
        self,
        old_path: str | Path,
        new_path: str | Path,
        persist_to: str | Path | None = None,
        include_content: bool = True,
    ) -> PatchOutcome:
        """Like evaluate(), reading both versions from UTF-8 files."""
        try:
            old_text = read_text(old_path, "old")
            new_text = read_text(new_path, "new")
        except InputUnreadableError as e:
            logger.error(str(e))
            return Failed(error_kind=ErrorKind.INPUT_UNREADABLE, message=str(e))

        return self.evaluate(old_text, new_text, persist_to, include_content)


def evaluate(
    old_text: str | bytes,
    new_text: str | bytes,
    persist_to: str | Path | None = None,
    include_content: bool = True,
) -> PatchOutcome:
    """Evaluate with an engine configured from the environment."""
    engine = PatchDecisionEngine(EngineConfig.from_env())
    return engine.evaluate(old_text, new_text, persist_to, include_content)
