"""Naming, writing and discovery of persisted patch files."""

import contextlib
import os
import tempfile
from datetime import datetime
from pathlib import Path

from common.constants import PATCH_FILE_PREFIX, PATCH_FILE_SUFFIX
from common.logger import get_logger

from .errors import PersistFailureError
from .models import Fingerprint

logger = get_logger(__name__)


def generate_patch_filename(
    timestamp: datetime, source_fp: Fingerprint, target_fp: Fingerprint
) -> str:
    """
    Generate patch filename.

    Format: patch_YYYYMMDD_HHMMSS_<source8>-<target8>.diff

    Both fingerprints are part of the name, so concurrent evaluations of
    different inputs never write to the same file.

    Args:
        timestamp: Time of the evaluation
        source_fp: Fingerprint of the old text
        target_fp: Fingerprint of the new text

    Returns:
        Filename string
    """
    ts_str = timestamp.strftime("%Y%m%d_%H%M%S")
    return f"{PATCH_FILE_PREFIX}_{ts_str}_{source_fp.short}-{target_fp.short}{PATCH_FILE_SUFFIX}"


def parse_patch_filename(filename: str) -> tuple[datetime, str, str] | None:
    """
    Parse patch filename into timestamp and short source/target hashes.

    Args:
        filename: Filename to parse (e.g., "patch_20250110_143022_1a2b3c4d-5e6f7a8b.diff")

    Returns:
        Tuple of (timestamp, source_short, target_short) or None if invalid format
    """
    if not filename.endswith(PATCH_FILE_SUFFIX):
        return None
    filename = filename[: -len(PATCH_FILE_SUFFIX)]

    # Should have format: patch_YYYYMMDD_HHMMSS_source-target
    parts = filename.split("_")
    if len(parts) != 4 or parts[0] != PATCH_FILE_PREFIX:
        return None

    hashes = parts[3].split("-")
    if len(hashes) != 2 or not all(hashes):
        return None

    try:
        timestamp = datetime.strptime(f"{parts[1]}_{parts[2]}", "%Y%m%d_%H%M%S")
    except ValueError:
        return None

    return (timestamp, hashes[0], hashes[1])


def resolve_destination(
    persist_to: str | Path,
    source_fp: Fingerprint,
    target_fp: Fingerprint,
    now: datetime | None = None,
) -> Path:
    """
    Work out the file a patch should be written to.

    A path ending in ".diff" is used as is; anything else is treated as a
    directory and gets a generated filename.
    """
    persist_to = Path(persist_to)
    if persist_to.suffix == PATCH_FILE_SUFFIX:
        return persist_to

    if now is None:
        now = datetime.now()
    return persist_to / generate_patch_filename(now, source_fp, target_fp)


def write_patch_file(file_path: Path, patch_text: str) -> Path:
    """
    Write patch text as UTF-8, atomically.

    The bytes go to a temporary file in the destination directory which is
    then moved into place, so readers see either the whole file or none.
    Missing parent directories are created.

    Args:
        file_path: Destination file
        patch_text: Unified diff text

    Returns:
        The destination path

    Raises:
        PersistFailureError: If any filesystem operation fails
    """
    tmp_path: Path | None = None
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=file_path.parent,
            prefix=f".{file_path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(patch_text.encode("utf-8"))

        os.replace(tmp_path, file_path)
    except OSError as e:
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                tmp_path.unlink()
        raise PersistFailureError(f"Could not write patch to {file_path}: {e}") from e

    logger.debug(f"Wrote patch file {file_path}")
    return file_path


def list_patches_chronological(patch_dir: Path) -> list[Path]:
    """
    List all patch files in chronological order.

    Args:
        patch_dir: Directory containing patch files

    Returns:
        List of paths sorted by timestamp (oldest first)
    """
    if not patch_dir.exists():
        return []

    files_with_timestamps: list[tuple[datetime, Path]] = []

    for file_path in patch_dir.glob(f"{PATCH_FILE_PREFIX}_*{PATCH_FILE_SUFFIX}"):
        parsed = parse_patch_filename(file_path.name)
        if parsed is None:
            continue

        timestamp, _, _ = parsed
        files_with_timestamps.append((timestamp, file_path))

    files_with_timestamps.sort(key=lambda x: (x[0], x[1].name))

    return [path for _, path in files_with_timestamps]


def find_latest_patch(patch_dir: Path) -> Path | None:
    """Most recent patch file in patch_dir, or None if there is none."""
    patches = list_patches_chronological(patch_dir)
    return patches[-1] if patches else None
