"""Accept/reject classification of a patch by its size."""

from dataclasses import dataclass

from common.constants import DEFAULT_SIZE_THRESHOLD

from .models import Recommendation, RejectionReason


@dataclass(frozen=True)
class Classification:
    """Verdict of the threshold check."""

    accepted: bool
    size_ratio: float | None
    reason: RejectionReason | None = None
    recommendation: Recommendation | None = None


def compute_size_ratio(patch_size: int, source_size: int) -> float | None:
    """Patch size divided by source size, or None for an empty source."""
    if source_size == 0:
        return None
    return patch_size / source_size


def classify(
    patch_size: int,
    source_size: int,
    threshold: float = DEFAULT_SIZE_THRESHOLD,
    unchanged: bool = False,
) -> Classification:
    """
    Decide whether a patch is small enough to ship.

    An empty source has no meaningful ratio; it is rejected with
    "empty_source" and the client should download the full target. A ratio
    strictly above the threshold is rejected with "patch_too_large", so a
    ratio of exactly 5.0 is still accepted at the default threshold.

    An unchanged text (empty edit script) over a non-empty source is always
    accepted: its patch is only the two header lines, whatever the ratio.

    Args:
        patch_size: Byte length of the rendered patch
        source_size: Byte length of the source text
        threshold: Largest accepted patch/source ratio
        unchanged: The edit script has no deltas

    Returns:
        Classification with the computed ratio

    Raises:
        ValueError: If a size is negative or the threshold is not positive
    """
    if patch_size < 0 or source_size < 0:
        raise ValueError(f"Sizes must be >= 0, got patch={patch_size} source={source_size}")
    if threshold <= 0:
        raise ValueError(f"threshold must be > 0, got {threshold}")

    ratio = compute_size_ratio(patch_size, source_size)

    if ratio is None:
        return Classification(
            accepted=False,
            size_ratio=None,
            reason=RejectionReason.EMPTY_SOURCE,
            recommendation=Recommendation.FULL_DOWNLOAD,
        )

    if unchanged:
        return Classification(accepted=True, size_ratio=ratio)

    if ratio > threshold:
        return Classification(
            accepted=False,
            size_ratio=ratio,
            reason=RejectionReason.PATCH_TOO_LARGE,
            recommendation=Recommendation.FULL_DOWNLOAD,
        )

    return Classification(accepted=True, size_ratio=ratio)
