"""Decide between shipping a unified patch and a full download."""

from .applier import apply_patch, parse_patch
from .engine import PatchDecisionEngine, evaluate
from .errors import ConfigurationError
from .hasher import fingerprint
from .models import (
    Accepted,
    EngineConfig,
    ErrorKind,
    Failed,
    Fingerprint,
    PatchOutcome,
    Recommendation,
    Rejected,
    RejectionReason,
    SizeStats,
)

__all__ = [
    "Accepted",
    "ConfigurationError",
    "EngineConfig",
    "ErrorKind",
    "Failed",
    "Fingerprint",
    "PatchDecisionEngine",
    "PatchOutcome",
    "Recommendation",
    "Rejected",
    "RejectionReason",
    "SizeStats",
    "apply_patch",
    "evaluate",
    "fingerprint",
    "parse_patch",
]
