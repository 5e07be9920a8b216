"""Shared constants for the patch service.

For environment-based configuration (threshold, ports, etc.), use the env module:
    from common.env import env
    threshold = env.patch_size_threshold()
"""

from pathlib import Path

SERVICE_NAME = "Patch Decision Service"
SERVICE_VERSION = "1.0.0"

# Data directories
DATA_DIR = Path("./data")
PATCH_DIR = DATA_DIR / "patches"

# A patch larger than this multiple of the source is not worth shipping
DEFAULT_SIZE_THRESHOLD = 5.0

# Unchanged lines kept around each hunk
DEFAULT_CONTEXT_LINES = 3

# Header labels for the two sides of a unified patch
SOURCE_LABEL = "old"
TARGET_LABEL = "new"

HASH_ALGORITHM = "sha256"

PATCH_FILE_PREFIX = "patch"
PATCH_FILE_SUFFIX = ".diff"
