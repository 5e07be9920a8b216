"""Environment configuration interface for the patch service.

This module provides a clean interface for accessing environment variables,
centralizing all environment variable access in one place.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from common.constants import DEFAULT_CONTEXT_LINES, DEFAULT_SIZE_THRESHOLD, PATCH_DIR

# Load environment variables from .env file if it exists
load_dotenv()


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def patch_size_threshold() -> float:
        """Get the patch/source size ratio above which patches are rejected.

        Returns:
            Threshold ratio, defaults to 5.0
        """
        return float(os.getenv("PATCH_SIZE_THRESHOLD", str(DEFAULT_SIZE_THRESHOLD)))

    @staticmethod
    def patch_context_lines() -> int:
        """Get the number of context lines around each hunk.

        Returns:
            Context line count, defaults to 3
        """
        return int(os.getenv("PATCH_CONTEXT_LINES", str(DEFAULT_CONTEXT_LINES)))

    @staticmethod
    def patch_output_dir() -> Path:
        """Get the default directory for persisted patch files.

        Returns:
            Path to patch directory, defaults to ./data/patches
        """
        return Path(os.getenv("PATCH_OUTPUT_DIR", str(PATCH_DIR)))

    @staticmethod
    def api_host() -> str:
        """Get the interface the HTTP API binds to.

        Returns:
            Host, defaults to '127.0.0.1'
        """
        return os.getenv("API_HOST", "127.0.0.1")

    @staticmethod
    def api_port() -> int:
        """Get the port the HTTP API listens on.

        Returns:
            Port, defaults to 8080
        """
        return int(os.getenv("API_PORT", "8080"))


# Singleton instance for convenient access
env = Environment()
