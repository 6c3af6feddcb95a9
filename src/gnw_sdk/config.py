"""
GNW SDK - Encoder Configuration
===============================

Configuration for image encoding. Values can come from:
- Default values (defined here)
- Environment variables (EncoderConfig.from_env)
- Command-line options (the gnwenc CLI builds one explicitly)

The encoder never reads the environment itself; it only sees the
EncoderConfig it is handed.
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os

logger = logging.getLogger(__name__)


@dataclass
class EncoderConfig:
    """
    Configuration for building .gnw images.

    Attributes:
        build_revision: Source-control revision of this tool. The first
            seven characters are stamped into every header; None stamps
            seven zero bytes.
        entries_per_row: Average mask runs per row the mask block is
            sized for (default: 52, what the firmware loader expects)
    """

    build_revision: Optional[str] = None
    entries_per_row: int = 52

    @classmethod
    def from_env(cls) -> "EncoderConfig":
        """
        Create EncoderConfig from environment variables.

        Environment variables (all optional):
            GNW_BUILD_REVISION: Revision string to stamp into headers
            GNW_ENTRIES_PER_ROW: Mask block sizing (integer)

        Returns:
            EncoderConfig with values from environment variables
        """
        config = cls()

        if revision := os.environ.get("GNW_BUILD_REVISION"):
            config.build_revision = revision.strip()

        if entries := os.environ.get("GNW_ENTRIES_PER_ROW"):
            try:
                value = int(entries)
            except ValueError:
                value = 0
            if value >= 1:
                config.entries_per_row = value
            else:
                logger.warning("Ignoring invalid GNW_ENTRIES_PER_ROW=%r", entries)

        return config
