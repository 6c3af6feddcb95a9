"""
GNW SDK Command-Line Interface
==============================

This package provides the gnwenc command-line tool:

- **gnwenc build**: Encode .gnw images for the devices in a manifest
- **gnwenc list**: List the devices a filter selects
- **gnwenc info**: Inspect an existing .gnw image

The tool is a Click-based CLI application with comprehensive help and
error reporting.
"""

__all__ = ["gnwenc"]
