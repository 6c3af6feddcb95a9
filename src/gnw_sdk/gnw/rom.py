"""
ROM Resolution
==============

Loads the program ROM for a device from its asset directory.

The manifest names the ROM file and its SHA-1. MAME sets are not always
consistent about file names, so when the named file cannot be read the
resolver hashes every regular file in the directory and takes the first
one whose digest matches.

Candidates are visited in lexicographic file name order, so the result
does not depend on the platform's directory listing order.
"""

from pathlib import Path
from typing import Union
import hashlib
import logging

from gnw_sdk.errors import RomNotFoundError

logger = logging.getLogger(__name__)

HASH_CHUNK_SIZE = 64 * 1024


def sha1_file(filepath: Union[str, Path]) -> str:
    """
    Compute the lowercase hex SHA-1 of a file, reading it in chunks.

    Raises:
        OSError: If the file cannot be read
    """
    digest = hashlib.sha1()
    with open(filepath, "rb") as f:
        while chunk := f.read(HASH_CHUNK_SIZE):
            digest.update(chunk)
    return digest.hexdigest()


def find_rom_by_hash(sha1_hex: str, asset_dir: Union[str, Path]) -> tuple[Path, bytes]:
    """
    Find a file in `asset_dir` whose SHA-1 equals `sha1_hex`.

    Digests are compared as lowercase hex, case-sensitively. Files that
    cannot be read are skipped.

    Returns:
        (path, contents) of the first match

    Raises:
        RomNotFoundError: If the directory cannot be listed or nothing matches
    """
    asset_dir = Path(asset_dir)
    try:
        candidates = sorted(p for p in asset_dir.iterdir() if p.is_file())
    except OSError as e:
        raise RomNotFoundError(asset_dir, f"Could not open asset directory: {e}") from e

    for candidate in candidates:
        try:
            if sha1_file(candidate) != sha1_hex:
                continue
        except OSError as e:
            logger.debug(f"Skipping unreadable file {candidate}: {e}")
            continue

        try:
            data = candidate.read_bytes()
        except OSError as e:
            raise RomNotFoundError(candidate, f"Could not open SHA matched ROM: {e}") from e

        logger.info(f"Found ROM by SHA-1 at {candidate}")
        return candidate, data

    raise RomNotFoundError(asset_dir, "No SHA matched ROM found")


def resolve_rom(filename: str, sha1_hex: str, asset_dir: Union[str, Path]) -> bytes:
    """
    Load a ROM by file name, falling back to a SHA-1 search.

    Args:
        filename: Expected file name inside asset_dir
        sha1_hex: Expected lowercase hex SHA-1
        asset_dir: Directory holding the device assets

    Returns:
        The ROM bytes

    Raises:
        RomNotFoundError: If neither the path nor the hash search yields a
            ROM; the message names the path that was tried first
    """
    rom_path = Path(asset_dir) / filename
    try:
        data = rom_path.read_bytes()
        logger.debug(f"Loaded ROM {rom_path} ({len(data)} bytes)")
        return data
    except OSError as e:
        logger.debug(f"Could not read {rom_path} ({e}), searching by SHA-1")

    try:
        _, data = find_rom_by_hash(sha1_hex, asset_dir)
    except RomNotFoundError as e:
        raise RomNotFoundError(rom_path, e.reason) from e
    return data
