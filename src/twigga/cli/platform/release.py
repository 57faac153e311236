"""Release versioning for static site deploys.

A release version is a pure function of the ordered list of
``(relative path, file bytes)`` pairs, so the walk order is fixed to a
lexicographic pre-order traversal.
"""

from __future__ import annotations

import hashlib
import os
from collections.abc import Iterable
from pathlib import Path

HASH_LENGTH = 12
VERSION_PREFIX = "v-"


def walk_files(directory: Path) -> list[Path]:
    """Collect every non-directory entry below ``directory``.

    Children are visited in sorted name order, depth first, so ``a/x``
    comes before ``b.txt`` which comes before ``c/y``. Symlinks to
    directories are not descended into.

    Args:
        directory: Root of the tree to walk.

    Returns:
        File paths in traversal order.
    """
    files: list[Path] = []

    def _visit(current: Path) -> None:
        with os.scandir(current) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            path = current / entry.name
            if entry.is_dir(follow_symlinks=False):
                _visit(path)
            else:
                files.append(path)

    _visit(Path(directory))
    return files


def relative_name(path: Path, base_dir: Path) -> str:
    """Forward-slash path of ``path`` relative to ``base_dir``."""
    path = Path(path)
    rel = path.relative_to(base_dir)
    if rel == Path("."):
        return path.name
    return rel.as_posix()


def compute_release_hash(base_dir: Path, files: Iterable[Path]) -> str:
    """Hash an ordered file set into a 12-character hex digest.

    For each file the digest is fed its relative path as file-system bytes,
    a NUL byte, the raw contents and another NUL byte.

    Args:
        base_dir: Directory the relative paths are computed from.
        files: Files in the order they should be hashed.

    Returns:
        First 12 lowercase hex characters of the SHA-256 digest.
    """
    sha256 = hashlib.sha256()
    for path in files:
        sha256.update(os.fsencode(relative_name(path, base_dir)))
        sha256.update(b"\0")
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(65536), b""):
                sha256.update(chunk)
        sha256.update(b"\0")
    return sha256.hexdigest()[:HASH_LENGTH]


def release_version(base_dir: Path, files: Iterable[Path]) -> str:
    """Version label for a release, e.g. ``v-3f1c0a9be2d4``."""
    return VERSION_PREFIX + compute_release_hash(base_dir, files)
