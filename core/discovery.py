"""
Suite Discovery
===============
Finds the testable projects under a root directory.

Only the immediate children of the root are looked at. A child is a suite
when it is a real directory (not a symlink) holding the manifest file.
Nested directories are never scanned.
"""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Pattern, Union

from core.errors import DiscoveryError


@dataclass(frozen=True)
class Suite:
    """A child directory that carries the manifest marker."""
    name: str
    path: Path


def has_manifest(directory: Union[str, Path], marker: str) -> bool:
    """
    Check whether the marker file sits directly inside ``directory``.

    The lookup compares names from the directory listing, so the match is
    case-sensitive even on case-insensitive filesystems.
    """
    directory = Path(directory)
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.name == marker:
                    return entry.is_file()
    except (FileNotFoundError, NotADirectoryError, PermissionError):
        return False
    return False


def list_child_directories(root: Union[str, Path]) -> List[Path]:
    """
    List the immediate child directories of ``root``, sorted by name.

    Raises:
        DiscoveryError: root is missing, not a directory or unreadable
    """
    root = Path(root)
    try:
        with os.scandir(root) as entries:
            children = [
                Path(entry.path)
                for entry in entries
                if entry.is_dir(follow_symlinks=False)
            ]
    except FileNotFoundError:
        raise DiscoveryError(f"Root directory not found: {root}")
    except NotADirectoryError:
        raise DiscoveryError(f"Root is not a directory: {root}")
    except PermissionError as e:
        raise DiscoveryError(f"Cannot list {root}: {e}")

    return sorted(children, key=lambda p: p.name)


def discover_suites(
    root: Union[str, Path],
    marker: str,
    name_pattern: Optional[Union[str, Pattern[str]]] = None
) -> List[Suite]:
    """
    Discover every suite under ``root``.

    Args:
        root: Directory whose children are candidates
        marker: Manifest filename (e.g. "Cargo.toml")
        name_pattern: Optional regex; a child is only considered when
            its name matches (``re.search``)

    Returns:
        Suites in traversal order
    """
    if isinstance(name_pattern, str):
        name_pattern = re.compile(name_pattern)

    suites = []
    for child in list_child_directories(root):
        if name_pattern is not None and not name_pattern.search(child.name):
            continue
        if has_manifest(child, marker):
            suites.append(Suite(name=child.name, path=child))

    return suites
