"""Spec-file naming, scaffolding and discovery.

All spec files live under a single root directory (SPEC_FOLDER, relative
to the working directory) and share one extension.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

from .errors import SpecFolderMissingError
from .identity import new_identity

logger = logging.getLogger(__name__)

__all__ = [
    "SPEC_FOLDER",
    "EXT",
    "SAMPLE_FILE",
    "ensure_spec_folder",
    "export_file_name",
    "resolve_spec_path",
    "create_spec_file",
    "find_spec_files",
]

SPEC_FOLDER = Path("spec/rainforest")
EXT = ".rfml"

SAMPLE_FILE = """#! {id} (this is the ID, don't edit it)
# title: New test
#
# 1. steps:
#   a) pairs of lines are steps (first line = action, second = response)
#   b) second line must have a ?
#   c) second line must not be blank
# 2. comments:
#   a) lines starting # are comments
#

"""

_DISALLOWED = re.compile(r"[^a-z0-9 ]+")
_SPACES = re.compile(r" +")

PathLike = Union[str, Path]


def ensure_spec_folder(spec_folder: PathLike = SPEC_FOLDER) -> Path:
    """Check that the spec-file root exists.

    Raises:
        SpecFolderMissingError: If the directory is missing
    """
    folder = Path(spec_folder)
    if not folder.is_dir():
        raise SpecFolderMissingError(str(folder))
    return folder


def export_file_name(remote_id: int, title: str) -> str:
    """Derive the spec-file base name for a remote test.

    The id is zero-padded to ten digits; the title is lower-cased, stripped
    of everything outside [a-z0-9 ] and has its space runs collapsed into
    single underscores.

    >>> export_file_name(42, "Log In!")
    '0000000042_log_in'
    """
    slug = _DISALLOWED.sub("", (title or "").strip().lower())
    slug = _SPACES.sub("_", slug)
    return f"{remote_id:010d}_{slug}"


def resolve_spec_path(name: str, spec_folder: PathLike = SPEC_FOLDER) -> Path:
    """Place a name under the spec root, appending the extension if missing."""
    if not name.endswith(EXT):
        name += EXT
    return Path(spec_folder) / name


def create_spec_file(
    name: Optional[str] = None, spec_folder: PathLike = SPEC_FOLDER
) -> Path:
    """Write a new spec file holding the authoring scaffold.

    Args:
        name: File name, with or without extension. A UUID is used if None.
        spec_folder: Spec-file root

    Returns:
        Path of the created file
    """
    identity = new_identity()
    path = resolve_spec_path(name or identity, spec_folder)
    path.write_text(SAMPLE_FILE.format(id=identity), encoding="utf-8")
    logger.info(f"Created {path}")
    return path


def find_spec_files(spec_folder: PathLike = SPEC_FOLDER) -> List[Path]:
    """Return every spec file under the root, recursing into subdirectories."""
    return sorted(Path(spec_folder).rglob(f"*{EXT}"))
