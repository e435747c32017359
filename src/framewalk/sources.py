"""
Source Enumeration
==================

Lists candidate image files in the input directory.

Entries are yielded sorted by name. Directory order is arbitrary on most
filesystems and the selector breaks score ties by pool order, so sorting
keeps runs reproducible.
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from framewalk.errors import SourceError


logger = logging.getLogger(__name__)


def iter_sources(
    directory: Union[str, Path],
    extensions: Optional[Iterable[str]] = None,
) -> Iterator[Path]:
    """
    Yield regular files in `directory`, sorted by name.

    Args:
        directory: Input directory
        extensions: Case-insensitive suffixes to accept (e.g. [".jpg"]).
            None or empty accepts every file.

    Raises:
        SourceError: If the directory cannot be listed
    """
    directory = Path(directory)
    wanted = {ext.lower() for ext in extensions or ()}

    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise SourceError(f"Cannot list input directory {directory}: {e}") from e

    skipped = 0
    for entry in entries:
        if not entry.is_file():
            continue
        if wanted and entry.suffix.lower() not in wanted:
            skipped += 1
            continue
        yield entry

    if skipped:
        logger.debug(f"Skipped {skipped} files without a matching extension in {directory}")
