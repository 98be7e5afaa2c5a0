"""On-disk page stash.

One file per key under the stash folder. Content is always written and read
as UTF-8 with replacement, so whatever comes back from read() is safe to hand
to a parser.
"""

from __future__ import annotations

import logging
from pathlib import Path

from trawl.common.encoding import CANONICAL_ENCODING, normalize_text
from trawl.common.exceptions import CacheMissException

logger = logging.getLogger(__name__)


class PageCache:
    """Key/value store of page bodies backed by a directory.

    The directory is created on first use. Keys are expected to be the output
    of :func:`trawl.data_types.cache_key` and are used verbatim as filenames.

    Example::

        cache = PageCache(Path("stashes"))
        cache.write("httpexamplecom", "<html>...</html>")
        assert cache.has("httpexamplecom")
    """

    def __init__(self, folder: Path | str) -> None:
        self.folder = Path(folder)
        self._ready = False

    def _ensure_folder(self) -> None:
        if not self._ready:
            self.folder.mkdir(parents=True, exist_ok=True)
            self._ready = True

    def path_for(self, key: str) -> Path:
        """Location of the file that holds ``key``."""
        return self.folder / key

    def has(self, key: str) -> bool:
        self._ensure_folder()
        return self.path_for(key).is_file()

    def read(self, key: str) -> str:
        """Return the stashed page for ``key``.

        Raises:
            CacheMissException: If nothing is stored under ``key``.
        """
        self._ensure_folder()
        path = self.path_for(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError as e:
            raise CacheMissException(key, str(path)) from e
        return normalize_text(raw, CANONICAL_ENCODING)

    def write(self, key: str, content: str | bytes) -> None:
        """Store ``content`` under ``key``, replacing any previous page.

        Write failures (permissions, full disk) propagate as OSError.
        """
        self._ensure_folder()
        path = self.path_for(key)
        path.write_bytes(normalize_text(content).encode(CANONICAL_ENCODING))
        logger.debug(f"Stashed {key} at {path}")
