"""Schema serialization and idempotent file updates."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from dslschema.exit_codes import WriteError

log = logging.getLogger(__name__)


def render_schema(root: dict) -> str:
    """Pretty-printed JSON, keys in insertion order, trailing newline."""
    return json.dumps(root, indent=2, ensure_ascii=False) + "\n"


def mkparents(path: Path) -> None:
    """Create the parent directories of *path*."""
    parent = Path(path).parent
    if not parent.is_dir():
        parent.mkdir(parents=True, exist_ok=True)


def update_file(path: str | Path, content: str) -> bool:
    """Write *content* to *path* unless the file already holds exactly it.

    Returns True when the file was written.  Filesystem failures are raised
    as :class:`WriteError` with the original error chained.
    """
    path = Path(path)
    data = content.encode("utf-8")
    try:
        if path.is_file() and path.read_bytes() == data:
            log.info("%s is up to date", path)
            return False
        mkparents(path)
        path.write_bytes(data)
    except OSError as exc:
        raise WriteError(f"Cannot write {path}: {exc}") from exc
    log.info("Wrote %s", path)
    return True
