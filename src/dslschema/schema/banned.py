"""Banned-type predicate: glob patterns over canonical type names."""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable

from dslschema.metadata.model import TypeInfo


class BannedTypes:
    """Callable oracle deciding whether a type is excluded from generation.

    A pattern is an ``fnmatch`` glob (``org.example.legacy.*``) or a plain
    canonical name.  Unresolved types (``None``) are never banned.
    """

    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns = tuple(p for p in patterns if p)

    def __call__(self, info: TypeInfo | None) -> bool:
        if info is None or not self.patterns:
            return False
        return any(fnmatch.fnmatchcase(info.name, p) for p in self.patterns)

    def __repr__(self) -> str:
        return f"BannedTypes({list(self.patterns)!r})"


NO_BANS = BannedTypes()
