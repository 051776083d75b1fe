"""Ordered byte-pair merge rules."""

from __future__ import annotations

import logging
from os import PathLike
from types import MappingProxyType
from typing import Iterable, Iterator, NamedTuple, Optional

from infer.data.loaders import load_text_lines
from infer.exceptions import ConfigurationError


log = logging.getLogger(__name__)


class TokenPair(NamedTuple):
    """A pair of adjacent symbols that may be merged into one."""

    first: str
    second: str

    @property
    def merged(self) -> str:
        """The symbol produced by merging the pair."""
        return self.first + self.second


MergeList = list[TokenPair]
MergeDict = dict[TokenPair, int]


def convert_merge_list_to_merge_dict(merge_list: Iterable[TokenPair]) -> MergeDict:
    """Convert an ordered list of merge rules to a merge priority (rank) lookup."""
    merge_dict: MergeDict = {}
    for rank, pair in enumerate(merge_list):
        if pair in merge_dict:
            raise ConfigurationError(f"Duplicate merge rule {pair.first!r} {pair.second!r}")
        merge_dict[pair] = rank
    return merge_dict


class MergeTable:
    """Immutable, ordered list of merge rules. Earlier rules have lower rank and are preferred."""

    def __init__(self, pairs: Iterable[TokenPair | tuple[str, str]]) -> None:
        """Initialize the table from pairs in priority order."""
        self._pairs: tuple[TokenPair, ...] = tuple(TokenPair(*pair) for pair in pairs)
        self._ranks = MappingProxyType(convert_merge_list_to_merge_dict(self._pairs))

    @classmethod
    def from_lines(cls, lines: Iterable[str], source: Optional[str] = None) -> MergeTable:
        """Parse merge rules, one rule of two whitespace-separated symbols per line.

        A leading `#version` header and blank lines are skipped.
        """
        pairs: MergeList = []
        seen: set[TokenPair] = set()
        for i, line in enumerate(lines):
            stripped = line.strip()
            if i == 0 and stripped.startswith("#version"):
                continue
            if len(stripped) == 0:
                continue
            parts = stripped.split()
            if len(parts) != 2:
                raise ConfigurationError(
                    f"Merge rule must have exactly 2 symbols, got {len(parts)}: {stripped!r}",
                    source=source,
                    line=i + 1,
                )
            pair = TokenPair(parts[0], parts[1])
            if pair in seen:
                raise ConfigurationError(f"Duplicate merge rule {stripped!r}", source=source, line=i + 1)
            seen.add(pair)
            pairs.append(pair)
        return cls(pairs)

    @classmethod
    def from_file(cls, file: PathLike) -> MergeTable:
        """Load merge rules from a text file; file order is priority order."""
        table = cls.from_lines(load_text_lines(file), source=str(file))
        log.info(f"loaded {len(table)} merge rules from {file}")
        return table

    def rank(self, pair: TokenPair | tuple[str, str]) -> Optional[int]:
        """Get the rank of a pair, or None if the pair is not mergeable."""
        return self._ranks.get(pair)  # type: ignore[arg-type]

    @property
    def ranks(self) -> MappingProxyType:
        """Read-only view of the pair -> rank lookup."""
        return self._ranks

    def to_lines(self) -> list[str]:
        """Serialize the rules in the same format accepted by from_lines()."""
        return [f"{pair.first} {pair.second}" for pair in self._pairs]

    def __contains__(self, pair: object) -> bool:
        return pair in self._ranks

    def __iter__(self) -> Iterator[TokenPair]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MergeTable):
            return NotImplemented
        return self._pairs == other._pairs

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={len(self)})"
