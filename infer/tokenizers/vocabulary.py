"""Bidirectional mapping between token strings and integer ids."""

from __future__ import annotations

import logging
from os import PathLike
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from infer.data.loaders import load_json_file, load_text_lines
from infer.exceptions import ConfigurationError, UnknownIdError


log = logging.getLogger(__name__)


class VocabularyBuilder:
    """Accumulates token/id entries and freezes them into a Vocabulary."""

    def __init__(self, source: Optional[str] = None) -> None:
        """Initialize the builder."""
        self.source = source
        self._token_to_id: dict[str, int] = {}
        self._id_to_token: dict[int, str] = {}

    def add(self, token: str, token_id: int, line: Optional[int] = None) -> VocabularyBuilder:
        """Add a single entry, validating it against the entries added so far."""
        if not isinstance(token, str):
            raise ConfigurationError(f"Token must be a string, got {token!r}", source=self.source, line=line)
        # bool is an int subclass, but never a valid id
        if isinstance(token_id, bool) or not isinstance(token_id, int):
            raise ConfigurationError(
                f"Id of token {token!r} must be an integer, got {token_id!r}", source=self.source, line=line
            )
        if token_id < 0:
            raise ConfigurationError(f"Id of token {token!r} is negative: {token_id}", source=self.source, line=line)
        if token in self._token_to_id:
            raise ConfigurationError(f"Duplicate token {token!r}", source=self.source, line=line)
        if token_id in self._id_to_token:
            raise ConfigurationError(
                f"Duplicate id {token_id} for tokens {self._id_to_token[token_id]!r} and {token!r}",
                source=self.source,
                line=line,
            )
        self._token_to_id[token] = token_id
        self._id_to_token[token_id] = token
        return self

    def build(self) -> Vocabulary:
        """Freeze the accumulated entries."""
        return Vocabulary(dict(self._token_to_id), dict(self._id_to_token))


class Vocabulary:
    """Immutable bidirectional mapping between token strings and integer ids.

    Instances are created through VocabularyBuilder or one of the from_* constructors, which
    validate every entry before anything is frozen.
    """

    def __init__(self, token_to_id: dict[str, int], id_to_token: dict[int, str]) -> None:
        """Initialize from already validated lookups. Prefer the from_* constructors."""
        self._token_to_id = MappingProxyType(token_to_id)
        self._id_to_token = MappingProxyType(id_to_token)

    ######################################
    # Construction
    ######################################

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, int], source: Optional[str] = None) -> Vocabulary:
        """Build a vocabulary from an in-memory token -> id mapping."""
        builder = VocabularyBuilder(source=source)
        for token, token_id in mapping.items():
            builder.add(token, token_id)
        return builder.build()

    @classmethod
    def from_json_file(cls, file: PathLike) -> Vocabulary:
        """Load a vocabulary from a flat JSON object of token -> id."""
        data = load_json_file(file)
        if not isinstance(data, dict):
            raise ConfigurationError("Vocabulary JSON must be an object of token -> id", source=str(file))
        vocab = cls.from_mapping(data, source=str(file))
        log.info(f"loaded vocabulary of {len(vocab)} tokens from {file}")
        return vocab

    @classmethod
    def from_text_file(cls, file: PathLike) -> Vocabulary:
        """Load a vocabulary with one token per line; the id of a token is its line number."""
        builder = VocabularyBuilder(source=str(file))
        for i, line in enumerate(load_text_lines(file)):
            token = line.strip()
            if len(token) == 0:
                continue  # blank lines still consume an id
            builder.add(token, i, line=i + 1)
        vocab = builder.build()
        log.info(f"loaded vocabulary of {len(vocab)} tokens from {file}")
        return vocab

    ######################################
    # Lookups
    ######################################

    @property
    def size(self) -> int:
        """The number of tokens in the vocabulary."""
        return len(self._token_to_id)

    @property
    def max_id(self) -> int:
        """The largest id in the vocabulary, or -1 when empty."""
        return max(self._id_to_token, default=-1)

    @property
    def token_to_id_map(self) -> Mapping[str, int]:
        """Read-only view of the token -> id lookup."""
        return self._token_to_id

    @property
    def id_to_token_map(self) -> Mapping[int, str]:
        """Read-only view of the id -> token lookup."""
        return self._id_to_token

    def token_to_id(self, token: str) -> Optional[int]:
        """Get the id of a token, or None if the token is not in the vocabulary."""
        return self._token_to_id.get(token)

    def id_to_token(self, token_id: int) -> str:
        """Get the token of an id.

        Raises:
            UnknownIdError: if the id is not in the vocabulary.
        """
        token = self._id_to_token.get(token_id)
        if token is None:
            raise UnknownIdError("Token id not in vocabulary", index=token_id)
        return token

    def get_token(self, token_id: int) -> Optional[str]:
        """Get the token of an id, or None if the id is not in the vocabulary."""
        return self._id_to_token.get(token_id)

    def __contains__(self, token: object) -> bool:
        return token in self._token_to_id

    def __len__(self) -> int:
        return len(self._token_to_id)

    def __iter__(self) -> Iterator[str]:
        return iter(self._token_to_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vocabulary):
            return NotImplemented
        return dict(self._token_to_id) == dict(other._token_to_id)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={self.size})"
