"""Registry of reserved tokens bound to fixed ids."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional

from infer.exceptions import ConfigurationError
from infer.tokenizers.vocabulary import Vocabulary


@dataclass(frozen=True)
class SpecialToken:
    """A reserved token string and its id."""

    text: str
    id: int


@dataclass(frozen=True)
class SpecialTokens:
    """Special tokens configured for a tokenizer, by role.

    Ids may lie outside the range of the learned vocabulary. The `pad_token` role only marks an id
    that decoding skips: padded positions of an EncodedInput always hold `PAD_ID`.
    """

    cls_token: Optional[SpecialToken] = None
    sep_token: Optional[SpecialToken] = None
    unk_token: Optional[SpecialToken] = None
    bos_token: Optional[SpecialToken] = None
    eos_token: Optional[SpecialToken] = None
    pad_token: Optional[SpecialToken] = None

    @classmethod
    def roles(cls) -> list[str]:
        """Get all valid role names."""
        return [f.name for f in fields(cls)]

    @classmethod
    def from_vocabulary(cls, vocab: Vocabulary, **role_texts: Optional[str]) -> SpecialTokens:
        """Resolve special tokens by looking up their text in a vocabulary.

        Example:
            SpecialTokens.from_vocabulary(vocab, cls_token="[CLS]", sep_token="[SEP]")

        Raises:
            ConfigurationError: if a role is unknown or its token is missing from the vocabulary.
        """
        valid_roles = cls.roles()
        resolved: dict[str, SpecialToken] = {}
        for role, text in role_texts.items():
            if role not in valid_roles:
                raise ConfigurationError(f"Unrecognized special token role: '{role}'")
            if text is None:
                continue
            token_id = vocab.token_to_id(text)
            if token_id is None:
                raise ConfigurationError(f"Special token {text!r} ({role}) is not in the vocabulary")
            resolved[role] = SpecialToken(text=text, id=token_id)
        return cls(**resolved)

    def get(self, role: str) -> Optional[SpecialToken]:
        """Get the token configured for a role, or None."""
        if role not in self.roles():
            raise ConfigurationError(f"Unrecognized special token role: '{role}'")
        return getattr(self, role)

    def require(self, role: str) -> SpecialToken:
        """Get the token configured for a role.

        Raises:
            ConfigurationError: if no token is configured for the role.
        """
        token = self.get(role)
        if token is None:
            raise ConfigurationError(f"Missing required special token: {role}")
        return token

    @property
    def ids(self) -> frozenset[int]:
        """The ids of all configured special tokens."""
        return frozenset(token.id for token in self._configured())

    @property
    def texts(self) -> frozenset[str]:
        """The strings of all configured special tokens."""
        return frozenset(token.text for token in self._configured())

    def _configured(self) -> list[SpecialToken]:
        return [token for token in (getattr(self, role) for role in self.roles()) if token is not None]
