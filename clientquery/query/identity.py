"""
ClientQuery Identity Threading

Opaque object identity tokens returned in ``_ObjectIdentity_`` fields, and the
per-operation table that carries them from one request graph to the next.
"""

import logging
from typing import Dict, Iterator, Optional

from .errors import UnknownIdentityError

logger = logging.getLogger(__name__)


class IdentityToken:
    """
    Server-issued capability referencing one server-side object.

    The token text is kept exactly as received. It supports equality and
    hashing only; it is never parsed, concatenated or rewritten.
    """

    __slots__ = ('_value',)

    def __init__(self, value: str):
        if not isinstance(value, str) or not value:
            raise ValueError("Identity token must be a non-empty string")
        object.__setattr__(self, '_value', value)

    def __setattr__(self, name, value):
        raise AttributeError("IdentityToken is immutable")

    @property
    def value(self) -> str:
        return self._value

    def __eq__(self, other) -> bool:
        if not isinstance(other, IdentityToken):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(('IdentityToken', self._value))

    def __repr__(self) -> str:
        # Tokens embed server correlation ids; keep logs short.
        preview = self._value if len(self._value) <= 24 else self._value[:12] + '...' + self._value[-8:]
        return f"IdentityToken({preview!r})"


class IdentityTable:
    """
    Symbolic name to identity token store for one logical operation.

    An orchestrator remembers the identities it needs after the first round
    trip and recalls them when building the next graph.
    """

    def __init__(self):
        self._tokens: Dict[str, IdentityToken] = {}

    def remember(self, name: str, token: IdentityToken) -> None:
        if not isinstance(token, IdentityToken):
            raise TypeError(f"Expected IdentityToken, got {type(token).__name__}")
        if name in self._tokens and self._tokens[name] != token:
            logger.debug(f"Replacing identity remembered under '{name}'")
        self._tokens[name] = token

    def recall(self, name: str) -> IdentityToken:
        try:
            return self._tokens[name]
        except KeyError:
            raise UnknownIdentityError(name) from None

    def get(self, name: str) -> Optional[IdentityToken]:
        return self._tokens.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._tokens

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __repr__(self) -> str:
        return f"IdentityTable(names={sorted(self._tokens)})"
