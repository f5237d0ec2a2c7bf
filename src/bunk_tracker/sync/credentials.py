from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class Credential:
    access_token: str

    @property
    def is_usable(self) -> bool:
        return bool(self.access_token and self.access_token.strip())


class CredentialStore(Protocol):
    def load(self) -> Optional[Credential]:
        raise NotImplementedError

    def save(self, credential: Credential) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class InMemoryCredentialStore:
    """Keeps the credential for the lifetime of the process."""

    def __init__(self, credential: Optional[Credential] = None):
        self._credential = credential

    def load(self) -> Optional[Credential]:
        return self._credential

    def save(self, credential: Credential) -> None:
        self._credential = credential

    def clear(self) -> None:
        self._credential = None
