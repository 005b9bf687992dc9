import itertools
import secrets
from typing import Protocol


class IdGenerator(Protocol):
    def next(self) -> str: ...


class RandomIdGenerator:
    """Short random ids drawn from the OS entropy source."""

    def __init__(self, nbytes: int = 8) -> None:
        self.nbytes = nbytes
        self._issued: set[str] = set()

    def next(self) -> str:
        ident = secrets.token_hex(self.nbytes)
        while ident in self._issued:
            ident = secrets.token_hex(self.nbytes)
        self._issued.add(ident)
        return ident


class SequentialIdGenerator:
    """Deterministic ids such as ``id-1``, ``id-2`` for tests and seed data."""

    def __init__(self, prefix: str = "id", start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)

    def next(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"
