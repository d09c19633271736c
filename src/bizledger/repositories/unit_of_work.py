from __future__ import annotations

from typing import Any, Protocol


class UnitOfWork(Protocol):
    def __enter__(self) -> "UnitOfWork": ...
    def __exit__(self, exc_type, exc, tb) -> None: ...
    def stage(self, **changes: Any) -> None: ...


class RepositoryUnitOfWork:
    """Collects collection replacements and commits them as one store batch.

    Nothing is written if the block raises; staged values are simply dropped.
    """

    def __init__(self, repo):
        self.repo = repo
        self._staged: dict[str, Any] = {}

    def __enter__(self) -> "RepositoryUnitOfWork":
        self._staged = {}
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        staged, self._staged = self._staged, {}
        if exc_type is None and staged:
            self.repo.commit(**staged)
        return None

    def stage(self, **changes: Any) -> None:
        self._staged.update(changes)
