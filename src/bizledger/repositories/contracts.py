from __future__ import annotations

from typing import Mapping, Optional, Protocol


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...
    def set_many(self, entries: Mapping[str, str]) -> None: ...
    def replace_all(self, entries: Mapping[str, str]) -> None: ...
    def delete(self, key: str) -> None: ...
    def keys(self) -> list[str]: ...
