"""Port for the storefront channel the import targets."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ChannelSettings(Protocol):
    """Default parent and locale for rows that do not carry their own."""

    @property
    def root_category_id(self) -> int | None: ...

    @property
    def locale(self) -> str: ...
