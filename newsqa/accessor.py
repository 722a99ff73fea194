"""
Read-only capability the validators use to look inside one listed item.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ItemAccessor(Protocol):
    """
    Per-item accessors. Implementations may raise if the underlying page is
    gone; callers are expected to degrade that item rather than fail.

    An implementation whose reads only work on the thread that created it
    sets a truthy ``thread_bound`` attribute; validation then stays on the
    calling thread.
    """

    def get_timestamp_attribute(self) -> Optional[str]:
        ...

    def get_title(self) -> str:
        ...

    def get_url(self) -> str:
        ...

    def get_author(self) -> str:
        ...

    def get_score(self) -> Optional[str]:
        ...
