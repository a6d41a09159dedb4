from __future__ import annotations

from typing import ContextManager, Protocol


class TransactionManager(Protocol):
    """Anything that can run a block as one atomic unit of work."""

    def atomic(self) -> ContextManager[None]:
        raise NotImplementedError
