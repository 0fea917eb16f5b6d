"""Resource lifecycle interfaces.

``ResourceData`` is the per-call state object the engine hands to a
resource: the identifier it tracks, the desired configuration, the
configuration last applied, and the state read back from the remote API.
Resources mutate it in place; nothing is shared between instances.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

ConfigT = TypeVar("ConfigT", bound=BaseModel)
StateT = TypeVar("StateT", bound=BaseModel)


@dataclass
class ResourceData(Generic[ConfigT, StateT]):
    """Engine-side view of one resource instance.

    Attributes:
        id: Composite identifier; empty string when the resource does not exist.
        config: Desired configuration (create/update).
        prior: Configuration last applied; ``None`` means unknown.
        state: State flattened from the remote object after a read.
    """

    id: str = ""
    config: ConfigT | None = None
    prior: ConfigT | None = None
    state: StateT | None = None

    def set_id(self, resource_id: str) -> None:
        self.id = resource_id
        if not resource_id:
            self.state = None

    def has_change(self, field: str) -> bool:
        """Report whether ``field`` differs between ``prior`` and ``config``.

        Without a prior configuration every field is considered changed.
        """
        if self.prior is None or self.config is None:
            return True
        return getattr(self.prior, field) != getattr(self.config, field)

    def has_changes(self, fields: tuple[str, ...]) -> bool:
        return any(self.has_change(field) for field in fields)


class AbstractResource(ABC, Generic[ConfigT, StateT]):
    """Interface every managed resource implements."""

    @abstractmethod
    async def create(self, data: ResourceData[ConfigT, StateT]) -> None:
        """Create the remote object from ``data.config`` and set ``data.id``."""
        raise NotImplementedError

    @abstractmethod
    async def read(self, data: ResourceData[ConfigT, StateT]) -> None:
        """Refresh ``data.state``; clear ``data.id`` if the object is gone."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, data: ResourceData[ConfigT, StateT]) -> None:
        """Push ``data.config`` to the remote object identified by ``data.id``."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, data: ResourceData[ConfigT, StateT]) -> None:
        """Delete the remote object; an already missing object is not an error."""
        raise NotImplementedError

    @abstractmethod
    async def exists(self, data: ResourceData[ConfigT, StateT]) -> bool:
        """Return whether the remote object identified by ``data.id`` exists."""
        raise NotImplementedError

    async def import_state(self, resource_id: str) -> ResourceData[ConfigT, StateT]:
        """Adopt an existing remote object by identifier and read it."""
        data: ResourceData[ConfigT, StateT] = ResourceData(id=resource_id)
        await self.read(data)
        return data
