"""
Optimistic Mutation Executor

DESIGN DECISION: Local changes are applied BEFORE the ledger confirms them,
so the dashboard reacts instantly. The price is rollback:

- create: the temporary entity is removed again
- update/delete: the ENTIRE pre-mutation list is restored, not just the
  touched element

After any failed mutation the visible list equals the pre-mutation list.
The error is always re-raised so the caller decides what the user sees.

Mutations on the same entity id are serialized with one asyncio.Lock per
id. Mutations on different ids may interleave freely. A lock lives only
while some mutation holds or awaits it.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, Generic, Iterable, Optional, TypeVar

from pydantic import BaseModel

from finboard.audit import AuditLogger, create_correlation_id
from finboard.models.audit import AuditEventBuilder


T = TypeVar("T", bound=BaseModel)

RemoteCall = Callable[[], Awaitable[T]]


class OptimisticCollection(Generic[T]):
    """
    A list-shaped client cache with optimistic create/update/delete.

    Entities must expose a stable `id` attribute.
    """

    def __init__(
        self,
        items: Iterable[T] = (),
        entity_type: str = "entity",
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._items: list[T] = list(items)
        self._entity_type = entity_type
        self._audit = audit_logger
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @property
    def items(self) -> tuple[T, ...]:
        """Snapshot of the visible list."""
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, entity_id: str) -> Optional[T]:
        for item in self._items:
            if item.id == entity_id:
                return item
        return None

    def replace_all(self, items: Iterable[T]) -> None:
        """Replace the whole list after a successful fetch."""
        self._items = list(items)

    @asynccontextmanager
    async def _entity_lock(self, entity_id: str):
        lock = self._locks.get(entity_id)
        if lock is None:
            lock = self._locks[entity_id] = asyncio.Lock()
        self._lock_users[entity_id] = self._lock_users.get(entity_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[entity_id] -= 1
            if not self._lock_users[entity_id]:
                del self._lock_users[entity_id]
                del self._locks[entity_id]

    def _index_of(self, entity_id: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == entity_id:
                return index
        return None

    async def _log(self, event) -> None:
        if self._audit:
            await self._audit.log(event)

    async def create(self, temp_entity: T, remote_call: RemoteCall) -> T:
        """
        Append temp_entity, then swap it for the server's entity.

        The server entity carries a different id; look it up by that id
        from now on.

        Raises:
            Whatever remote_call raised, after removing temp_entity
        """
        correlation_id = create_correlation_id()
        temp_id = temp_entity.id
        self._items.append(temp_entity)
        await self._log(AuditEventBuilder.mutation_applied(
            self._entity_type, "create", temp_id, correlation_id
        ))

        try:
            created = await remote_call()
        except (Exception, asyncio.CancelledError) as e:
            self._items = [item for item in self._items if item.id != temp_id]
            await self._log(AuditEventBuilder.mutation_rolled_back(
                self._entity_type, "create", temp_id, str(e), correlation_id
            ))
            raise

        index = self._index_of(temp_id)
        if index is not None:
            self._items[index] = created
        elif self._index_of(created.id) is None:
            # A refetch replaced the list while the create was in flight
            self._items.append(created)

        await self._log(AuditEventBuilder.mutation_confirmed(
            self._entity_type, "create", temp_id, correlation_id, server_id=created.id
        ))
        return created

    async def update(
        self,
        entity_id: str,
        local_transform: Callable[[T], T],
        remote_call: RemoteCall,
    ) -> T:
        """
        Apply local_transform to one element, then confirm with the server.

        Raises:
            Whatever remote_call raised, after restoring the full snapshot
        """
        async with self._entity_lock(entity_id):
            correlation_id = create_correlation_id()
            snapshot = list(self._items)
            self._items = [
                local_transform(item) if item.id == entity_id else item
                for item in self._items
            ]
            await self._log(AuditEventBuilder.mutation_applied(
                self._entity_type, "update", entity_id, correlation_id
            ))

            try:
                updated = await remote_call()
            except (Exception, asyncio.CancelledError) as e:
                self._items = snapshot
                await self._log(AuditEventBuilder.mutation_rolled_back(
                    self._entity_type, "update", entity_id, str(e), correlation_id
                ))
                raise

            self._items = [
                updated if item.id == entity_id else item
                for item in self._items
            ]
            await self._log(AuditEventBuilder.mutation_confirmed(
                self._entity_type, "update", entity_id, correlation_id
            ))
            return updated

    async def delete(self, entity_id: str, remote_call: Callable[[], Awaitable[object]]) -> None:
        """
        Remove one element immediately, then confirm with the server.

        Raises:
            Whatever remote_call raised, after restoring the full snapshot
        """
        async with self._entity_lock(entity_id):
            correlation_id = create_correlation_id()
            snapshot = list(self._items)
            self._items = [item for item in self._items if item.id != entity_id]
            await self._log(AuditEventBuilder.mutation_applied(
                self._entity_type, "delete", entity_id, correlation_id
            ))

            try:
                await remote_call()
            except (Exception, asyncio.CancelledError) as e:
                self._items = snapshot
                await self._log(AuditEventBuilder.mutation_rolled_back(
                    self._entity_type, "delete", entity_id, str(e), correlation_id
                ))
                raise

            await self._log(AuditEventBuilder.mutation_confirmed(
                self._entity_type, "delete", entity_id, correlation_id
            ))
