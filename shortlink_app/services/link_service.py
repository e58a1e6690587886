from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional, Tuple, Union

import aiorwlock

from shortlink_app.errors import NotFound, PersistenceError
from shortlink_app.models.entry import Entry
from shortlink_app.services.alias_store import AliasStore


class LinkService:
    """
    Shared handle to the alias store.

    One instance is created at startup and handed to every route and to
    the merge worker. It wraps the store with a reader-writer lock:

    - get / list / find_by_link / redirect lookups take the reader lock
    - add / delete and the merge worker take the writer lock

    Mutations are persisted before the lock is released. If persisting
    fails, the in-memory change is rolled back and the error propagates,
    so a caller never reports an unsaved change as done.
    """

    def __init__(self, store: AliasStore, data_path: Union[str, Path]):
        """
        Initialize link service.

        Args:
            store: Alias store (owned by this service from now on)
            data_path: Link data file written after every mutation
        """
        self.store = store
        self.data_path = Path(data_path)
        self._lock = aiorwlock.RWLock()

    @classmethod
    def load(cls, data_path: Union[str, Path]) -> "LinkService":
        """Load the store from data_path (created if missing)"""
        return cls(AliasStore.load(data_path), data_path)

    async def add_link(self, link: str, key: Optional[str] = None) -> Tuple[str, Entry, bool]:
        """
        Add a link, under `key` if given or a generated alias otherwise.

        Returns:
            (alias, entry, created) - created is False when the link was
            already stored under its generated alias

        Raises:
            AliasInUse: explicit key is taken
            KeyspaceExhausted: no generated alias available
            PersistenceError: saving failed (change rolled back)
        """
        async with self._lock.writer_lock:
            size_before = len(self.store)

            if key is not None:
                alias, entry = key, self.store.add_named(key, link)
            else:
                alias, entry = self.store.add(link)

            created = len(self.store) > size_before
            if created:
                try:
                    self.store.save(self.data_path)
                except PersistenceError as e:
                    self.store.remove(alias)
                    print(f"❌ Could not create link '{alias}': {e}")
                    raise

            return alias, entry.model_copy(deep=True), created

    async def get_link(self, key: str) -> Entry:
        """
        Get a copy of the entry for a key.

        Raises:
            NotFound: key does not exist
        """
        async with self._lock.reader_lock:
            entry = self.store.get(key)
            if entry is None:
                raise NotFound(key)
            return entry.model_copy(deep=True)

    async def resolve(self, key: str) -> Optional[str]:
        """Target link for a key, or None (redirect hot path)"""
        async with self._lock.reader_lock:
            entry = self.store.get(key)
            return entry.link if entry is not None else None

    async def key_in_use(self, key: str) -> bool:
        async with self._lock.reader_lock:
            return key in self.store

    async def list_links(self) -> List[Tuple[str, Entry]]:
        async with self._lock.reader_lock:
            return [(alias, entry.model_copy(deep=True)) for alias, entry in self.store.iterate()]

    async def find_by_link(self, link: str) -> List[str]:
        async with self._lock.reader_lock:
            return self.store.find_by_link(link)

    async def delete_link(self, key: str) -> Entry:
        """
        Delete a key.

        Raises:
            NotFound: key does not exist
            PersistenceError: saving failed (entry restored)
        """
        async with self._lock.writer_lock:
            entry = self.store.remove(key)
            if entry is None:
                raise NotFound(key)

            try:
                self.store.save(self.data_path)
            except PersistenceError as e:
                self.store.restore(key, entry)
                print(f"❌ Could not delete link '{key}': {e}")
                raise

            return entry

    async def save(self) -> None:
        """Persist current state (usage counters included)"""
        async with self._lock.reader_lock:
            self.store.save(self.data_path)

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[AliasStore]:
        """
        Exclusive access to the store for batch updates.

        Usage:
            async with service.exclusive() as store:
                store.get_mut(alias).metadata.used += 1
        """
        async with self._lock.writer_lock:
            yield self.store
