"""
Alias store: the forward and reverse link indices.

forward: alias -> Entry (authoritative, persisted)
reverse: link -> [alias, ...] (derived from forward, never persisted)

Invariants, true after every mutating call returns:
- every alias in forward appears exactly once in reverse[entry.link]
- reverse never holds an empty alias list
- every alias in reverse exists in forward and maps to that link

The store itself is not synchronized; LinkService guards it with a
reader-writer lock.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from shortlink_app.errors import AliasInUse, InvariantViolation, StoreIOError
from shortlink_app.models.entry import Entry
from shortlink_app.services.key_generator import KeyGenerator
from shortlink_app.storage import codec


class AliasStore:
    """Bidirectional alias <-> link index"""

    def __init__(
        self,
        forward: Optional[Dict[str, Entry]] = None,
        key_generator: Optional[KeyGenerator] = None
    ):
        self._forward: Dict[str, Entry] = {}
        self._reverse: Dict[str, List[str]] = {}
        self.key_generator = key_generator or KeyGenerator()

        # Single pass over the forward index
        for alias, entry in (forward or {}).items():
            self._insert(alias, entry)

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        key_generator: Optional[KeyGenerator] = None
    ) -> "AliasStore":
        """
        Load the store from a link data file.

        A missing file is not an error: parent directories are created and
        an empty store is written there.

        Raises:
            StoreIOError: file or directory could not be read/created
            StoreParseError: file exists but is invalid
        """
        path = Path(path)

        if not path.exists():
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StoreIOError(path, f"Could not create directory: {e}") from e

            store = cls(key_generator=key_generator)
            store.save(path)
            print(f"✅ Created empty link data file: {path}")
            return store

        store = cls(codec.read(path), key_generator=key_generator)
        print(f"✅ Loaded {len(store)} links from {path}")
        return store

    def save(self, path: Union[str, Path]) -> None:
        """
        Persist the forward index.

        Raises:
            StoreIOError: file could not be written
        """
        codec.write(path, self._forward)

    def add(self, link: str) -> Tuple[str, Entry]:
        """
        Add a link under a generated alias.

        If the link is already stored under its generated alias, the
        existing (alias, entry) pair is returned and nothing changes.
        """
        alias, existing = self.key_generator.derive(link, self._forward)
        if existing is not None:
            return alias, existing

        entry = Entry.new(link)
        self._insert(alias, entry)
        return alias, entry

    def add_named(self, alias: str, link: str) -> Entry:
        """
        Add a link under an explicit alias.

        Raises:
            AliasInUse: alias already exists
        """
        if alias in self._forward:
            raise AliasInUse(alias)

        entry = Entry.new(link)
        self._insert(alias, entry)
        return entry

    def restore(self, alias: str, entry: Entry) -> None:
        """
        Put back an entry exactly as it was (used to undo a remove).

        Raises:
            AliasInUse: alias already exists
        """
        if alias in self._forward:
            raise AliasInUse(alias)
        self._insert(alias, entry)

    def get(self, alias: str) -> Optional[Entry]:
        return self._forward.get(alias)

    def get_mut(self, alias: str) -> Optional[Entry]:
        """Stored entry itself, for in-place metadata updates"""
        return self._forward.get(alias)

    def remove(self, alias: str) -> Optional[Entry]:
        """
        Remove an alias.

        Returns the removed entry, or None if the alias did not exist.

        Raises:
            InvariantViolation: reverse index has no record of the alias
        """
        entry = self._forward.get(alias)
        if entry is None:
            return None

        aliases = self._reverse.get(entry.link)
        if not aliases or alias not in aliases:
            raise InvariantViolation(
                f"Missing reverse lookup entry for '{alias}' -> '{entry.link}'"
            )

        del self._forward[alias]
        aliases.remove(alias)
        if not aliases:
            del self._reverse[entry.link]

        return entry

    def find_by_link(self, link: str) -> List[str]:
        """Aliases pointing at a link (empty list if none)"""
        return list(self._reverse.get(link, ()))

    def iterate(self) -> List[Tuple[str, Entry]]:
        """Snapshot of all (alias, entry) pairs, in no particular order"""
        return list(self._forward.items())

    def check_invariants(self) -> None:
        """
        Verify forward and reverse indices agree.

        Raises:
            InvariantViolation: on the first inconsistency found
        """
        for alias, entry in self._forward.items():
            if self._reverse.get(entry.link, []).count(alias) != 1:
                raise InvariantViolation(
                    f"Alias '{alias}' not listed exactly once under '{entry.link}'"
                )

        for link, aliases in self._reverse.items():
            if not aliases:
                raise InvariantViolation(f"Empty reverse entry for '{link}'")
            for alias in aliases:
                entry = self._forward.get(alias)
                if entry is None or entry.link != link:
                    raise InvariantViolation(
                        f"Reverse entry '{link}' lists '{alias}' which does not map to it"
                    )

    def _insert(self, alias: str, entry: Entry) -> None:
        self._forward[alias] = entry
        self._reverse.setdefault(entry.link, []).append(alias)

    def __len__(self) -> int:
        return len(self._forward)

    def __contains__(self, alias: str) -> bool:
        return alias in self._forward
