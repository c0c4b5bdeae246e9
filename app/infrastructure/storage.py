"""Key/value storage used to persist notification state.

A *storage area* is the shared namespace (the equivalent of one browser
profile's local storage) and every ``open()`` call returns a handle on it, the
equivalent of one tab. Writes performed through a handle are signalled to the
change listeners of every *other* handle on the same area.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.infrastructure.models import KeyValueEntryModel

logger = logging.getLogger(__name__)

StorageChangeListener = Callable[[str], None]


class StorageUnavailableError(RuntimeError):
    """Raised when the underlying storage cannot be read or written."""


class KeyValueStore(Protocol):
    """Minimal string key/value capability required by the notification store."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def add_change_listener(
        self, listener: StorageChangeListener
    ) -> Callable[[], None]: ...


class _StorageArea:
    """Keep track of the handles opened on a storage namespace."""

    def __init__(self) -> None:
        self._handles: list["_StorageHandle"] = []

    def _register(self, handle: "_StorageHandle") -> None:
        self._handles.append(handle)

    def _unregister(self, handle: "_StorageHandle") -> None:
        if handle in self._handles:
            self._handles.remove(handle)

    def _signal_change(self, key: str, origin: "_StorageHandle") -> None:
        for handle in list(self._handles):
            if handle is origin:
                continue
            handle._dispatch_change(key)


class _StorageHandle:
    """Shared listener bookkeeping for storage handles."""

    def __init__(self, area: _StorageArea) -> None:
        self._area = area
        self._listeners: list[StorageChangeListener] = []
        area._register(self)

    def add_change_listener(self, listener: StorageChangeListener) -> Callable[[], None]:
        """Register ``listener`` for writes made by other handles."""

        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def close(self) -> None:
        """Detach the handle so it no longer receives change signals."""

        self._area._unregister(self)
        self._listeners.clear()

    def _dispatch_change(self, key: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(key)
            except Exception:
                logger.exception("Storage change listener failed for key %s", key)

    def _written(self, key: str) -> None:
        self._area._signal_change(key, self)


class InMemoryStorageArea(_StorageArea):
    """Storage namespace kept in a plain dictionary."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        super().__init__()
        self.data: dict[str, str] = data if data is not None else {}

    def open(self) -> "InMemoryKeyValueStore":
        return InMemoryKeyValueStore(self)


class InMemoryKeyValueStore(_StorageHandle):
    """Handle on an :class:`InMemoryStorageArea`."""

    def __init__(self, area: InMemoryStorageArea | None = None) -> None:
        self._memory = area or InMemoryStorageArea()
        super().__init__(self._memory)

    @property
    def area(self) -> InMemoryStorageArea:
        return self._memory

    def get_item(self, key: str) -> str | None:
        return self._memory.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._memory.data[key] = value
        self._written(key)

    def remove_item(self, key: str) -> None:
        if self._memory.data.pop(key, None) is not None:
            self._written(key)


class DatabaseStorageArea(_StorageArea):
    """Storage namespace persisted in the ``key_value_entry`` table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        super().__init__()
        self.session_factory = session_factory

    def open(self) -> "DatabaseKeyValueStore":
        return DatabaseKeyValueStore(self)


class DatabaseKeyValueStore(_StorageHandle):
    """Handle on a :class:`DatabaseStorageArea`."""

    def __init__(self, area: DatabaseStorageArea) -> None:
        super().__init__(area)
        self._session_factory = area.session_factory

    def get_item(self, key: str) -> str | None:
        try:
            with self._session_factory() as session:
                entry = session.get(KeyValueEntryModel, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Unable to read storage key {key!r}") from exc

    def set_item(self, key: str, value: str) -> None:
        try:
            with self._session_factory() as session:
                entry = session.get(KeyValueEntryModel, key)
                if entry is None:
                    session.add(KeyValueEntryModel(key=key, value=value))
                else:
                    entry.value = value
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Unable to write storage key {key!r}") from exc
        self._written(key)

    def remove_item(self, key: str) -> None:
        try:
            with self._session_factory() as session:
                deleted = (
                    session.query(KeyValueEntryModel)
                    .filter(KeyValueEntryModel.key == key)
                    .delete(synchronize_session=False)
                )
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Unable to remove storage key {key!r}") from exc
        if deleted:
            self._written(key)


class UnavailableKeyValueStore:
    """Storage used where no persistent storage exists; every access fails."""

    def get_item(self, key: str) -> str | None:
        raise StorageUnavailableError("Persistent storage is not available")

    def set_item(self, key: str, value: str) -> None:
        raise StorageUnavailableError("Persistent storage is not available")

    def remove_item(self, key: str) -> None:
        raise StorageUnavailableError("Persistent storage is not available")

    def add_change_listener(self, listener: StorageChangeListener) -> Callable[[], None]:
        return lambda: None


__all__ = [
    "DatabaseKeyValueStore",
    "DatabaseStorageArea",
    "InMemoryKeyValueStore",
    "InMemoryStorageArea",
    "KeyValueStore",
    "StorageChangeListener",
    "StorageUnavailableError",
    "UnavailableKeyValueStore",
]
