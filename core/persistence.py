# core/persistence.py

"""
Key-addressable document storage used by the `ClassRegister`.

A `DocumentStore` exposes `get`, `put`, `delete`, and `batch`. A `WriteBatch` collects
puts and deletes and applies them together on `commit()`, so cascading removals either
land completely or not at all.

Two backends are provided:
    - `InMemoryDocumentStore`: a dictionary, used by tests and throwaway sessions.
    - `JsonDirectoryStore`: one JSON file per key under a root directory, written with
      `indent=2, sort_keys=True`. Keys containing "/" map onto subdirectories.

Values must be JSON-compatible (dicts, lists, strings, numbers, booleans, None).
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from typing import Any

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised by a store when a read or write cannot be completed."""


class WriteBatch:
    """
    An ordered list of pending puts and deletes against a single store.

    Notes:
        - Operations are recorded in call order; a later operation on the same key wins.
        - Nothing touches the store until `commit()` is called.
        - A batch can only be committed once.
    """

    def __init__(self, store: DocumentStore):
        self._store = store
        self._operations: list[tuple[str, str, Any]] = []
        self._committed = False

    @property
    def operations(self) -> list[tuple[str, str, Any]]:
        return list(self._operations)

    def put(self, key: str, value: Any) -> WriteBatch:
        self._operations.append(("put", key, copy.deepcopy(value)))
        return self

    def delete(self, key: str) -> WriteBatch:
        self._operations.append(("delete", key, None))
        return self

    def commit(self) -> None:
        if self._committed:
            raise PersistenceError("This batch has already been committed.")

        self._store._apply_batch(self._operations)
        self._committed = True

    def __len__(self) -> int:
        return len(self._operations)


class DocumentStore:
    """
    Abstract key-value document store.

    Subclasses implement `get`, `put`, `delete`, `keys`, and `_apply_batch`.
    """

    def get(self, key: str) -> Any | None:
        raise NotImplementedError

    def put(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def keys(self) -> list[str]:
        raise NotImplementedError

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    def _apply_batch(self, operations: list[tuple[str, str, Any]]) -> None:
        raise NotImplementedError


class InMemoryDocumentStore(DocumentStore):

    def __init__(self, initial: dict[str, Any] | None = None):
        self._documents: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._documents.get(key))

    def put(self, key: str, value: Any) -> None:
        self._documents[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._documents.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._documents)

    def _apply_batch(self, operations: list[tuple[str, str, Any]]) -> None:
        # stage on a copy so a failure part-way leaves the store untouched
        staged = dict(self._documents)

        for op, key, value in operations:
            if op == "put":
                staged[key] = value
            else:
                staged.pop(key, None)

        self._documents = staged

    def __repr__(self) -> str:
        return f"InMemoryDocumentStore({len(self._documents)} documents)"


class JsonDirectoryStore(DocumentStore):
    """
    Stores each document as `<root>/<key>.json`.

    Notes:
        - The root directory is created if it does not exist.
        - Keys may not be empty, absolute, or contain "..".
        - Writes go to a temporary file in the target directory and are moved into place
          with `os.replace`, so a reader never sees a half-written document.
        - `commit()` writes every staged file first and only then moves them into place;
          a failure while staging leaves existing documents untouched.
    """

    def __init__(self, root: str):
        self._root = os.path.abspath(os.path.expanduser(root))
        os.makedirs(self._root, exist_ok=True)

    @property
    def root(self) -> str:
        return self._root

    def get(self, key: str) -> Any | None:
        path = self._path_for(key)

        if not os.path.exists(path):
            return None

        try:
            with open(path, "r") as f:
                return json.load(f)

        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to read '{key}': {e}") from e

    def put(self, key: str, value: Any) -> None:
        temp_path = self._write_temp(key, value)
        os.replace(temp_path, self._path_for(key))

    def delete(self, key: str) -> None:
        path = self._path_for(key)

        try:
            os.remove(path)

        except FileNotFoundError:
            pass

        except OSError as e:
            raise PersistenceError(f"Failed to delete '{key}': {e}") from e

    def keys(self) -> list[str]:
        found = []

        for dir_path, _, filenames in os.walk(self._root):
            for filename in filenames:
                if not filename.endswith(".json"):
                    continue

                rel_path = os.path.relpath(os.path.join(dir_path, filename), self._root)
                found.append(rel_path[: -len(".json")].replace(os.sep, "/"))

        return sorted(found)

    def _apply_batch(self, operations: list[tuple[str, str, Any]]) -> None:
        staged: dict[str, str | None] = {}

        try:
            for op, key, value in operations:
                previous = staged.get(key)
                if previous:
                    os.remove(previous)

                staged[key] = self._write_temp(key, value) if op == "put" else None

        except (OSError, TypeError, ValueError) as e:
            for temp_path in staged.values():
                if temp_path and os.path.exists(temp_path):
                    os.remove(temp_path)

            raise PersistenceError(f"Failed to stage batch: {e}") from e

        for key, temp_path in staged.items():
            if temp_path is None:
                self.delete(key)
            else:
                os.replace(temp_path, self._path_for(key))

        logger.debug("Committed batch of %d operations to %s", len(operations), self._root)

    # === helper methods ===

    def _path_for(self, key: str) -> str:
        parts = key.split("/")

        if not key or key.startswith("/") or any(p in ("", ".", "..") for p in parts):
            raise PersistenceError(f"Invalid document key: {key!r}")

        return os.path.join(self._root, *parts) + ".json"

    def _write_temp(self, key: str, value: Any) -> str:
        path = self._path_for(key)
        dir_path = os.path.dirname(path)
        os.makedirs(dir_path, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".tmp", dir=dir_path, delete=False
        ) as f:
            temp_path = f.name

            try:
                json.dump(value, f, indent=2, sort_keys=True)

            except (TypeError, ValueError):
                f.close()
                os.remove(temp_path)
                raise

        return temp_path

    def __repr__(self) -> str:
        return f"JsonDirectoryStore({self._root})"
