# mutualpool/storage/base.py
"""Base storage interface."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, List, Dict, Any
from pathlib import Path
import json

from mutualpool.core.exceptions import StorageError
from mutualpool.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


class JSONFile:
    """A single JSON document on disk. A missing directory means memory-only."""

    def __init__(self, data_dir: Optional[str], filename: str):
        self.data_dir = Path(data_dir) if data_dir else None
        self.filepath = self.data_dir / filename if self.data_dir else None
        if self.data_dir:
            self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def persistent(self) -> bool:
        return self.filepath is not None

    def load(self, default: Any) -> Any:
        """Load data from JSON file."""
        if not self.persistent or not self.filepath.exists():
            return default
        try:
            with open(self.filepath, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load {self.filepath}: {e}")
            raise StorageError(str(e), path=str(self.filepath)) from e

    def save(self, data: Any):
        """Replace the file atomically via a temp file."""
        if not self.persistent:
            return
        tmp_path = self.filepath.with_suffix(self.filepath.suffix + ".tmp")
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            tmp_path.replace(self.filepath)
        except OSError as e:
            logger.error(f"Failed to save {self.filepath}: {e}")
            raise StorageError(str(e), path=str(self.filepath)) from e


class BaseStore(ABC, Generic[T]):
    """Abstract base class for keyed record stores.

    Writes land in the in-memory cache and mark the store dirty; ``flush``
    persists them. Between ``begin`` and ``commit`` every write journals the
    record it replaces, and ``rollback`` puts those records back.
    """

    def __init__(self, data_dir: Optional[str], filename: str):
        self._file = JSONFile(data_dir, filename)
        self._cache: Dict[int, T] = {}
        self._loaded = False
        self._dirty = False
        self._undo: Optional[Dict[int, Optional[T]]] = None

    @property
    def filepath(self) -> Optional[Path]:
        return self._file.filepath

    @abstractmethod
    def _serialize(self, entity: T) -> Dict[str, Any]:
        """Serialize entity to dict."""
        pass

    @abstractmethod
    def _deserialize(self, data: Dict[str, Any]) -> T:
        """Deserialize dict to entity."""
        pass

    @abstractmethod
    def _get_id(self, entity: T) -> int:
        """Get entity ID."""
        pass

    @abstractmethod
    def _copy(self, entity: T) -> T:
        """Detached copy of an entity for the undo journal."""
        pass

    def _load_all(self) -> Dict[int, T]:
        """Load and deserialize all entities."""
        if not self._loaded:
            data = self._file.load(default={})
            for key, value in data.items():
                self._cache[int(key)] = self._deserialize(value)
            self._loaded = True
            if self._file.persistent:
                logger.info(f"Loaded {len(self._cache)} records from {self.filepath}")
        return self._cache

    def save(self, entity: T) -> T:
        """Save an entity."""
        cache = self._load_all()
        entity_id = self._get_id(entity)
        if self._undo is not None and entity_id not in self._undo:
            previous = cache.get(entity_id)
            self._undo[entity_id] = self._copy(previous) if previous is not None else None
        cache[entity_id] = entity
        self._dirty = True
        logger.debug(f"Staged entity: {entity_id}")
        return entity

    def get(self, entity_id: int) -> Optional[T]:
        """Get entity by ID."""
        return self._load_all().get(entity_id)

    def get_all(self) -> List[T]:
        """Get all entities, ordered by ID."""
        cache = self._load_all()
        return [cache[k] for k in sorted(cache)]

    def count(self) -> int:
        """Count total entities."""
        return len(self._load_all())

    # ===================
    # Transactions
    # ===================

    def begin(self):
        self._load_all()
        self._undo = {}

    def rollback(self):
        """Put back every record replaced since ``begin``."""
        for entity_id, previous in (self._undo or {}).items():
            if previous is None:
                self._cache.pop(entity_id, None)
            else:
                self._cache[entity_id] = previous
        self._undo = None
        self._dirty = False

    def commit(self):
        self._undo = None

    def flush(self):
        """Persist staged writes."""
        if not self._dirty:
            return
        self.persist()

    def persist(self):
        """Write the whole cache, staged or not."""
        data = {str(k): self._serialize(v) for k, v in self._load_all().items()}
        self._file.save(data)
        self._dirty = False
