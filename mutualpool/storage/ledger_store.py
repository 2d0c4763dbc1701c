# mutualpool/storage/ledger_store.py
"""Single-document storage for the ledger state."""

from typing import Optional

from mutualpool.storage.base import JSONFile
from mutualpool.models.ledger import LedgerState
from mutualpool.core.logging import get_logger

logger = get_logger(__name__)


class LedgerStore:
    """Holds the one LedgerState document: balance, counters, indexes.

    Services mutate the state in place, so ``begin`` keeps a deep copy of the
    whole document for ``rollback``.
    """

    def __init__(self, data_dir: Optional[str] = None):
        self._file = JSONFile(data_dir, "ledger.json")
        self._state: Optional[LedgerState] = None
        self._dirty = False
        self._undo: Optional[LedgerState] = None

    @property
    def state(self) -> LedgerState:
        if self._state is None:
            data = self._file.load(default=None)
            self._state = LedgerState(**data) if data else LedgerState()
            if data:
                logger.info(f"Loaded ledger state from {self._file.filepath}")
        return self._state

    def touch(self):
        """Mark the state as changed so the next flush writes it."""
        self._dirty = True

    def begin(self):
        self._undo = self.state.model_copy(deep=True)

    def rollback(self):
        if self._undo is not None:
            self._state = self._undo
        self._undo = None
        self._dirty = False

    def commit(self):
        self._undo = None

    def flush(self):
        if not self._dirty:
            return
        self.persist()

    def persist(self):
        self._file.save(self.state.model_dump(mode='json'))
        self._dirty = False
