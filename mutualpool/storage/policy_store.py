# mutualpool/storage/policy_store.py
"""JSON-based storage for policy records."""

from typing import Optional, Dict, Any, List

from mutualpool.storage.base import BaseStore
from mutualpool.models.policy import Policy


class PolicyStore(BaseStore[Policy]):
    """
    Storage for policies, keyed by policy id.

    Policies are never deleted; the store has no delete path.
    """

    def __init__(self, data_dir: Optional[str] = None):
        super().__init__(data_dir=data_dir, filename="policies.json")

    def _get_id(self, entity: Policy) -> int:
        return entity.policy_id

    def _serialize(self, entity: Policy) -> Dict[str, Any]:
        return entity.model_dump(mode='json')

    def _deserialize(self, data: Dict[str, Any]) -> Policy:
        return Policy(**data)

    def _copy(self, entity: Policy) -> Policy:
        return entity.model_copy()

    # ===================
    # Query Methods
    # ===================

    def get_claimed(self) -> List[Policy]:
        return [p for p in self.get_all() if p.has_claimed]

    def get_covering(self, now: int) -> List[Policy]:
        """Policies still inside their coverage window."""
        return [p for p in self.get_all() if p.covers(now)]
