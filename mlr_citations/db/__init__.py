from mlr_citations.db.database import get_db
from mlr_citations.db.repositories import EvidenceRepository
from mlr_citations.db.store import EvidenceStore

__all__ = ["EvidenceRepository", "EvidenceStore", "get_db"]
