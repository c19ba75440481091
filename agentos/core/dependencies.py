"""
FastAPI dependencies for the commission store and service
"""
import logging
from functools import lru_cache

from fastapi import Depends

from agentos.core.config import settings
from agentos.services.commission_service import CommissionService
from agentos.services.firebase_service import FirestoreCommissionStore
from agentos.services.store import CommissionStore, InMemoryCommissionStore

logger = logging.getLogger(__name__)


@lru_cache
def get_store() -> CommissionStore:
    """
    Shared commission store.

    Firestore when FIRESTORE_ENABLED is set, otherwise an in-process store
    (development only, data is lost on restart).
    """
    if settings.FIRESTORE_ENABLED:
        return FirestoreCommissionStore()

    logger.warning("FIRESTORE_ENABLED is off, using in-memory commission store")
    return InMemoryCommissionStore()


def get_commission_service(store: CommissionStore = Depends(get_store)) -> CommissionService:
    """Dependency to get a commission service bound to the configured rules"""
    return CommissionService(store, rules=settings.commission_rules())
