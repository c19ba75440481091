"""
Firestore Service
Firestore-backed implementation of the commission store
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core.exceptions import AlreadyExists, GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from pydantic import ValidationError
from google.cloud.firestore_v1.base_query import FieldFilter

from agentos.core.config import settings
from agentos.models import Agent, Commission, Order
from agentos.services.store import CommissionStoreError, OperationResult

logger = logging.getLogger(__name__)

# Failures reported as an unsuccessful OperationResult
STORE_ERRORS = (CommissionStoreError, GoogleAPIError, GoogleAuthError, ValidationError)

# Lazy initialization for the Firestore client
_client = None


def get_firestore_client():
    """Initialize Firebase Admin once and return a Firestore client"""
    global _client

    if _client is None:
        try:
            if not firebase_admin._apps:
                if settings.FIREBASE_CREDENTIALS:
                    cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS)
                    firebase_admin.initialize_app(cred)
                else:
                    # Application Default Credentials (Cloud Run)
                    firebase_admin.initialize_app(credentials.ApplicationDefault(), {
                        "projectId": settings.GOOGLE_PROJECT_ID
                    })
                logger.info("Firebase Admin initialized successfully")
            _client = firestore.client()
        except (ValueError, GoogleAPIError, GoogleAuthError, OSError) as e:
            logger.error(f"Failed to initialize Firebase Admin: {e}")
            raise CommissionStoreError(f"Firestore unavailable: {e}")

    return _client


class FirestoreCommissionStore:
    """Commission store over the `users`, `commission-calculations` and `shopify-orders` collections"""

    def __init__(self, client=None):
        self._client = client
        self.users_collection = settings.USERS_COLLECTION
        self.commissions_collection = settings.COMMISSIONS_COLLECTION
        self.orders_collection = settings.ORDERS_COLLECTION

    @property
    def db(self):
        if self._client is None:
            self._client = get_firestore_client()
        return self._client

    def get_agent(self, agent_id: str) -> OperationResult:
        try:
            doc = self.db.collection(self.users_collection).document(agent_id).get()
            if not doc.exists:
                return OperationResult.fail("Agent not found")

            data = doc.to_dict() or {}
            if data.get("role") != "agent":
                return OperationResult.fail("Agent not found")

            agent = Agent.model_validate({**data, "id": doc.id})
        except STORE_ERRORS as e:
            logger.error(f"Get agent error: {e}")
            return OperationResult.fail(str(e))

        return OperationResult.ok(agent)

    def get_agent_commissions(
        self,
        agent_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> OperationResult:
        """
        Get commissions for an agent, newest first

        Args:
            agent_id: Agent document ID
            start_date: Inclusive lower bound on calculatedAt
            end_date: Inclusive upper bound on calculatedAt

        Returns:
            OperationResult with a list of Commission objects
        """
        try:
            query = self.db.collection(self.commissions_collection).where(
                filter=FieldFilter("agentId", "==", agent_id)
            )
            if start_date is not None:
                query = query.where(filter=FieldFilter("calculatedAt", ">=", start_date))
            if end_date is not None:
                query = query.where(filter=FieldFilter("calculatedAt", "<=", end_date))

            docs = query.order_by("calculatedAt", direction=firestore.Query.DESCENDING).stream()
            commissions = [Commission.model_validate({**doc.to_dict(), "id": doc.id}) for doc in docs]
        except STORE_ERRORS as e:
            logger.error(f"Get agent commissions error: {e}")
            return OperationResult.fail(str(e))

        return OperationResult.ok(commissions)

    def save_commission(self, commission: Commission) -> OperationResult:
        """
        Create the commission document.

        Uses `create`, so a second write for the same commission ID is rejected.
        """
        try:
            collection = self.db.collection(self.commissions_collection)
            doc_ref = collection.document(commission.id) if commission.id else collection.document()
            doc_ref.create({
                **self._to_document(commission),
                "id": doc_ref.id,
                "createdAt": firestore.SERVER_TIMESTAMP,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            })
        except AlreadyExists:
            logger.warning(f"Commission {commission.id} already exists, not overwritten")
            return OperationResult.fail(f"Commission {commission.id} already exists")
        except STORE_ERRORS as e:
            logger.error(f"Save commission error: {e}")
            return OperationResult.fail(str(e))

        return OperationResult.ok(id=doc_ref.id)

    def get_commission(self, commission_id: str) -> OperationResult:
        try:
            doc = self.db.collection(self.commissions_collection).document(commission_id).get()
            if not doc.exists:
                return OperationResult.fail("Commission not found")
            commission = Commission.model_validate({**doc.to_dict(), "id": doc.id})
        except STORE_ERRORS as e:
            logger.error(f"Get commission error: {e}")
            return OperationResult.fail(str(e))

        return OperationResult.ok(commission)

    def get_order(self, order_id: str) -> OperationResult:
        try:
            doc = self.db.collection(self.orders_collection).document(order_id).get()
            if not doc.exists:
                return OperationResult.fail("Order not found")
            order = Order.model_validate({**doc.to_dict(), "id": doc.id})
        except STORE_ERRORS as e:
            logger.error(f"Get order error: {e}")
            return OperationResult.fail(str(e))

        return OperationResult.ok(order)

    def mark_order_commission(self, order_id: str, amount: float) -> OperationResult:
        try:
            self.db.collection(self.orders_collection).document(order_id).update({
                "commissionCalculated": True,
                "commissionAmount": amount,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            })
        except STORE_ERRORS as e:
            logger.error(f"Mark order commission error: {e}")
            return OperationResult.fail(str(e))

        return OperationResult.ok(id=order_id)

    @staticmethod
    def _to_document(commission: Commission) -> Dict[str, Any]:
        data = commission.model_dump(by_alias=True, exclude={"id"})
        data["status"] = commission.status.value
        return data
