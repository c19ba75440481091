# Shared fixtures for the commission engine tests
import os

import pytest

# Tests never talk to Firestore
os.environ.setdefault("FIRESTORE_ENABLED", "false")

from agentos.models import Agent
from agentos.services.commission_service import CommissionService
from agentos.services.store import InMemoryCommissionStore

from factories import AGENT_ID, NOW


@pytest.fixture
def store():
    return InMemoryCommissionStore()


@pytest.fixture
def service(store):
    return CommissionService(store, clock=lambda: NOW)


@pytest.fixture
def agent(store):
    """Provisioned agent without a stored commission rate"""
    return store.add_agent(Agent(id=AGENT_ID, role="agent", territory="Selangor"))
