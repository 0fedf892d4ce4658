import pytest
from fastapi.testclient import TestClient

import siglab.server as server
from siglab.orchestrator import SimulationOrchestrator


# Fresh orchestrator before each test for isolation
@pytest.fixture(autouse=True)
def _reset_orchestrator():
    server.ORCHESTRATOR = SimulationOrchestrator(step_delay=0)
    yield
    server.ORCHESTRATOR = None


@pytest.fixture
def client():
    return TestClient(server.app)
