"""
HTTP service for SigLab.

Exposes one in-process SimulationOrchestrator to a browser UI:
provisioning, runs, log clearing, read-only state and exports.
"""

from fastapi import FastAPI, HTTPException

from .config import is_production
from .errors import PreconditionError
from .exporters import SIGNATURE_FILENAME, export_key_pair, signature_base64
from .models import Principal
from .orchestrator import SimulationOrchestrator
from .schemas import ScenarioRequest

# Interactive API docs are only served outside production
app = FastAPI(
    title="SigLab Signature Simulator",
    docs_url=None if is_production() else "/docs",
    redoc_url=None if is_production() else "/redoc",
)

ORCHESTRATOR: SimulationOrchestrator = None


def get_orchestrator() -> SimulationOrchestrator:
    if ORCHESTRATOR is None:
        _startup()
    return ORCHESTRATOR


@app.on_event("startup")
def _startup():
    global ORCHESTRATOR
    ORCHESTRATOR = SimulationOrchestrator()


@app.get("/state")
def get_state():
    return get_orchestrator().to_dict()


@app.get("/log")
def get_log():
    return {"entries": get_orchestrator().event_log.to_list()}


@app.post("/keys")
async def provision_keys(req: ScenarioRequest):
    orch = get_orchestrator()
    try:
        await orch.provision_keys(req.to_config())
    except PreconditionError as e:
        raise HTTPException(409, str(e))
    return orch.to_dict()


@app.post("/scenario")
async def run_scenario(req: ScenarioRequest):
    orch = get_orchestrator()
    try:
        await orch.run_scenario(req.to_config())
    except PreconditionError as e:
        raise HTTPException(409, str(e))
    return orch.to_dict()


@app.delete("/log")
def clear_log():
    orch = get_orchestrator()
    orch.clear_log()
    return orch.to_dict()


@app.get("/export/keys/{principal}")
def export_keys(principal: Principal, include_private: bool = False):
    key_pair = get_orchestrator().key_pair(principal)
    if key_pair is None:
        raise HTTPException(404, "KEYS_NOT_READY")
    return export_key_pair(principal, key_pair, include_private=include_private)


@app.get("/export/signature")
def export_signature():
    signature = get_orchestrator().signature
    if signature is None:
        raise HTTPException(404, "NO_SIGNATURE")
    return {"filename": SIGNATURE_FILENAME, "signature_b64": signature_base64(signature)}
