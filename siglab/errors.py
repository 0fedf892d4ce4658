"""
SigLab Error Taxonomy

Every failure the engine can surface derives from SimulationError.

A signature that fails to verify is NOT an error. It is the modeled
outcome of a rejected exchange and is reported through
VerificationOutcome.verified == False.
"""

from typing import Optional


class SimulationError(Exception):
    """Base class for all SigLab errors."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(message if detail is None else f"{message}: {detail}")


class KeyGenerationError(SimulationError):
    """Key-pair generation failed (unsupported parameters or backend failure)."""


class SigningError(SimulationError):
    """Signing failed (malformed private key or scheme mismatch)."""


class VerificationInputError(SimulationError):
    """
    Inputs to verify were structurally invalid.

    Distinct from a signature that was checked and rejected.
    """


class PreconditionError(SimulationError):
    """An orchestrator operation was invoked in the wrong state."""
