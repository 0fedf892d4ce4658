"""
SigLab: Hash-then-Sign Signature Simulator

Version: 1.0.0
License: Apache 2.0

A teaching engine for asymmetric digital signatures. Two principals,
A (signer) and B (verifier), exchange one signed message while an
optional adversary tampers with the message, corrupts the signature
bytes, or makes B trust the wrong public key. Every step is narrated
in an ordered Event Log, and the verification outcome is a pure
function of the scenario and the provisioned keys.

Usage:
    import asyncio
    from siglab import SimulationOrchestrator, ScenarioConfig

    orchestrator = SimulationOrchestrator()
    config = ScenarioConfig.from_flags(
        message="Hello, this is a secure message!",
        algorithm="PSS",
        key_bits=2048,
        tamper_message=True,
    )

    asyncio.run(orchestrator.provision_keys(config))
    asyncio.run(orchestrator.run_scenario(config))

    for entry in orchestrator.log:
        print(entry.actor.value, entry.level.value, entry.text)

    orchestrator.outcome.verified   # False: the message was tampered
"""

__version__ = "1.0.0"
__license__ = "Apache-2.0"

# Data model
from .models import (
    Algorithm,
    AttackKind,
    Envelope,
    KeyHandle,
    KeyPair,
    Principal,
    RunState,
    ScenarioConfig,
    SigningArtifact,
    VerificationOutcome,
    DEFAULT_MESSAGE,
    SUPPORTED_KEY_BITS,
)

# Errors
from .errors import (
    SimulationError,
    KeyGenerationError,
    SigningError,
    VerificationInputError,
    PreconditionError,
)

# Crypto provider
from .crypto_provider import CryptoProvider, RsaCryptoProvider

# Attacks
from .attacks import (
    TAMPER_MARKER,
    CORRUPTED_BYTE_COUNT,
    Corruption,
    attacks_at,
    corrupt_signature,
    tamper_message,
    select_verification_key,
)

# Event log
from .event_log import Actor, Level, LogEntry, EventLog

# Orchestrator
from .orchestrator import SimulationOrchestrator

# Exporters
from .exporters import (
    public_key_pem,
    private_key_pem,
    signature_base64,
    export_key_pair,
)


__all__ = [
    # Version
    "__version__",

    # Models
    "Algorithm",
    "AttackKind",
    "Envelope",
    "KeyHandle",
    "KeyPair",
    "Principal",
    "RunState",
    "ScenarioConfig",
    "SigningArtifact",
    "VerificationOutcome",
    "DEFAULT_MESSAGE",
    "SUPPORTED_KEY_BITS",

    # Errors
    "SimulationError",
    "KeyGenerationError",
    "SigningError",
    "VerificationInputError",
    "PreconditionError",

    # Crypto provider
    "CryptoProvider",
    "RsaCryptoProvider",

    # Attacks
    "TAMPER_MARKER",
    "CORRUPTED_BYTE_COUNT",
    "Corruption",
    "attacks_at",
    "corrupt_signature",
    "tamper_message",
    "select_verification_key",

    # Event log
    "Actor",
    "Level",
    "LogEntry",
    "EventLog",

    # Orchestrator
    "SimulationOrchestrator",

    # Exporters
    "public_key_pem",
    "private_key_pem",
    "signature_base64",
    "export_key_pair",
]
