"""
SigLab Data Model

Value types shared by the crypto provider, the attack injector and the
simulation orchestrator. Everything here is immutable once built.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Union


DEFAULT_MESSAGE = "Hello, this is a secure message!"
SUPPORTED_KEY_BITS = (2048, 3072, 4096)


class Algorithm(str, Enum):
    """RSA signature padding schemes."""
    PSS = "PSS"              # probabilistic (salted)
    PKCS1V15 = "PKCS1v1.5"   # deterministic

    @classmethod
    def parse(cls, value: Union[str, "Algorithm"]) -> "Algorithm":
        """Accept the enum, its value, or the Web Crypto algorithm names."""
        if isinstance(value, cls):
            return value
        aliases = {
            "PSS": cls.PSS,
            "RSA-PSS": cls.PSS,
            "PKCS1V1.5": cls.PKCS1V15,
            "PKCS1V15": cls.PKCS1V15,
            "PKCS1-V1_5": cls.PKCS1V15,
            "RSASSA-PKCS1-V1_5": cls.PKCS1V15,
        }
        try:
            return aliases[str(value).strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unsupported algorithm '{value}': "
                f"must be one of {[a.value for a in cls]}"
            ) from None


class Principal(str, Enum):
    """The two simulated parties. A signs, B verifies."""
    A = "A"
    B = "B"


class AttackKind(str, Enum):
    """Attacks that can be injected into a run."""
    TAMPER_MESSAGE = "tamper_message"
    CORRUPT_SIGNATURE = "corrupt_signature"
    SWAP_KEY = "swap_key"


# Fixed order used whenever attacks are reported.
ATTACK_ORDER = (
    AttackKind.TAMPER_MESSAGE,
    AttackKind.CORRUPT_SIGNATURE,
    AttackKind.SWAP_KEY,
)


class RunState(str, Enum):
    """
    Orchestrator state machine.

    IDLE: no keys provisioned
    KEYS_GENERATING: key provisioning in flight
    KEYS_READY: both principals hold complete key pairs
    HASHING / SIGNING / TRANSMITTING / VERIFYING: run in progress
    COMPLETE: run finished with a verification outcome (terminal)
    FAILED: run aborted by an unexpected error (terminal)
    """
    IDLE = "IDLE"
    KEYS_GENERATING = "KEYS_GENERATING"
    KEYS_READY = "KEYS_READY"
    HASHING = "HASHING"
    SIGNING = "SIGNING"
    TRANSMITTING = "TRANSMITTING"
    VERIFYING = "VERIFYING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"

    def is_running(self) -> bool:
        return self in (
            RunState.KEYS_GENERATING,
            RunState.HASHING,
            RunState.SIGNING,
            RunState.TRANSMITTING,
            RunState.VERIFYING,
        )


@dataclass(frozen=True)
class ScenarioConfig:
    """
    Snapshot of one signing scenario.

    Frozen: a run reads the snapshot it was given, so later edits made by
    the caller never leak into an in-flight run.
    """
    message: str = DEFAULT_MESSAGE
    algorithm: Algorithm = Algorithm.PSS
    key_bits: int = 2048
    attacks: FrozenSet[AttackKind] = field(default_factory=frozenset)

    def __post_init__(self):
        if not isinstance(self.message, str):
            raise ValueError("message must be text")
        object.__setattr__(self, "algorithm", Algorithm.parse(self.algorithm))
        if self.key_bits not in SUPPORTED_KEY_BITS:
            raise ValueError(
                f"Unsupported key size {self.key_bits}: "
                f"must be one of {list(SUPPORTED_KEY_BITS)}"
            )
        object.__setattr__(
            self, "attacks", frozenset(AttackKind(a) for a in self.attacks)
        )

    @classmethod
    def from_flags(
        cls,
        message: str = DEFAULT_MESSAGE,
        algorithm: Union[str, Algorithm] = Algorithm.PSS,
        key_bits: int = 2048,
        tamper_message: bool = False,
        swap_key: bool = False,
        corrupt_signature: bool = False,
    ) -> "ScenarioConfig":
        """Build a config from the three attack toggles."""
        flags = {
            AttackKind.TAMPER_MESSAGE: tamper_message,
            AttackKind.SWAP_KEY: swap_key,
            AttackKind.CORRUPT_SIGNATURE: corrupt_signature,
        }
        return cls(
            message=message,
            algorithm=algorithm,
            key_bits=key_bits,
            attacks=frozenset(kind for kind, on in flags.items() if on),
        )

    @property
    def tamper_message(self) -> bool:
        return AttackKind.TAMPER_MESSAGE in self.attacks

    @property
    def swap_key(self) -> bool:
        return AttackKind.SWAP_KEY in self.attacks

    @property
    def corrupt_signature(self) -> bool:
        return AttackKind.CORRUPT_SIGNATURE in self.attacks

    def ordered_attacks(self) -> List[AttackKind]:
        """Active attacks in reporting order: tamper, corrupt, swap."""
        return [kind for kind in ATTACK_ORDER if kind in self.attacks]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "algorithm": self.algorithm.value,
            "key_bits": self.key_bits,
            "tamper_message": self.tamper_message,
            "swap_key": self.swap_key,
            "corrupt_signature": self.corrupt_signature,
        }


@dataclass(frozen=True)
class KeyHandle:
    """Opaque key reference, bound to the scheme it was generated for."""
    key: Any
    algorithm: Algorithm
    key_bits: int


@dataclass(frozen=True)
class KeyPair:
    """A principal's key pair. Both halves or nothing."""
    public_key: KeyHandle
    private_key: KeyHandle

    def __post_init__(self):
        if self.public_key is None or self.private_key is None:
            raise ValueError("KeyPair requires both a public and a private key")


@dataclass(frozen=True)
class SigningArtifact:
    """What A produced: the digest and the untouched signature."""
    digest: bytes
    signature: bytes
    algorithm: Algorithm


@dataclass(frozen=True)
class Envelope:
    """Message and signature as delivered to B."""
    message: str
    signature: bytes


@dataclass(frozen=True)
class VerificationOutcome:
    """Result of B's verification step."""
    verified: bool
    used_key: Principal

    def to_dict(self) -> Dict[str, Any]:
        return {"verified": self.verified, "used_key": self.used_key.value}


def key_presence(pairs: Dict[Principal, Optional[KeyPair]]) -> Dict[str, bool]:
    """Per-principal key presence flags."""
    return {p.value: pairs.get(p) is not None for p in Principal}
