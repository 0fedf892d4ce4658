"""
SigLab Attack Injector

Pure transforms an adversary applies to a run. Each attack is owned by
exactly one pipeline stage and touches one field only:

    CORRUPT_SIGNATURE -> SIGNING       (signature bytes, after signing)
    TAMPER_MESSAGE    -> TRANSMITTING  (message text, in transit)
    SWAP_KEY          -> VERIFYING     (which public key B trusts)

Because the fields are disjoint, any combination composes without
interference.
"""

import random
from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .models import ATTACK_ORDER, AttackKind, Envelope, Principal, RunState


TAMPER_MARKER = " [TAMPERED]"
CORRUPTED_BYTE_COUNT = 3

ATTACK_STAGES = {
    AttackKind.CORRUPT_SIGNATURE: RunState.SIGNING,
    AttackKind.TAMPER_MESSAGE: RunState.TRANSMITTING,
    AttackKind.SWAP_KEY: RunState.VERIFYING,
}

# Explanation appended when verification fails, one per active attack.
FAILURE_EXPLANATIONS = {
    AttackKind.TAMPER_MESSAGE:
        "Verification failed because the message was tampered during transmission.",
    AttackKind.CORRUPT_SIGNATURE:
        "Verification failed because the signature bytes were corrupted.",
    AttackKind.SWAP_KEY:
        "Verification failed because the wrong public key was used for verification.",
}


def attacks_at(active: Iterable[AttackKind], stage: RunState) -> FrozenSet[AttackKind]:
    """Subset of the active attacks that the given stage applies."""
    return frozenset(kind for kind in active if ATTACK_STAGES[kind] == stage)


def explain_failure(active: Iterable[AttackKind]) -> List[str]:
    """Failure explanations for the active attacks, in reporting order."""
    active = set(active)
    return [FAILURE_EXPLANATIONS[kind] for kind in ATTACK_ORDER if kind in active]


def tamper_message(envelope: Envelope, marker: str = TAMPER_MARKER) -> Envelope:
    """Append the marker to the message. The signature stays as signed."""
    return replace(envelope, message=envelope.message + marker)


@dataclass(frozen=True)
class Corruption:
    """A corrupted signature and the byte positions that were flipped."""
    signature: bytes
    positions: Tuple[int, ...]


def corrupt_signature(
    signature: bytes,
    rng: Optional[random.Random] = None,
    count: int = CORRUPTED_BYTE_COUNT
) -> Corruption:
    """
    Flip every bit of `count` distinct byte positions.

    Positions are sampled without replacement, so exactly
    min(count, len(signature)) bytes differ from the input. A corrupted
    RSA signature could in theory still verify; that chance is accepted,
    never patched over.

    Args:
        signature: Signature bytes to corrupt
        rng: Random source; pass a seeded random.Random for reproducible output
        count: Number of byte positions to flip

    Returns:
        Corruption with the new signature and the sorted flipped positions
    """
    rng = rng or random.SystemRandom()
    corrupted = bytearray(signature)
    positions = rng.sample(range(len(corrupted)), min(count, len(corrupted)))
    for index in positions:
        corrupted[index] ^= 0xFF
    return Corruption(signature=bytes(corrupted), positions=tuple(sorted(positions)))


def select_verification_key(swap_key: bool) -> Principal:
    """Whose public key B uses: A's, or its own under a key-swap attack."""
    return Principal.B if swap_key else Principal.A
