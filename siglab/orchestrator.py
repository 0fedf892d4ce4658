"""
SigLab Simulation Orchestrator

The state machine that drives one A -> B signed exchange:

    IDLE --provision_keys--> KEYS_GENERATING --success--> KEYS_READY
    KEYS_GENERATING --failure--> KEYS_READY (previous keys kept) or IDLE
    KEYS_READY --run_scenario--> HASHING -> SIGNING -> TRANSMITTING -> VERIFYING -> COMPLETE
    HASHING | SIGNING | TRANSMITTING | VERIFYING --exception--> FAILED

Every transition is narrated in the Event Log. The outcome of a run is a
pure function of its ScenarioConfig and the provisioned key pairs; the
pauses between stages only pace the narration.
"""

import asyncio
import base64
import logging
import random
from typing import Any, Dict, Optional, Tuple

from .attacks import (
    attacks_at,
    corrupt_signature,
    explain_failure,
    select_verification_key,
    tamper_message,
)
from .config import STEP_DELAY
from .crypto_provider import CryptoProvider, RsaCryptoProvider
from .errors import PreconditionError
from .event_log import Actor, EventLog, Level, LogEntry
from .logging_config import audit_log, set_run_id
from .models import (
    AttackKind,
    Envelope,
    KeyPair,
    Principal,
    RunState,
    ScenarioConfig,
    SigningArtifact,
    VerificationOutcome,
    key_presence,
)

logger = logging.getLogger(__name__)

# States in which a new operation may start.
AT_REST = (RunState.IDLE, RunState.KEYS_READY, RunState.COMPLETE, RunState.FAILED)


class SimulationOrchestrator:
    """
    Sequences key provisioning and the sign / transmit / verify protocol.

    One orchestrator serves one observer. Runs never overlap: every entry
    point checks the state before its first suspension point.
    """

    def __init__(
        self,
        provider: Optional[CryptoProvider] = None,
        rng: Optional[random.Random] = None,
        step_delay: Optional[float] = None,
        event_log: Optional[EventLog] = None
    ):
        """
        Args:
            provider: Crypto provider (default: RsaCryptoProvider)
            rng: Random source for signature corruption (default: SystemRandom)
            step_delay: Seconds to pause between stages (default: SIGLAB_STEP_DELAY)
            event_log: Log to narrate into (default: a fresh EventLog)
        """
        self.provider = provider or RsaCryptoProvider()
        self.rng = rng
        self.step_delay = STEP_DELAY if step_delay is None else step_delay
        self.event_log = event_log if event_log is not None else EventLog()

        self._state = RunState.IDLE
        self._key_pairs: Dict[Principal, KeyPair] = {}
        self._digest: Optional[bytes] = None
        self._artifact: Optional[SigningArtifact] = None
        self._signature: Optional[bytes] = None
        self._envelope: Optional[Envelope] = None
        self._outcome: Optional[VerificationOutcome] = None
        self._last_error: Optional[BaseException] = None

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def log(self) -> Tuple[LogEntry, ...]:
        return self.event_log.snapshot()

    @property
    def outcome(self) -> Optional[VerificationOutcome]:
        """None until a run completes, and after a failed run or clear_log()."""
        return self._outcome

    @property
    def has_keys(self) -> bool:
        return all(self._key_pairs.get(p) is not None for p in Principal)

    @property
    def key_presence(self) -> Dict[str, bool]:
        return key_presence(self._key_pairs)

    def key_pair(self, principal: Principal) -> Optional[KeyPair]:
        return self._key_pairs.get(Principal(principal))

    @property
    def digest(self) -> Optional[bytes]:
        """A's digest of the signed message."""
        return self._digest

    @property
    def signature(self) -> Optional[bytes]:
        """The signature A sent (after corruption, if that attack ran)."""
        return self._signature

    @property
    def artifact(self) -> Optional[SigningArtifact]:
        """A's untouched signing output."""
        return self._artifact

    @property
    def envelope(self) -> Optional[Envelope]:
        return self._envelope

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._last_error

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot of the observable state."""
        return {
            "state": self._state.value,
            "has_keys": self.has_keys,
            "keys": self.key_presence,
            "digest": self._digest.hex() if self._digest is not None else None,
            "signature": (
                base64.b64encode(self._signature).decode("ascii")
                if self._signature is not None else None
            ),
            "outcome": self._outcome.to_dict() if self._outcome else None,
            "last_error": str(self._last_error) if self._last_error else None,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def clear_log(self) -> None:
        """Empty the log and the displayed run results. Keys and state stay."""
        self.event_log.clear()
        self._reset_run()

    async def provision_keys(self, config: ScenarioConfig) -> None:
        """
        Generate fresh key pairs for A and B, concurrently.

        Both pairs are replaced together or not at all. A generation
        failure is logged, the previous keys are kept and the state
        returns to KEYS_READY if they exist, IDLE otherwise. Replacing
        the keys drops the read-outs of any earlier run.

        Raises:
            PreconditionError: a run or another provisioning is in flight
        """
        if self._state not in AT_REST:
            self._reject("provision_keys", "busy", "Cannot generate keys while a simulation is in progress.")

        self._state = RunState.KEYS_GENERATING
        self._log(
            Actor.SYSTEM,
            f"Generating {config.key_bits}-bit RSA key pairs using {config.algorithm.value}..."
        )

        try:
            results = await asyncio.gather(
                asyncio.to_thread(self.provider.generate_key_pair, config.algorithm, config.key_bits),
                asyncio.to_thread(self.provider.generate_key_pair, config.algorithm, config.key_bits),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
        except Exception as e:
            self._state = RunState.KEYS_READY if self.has_keys else RunState.IDLE
            self._log(Actor.SYSTEM, f"Key generation failed: {e}", Level.ERROR)
            audit_log.key_generation_failed(config.algorithm.value, config.key_bits, str(e))
            return

        pair_a, pair_b = results
        self._key_pairs = {Principal.A: pair_a, Principal.B: pair_b}
        self._reset_run()
        self._state = RunState.KEYS_READY

        self._log(Actor.A, "Generated key pair (public + private)", Level.SUCCESS)
        self._log(Actor.B, "Generated key pair (public + private)", Level.SUCCESS)
        self._log(
            Actor.SYSTEM,
            "Key generation complete. Both users have their key pairs.",
            Level.SUCCESS
        )
        audit_log.keys_provisioned(config.algorithm.value, config.key_bits)

    async def run_scenario(self, config: ScenarioConfig) -> None:
        """
        Run one signed exchange from A to B.

        Unexpected errors inside the pipeline move the run to FAILED and
        leave the outcome unset; they are logged, not raised.

        Raises:
            PreconditionError: keys not ready, or an operation is in flight
        """
        if self._state not in AT_REST:
            self._reject("run_scenario", "busy", "A simulation is already in progress.")
        if not self.has_keys:
            self._reject("run_scenario", "keys not ready", "Please generate keys first!")

        set_run_id()
        self._reset_run()
        key_pairs = dict(self._key_pairs)
        audit_log.run_started(
            config.algorithm.value, config.key_bits, [a.value for a in config.ordered_attacks()]
        )

        try:
            digest = self._hash(config)
            await self._pause()
            signature = self._sign(config, key_pairs[Principal.A], digest)
            await self._pause()
            envelope = self._transmit(config, signature)
            await self._pause()
            outcome = self._verify(config, envelope, key_pairs)
        except Exception as e:
            failed_stage = self._state
            self._state = RunState.FAILED
            self._outcome = None
            self._last_error = e
            self._log(Actor.SYSTEM, f"Simulation failed: {e}", Level.ERROR)
            audit_log.run_failed(failed_stage.value, str(e), e)
            return

        self._outcome = outcome
        audit_log.verification_outcome(outcome.verified, outcome.used_key.value)
        if outcome.verified:
            self._log(
                Actor.B,
                "Signature is VALID! Message is authentic and untampered.",
                Level.SUCCESS
            )
        else:
            self._log(
                Actor.B,
                "Signature is INVALID! Message has been tampered, corrupted, or wrong key used.",
                Level.ERROR
            )
            for explanation in explain_failure(config.ordered_attacks()):
                self._log(Actor.SYSTEM, explanation, Level.WARNING)

        self._enter(RunState.COMPLETE)

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------

    def _hash(self, config: ScenarioConfig) -> bytes:
        self._enter(RunState.HASHING)
        self._log(Actor.A, f'Computing SHA-256 hash of message: "{config.message}"')
        digest = self.provider.hash(config.message)
        self._digest = digest
        self._log(Actor.A, f"Hash computed: {digest.hex()[:16]}...", Level.SUCCESS)
        return digest

    def _sign(self, config: ScenarioConfig, signer: KeyPair, digest: bytes) -> bytes:
        self._enter(RunState.SIGNING)
        self._log(Actor.A, f"Signing message with private key using {config.algorithm.value}...")
        signature = self.provider.sign(signer.private_key, config.message, config.algorithm)
        self._artifact = SigningArtifact(
            digest=digest,
            signature=signature,
            algorithm=config.algorithm
        )
        self._log(
            Actor.A,
            f"Signature created: {base64.b64encode(signature).decode('ascii')[:32]}...",
            Level.SUCCESS
        )

        if AttackKind.CORRUPT_SIGNATURE in attacks_at(config.attacks, RunState.SIGNING):
            corruption = corrupt_signature(signature, self.rng)
            signature = corruption.signature
            positions = ", ".join(str(p) for p in corruption.positions)
            self._log(
                Actor.ATTACKER,
                f"Corrupted signature bytes in transit! Flipped bytes at positions {positions}.",
                Level.ERROR
            )
            audit_log.attack_applied(AttackKind.CORRUPT_SIGNATURE.value, RunState.SIGNING.value)

        self._signature = signature
        return signature

    def _transmit(self, config: ScenarioConfig, signature: bytes) -> Envelope:
        self._enter(RunState.TRANSMITTING)
        self._log(Actor.SYSTEM, "Transmitting message and signature from A → B...")
        envelope = Envelope(message=config.message, signature=signature)

        if AttackKind.TAMPER_MESSAGE in attacks_at(config.attacks, RunState.TRANSMITTING):
            envelope = tamper_message(envelope)
            self._log(
                Actor.ATTACKER,
                f'Message tampered during transmission! New message: "{envelope.message}"',
                Level.ERROR
            )
            audit_log.attack_applied(AttackKind.TAMPER_MESSAGE.value, RunState.TRANSMITTING.value)

        self._envelope = envelope
        self._log(Actor.B, f'Received message: "{envelope.message}"')
        return envelope

    def _verify(
        self,
        config: ScenarioConfig,
        envelope: Envelope,
        key_pairs: Dict[Principal, KeyPair]
    ) -> VerificationOutcome:
        self._enter(RunState.VERIFYING)
        self._log(Actor.B, "Computing SHA-256 hash of received message...")
        received_digest = self.provider.hash(envelope.message)
        self._log(Actor.B, f"Hash of received message: {received_digest.hex()[:16]}...")

        swap = AttackKind.SWAP_KEY in attacks_at(config.attacks, RunState.VERIFYING)
        used_key = select_verification_key(swap)
        if swap:
            self._log(Actor.ATTACKER, "Swapped A's public key with B's public key!", Level.ERROR)
            audit_log.attack_applied(AttackKind.SWAP_KEY.value, RunState.VERIFYING.value)

        whose = "B's (wrong)" if swap else "A's (correct)"
        self._log(Actor.B, f"Verifying signature using {whose} public key...")
        verified = self.provider.verify(
            key_pairs[used_key].public_key,
            envelope.message,
            envelope.signature,
            config.algorithm
        )
        return VerificationOutcome(verified=verified, used_key=used_key)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _reset_run(self) -> None:
        self._digest = None
        self._artifact = None
        self._signature = None
        self._envelope = None
        self._outcome = None
        self._last_error = None

    def _enter(self, state: RunState) -> None:
        logger.debug("state %s -> %s", self._state.value, state.value)
        self._state = state

    def _log(self, actor: Actor, text: str, level: Level = Level.INFO) -> LogEntry:
        return self.event_log.append(actor, text, level)

    async def _pause(self) -> None:
        await asyncio.sleep(self.step_delay)

    def _reject(self, operation: str, reason: str, text: str) -> None:
        self._log(Actor.SYSTEM, text, Level.ERROR)
        audit_log.precondition_rejected(operation, reason)
        raise PreconditionError(reason)
