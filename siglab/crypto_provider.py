"""
SigLab Crypto Provider

The cryptographic capability the orchestrator is built against:
key-pair generation, hashing, signing and verification for the two
RSA signature schemes.

Uses the `cryptography` library:
- RSA keys with public exponent 65537
- SHA-256 for the message digest and inside both padding schemes
- PSS with MGF1(SHA-256) and a 32-byte salt
- PKCS#1 v1.5 (deterministic)
"""

import hashlib
from abc import ABC, abstractmethod

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .errors import KeyGenerationError, SigningError, VerificationInputError
from .models import Algorithm, KeyHandle, KeyPair, SUPPORTED_KEY_BITS


PUBLIC_EXPONENT = 65537
PSS_SALT_LENGTH = 32


class CryptoProvider(ABC):
    """Abstract interface for the primitives a simulation run consumes."""

    @abstractmethod
    def generate_key_pair(self, algorithm: Algorithm, key_bits: int) -> KeyPair:
        """
        Generate a key pair bound to `algorithm`.

        Raises:
            KeyGenerationError: unsupported parameters or backend failure
        """
        pass

    @abstractmethod
    def hash(self, message: str) -> bytes:
        """Deterministic fixed-length digest of the message."""
        pass

    @abstractmethod
    def sign(self, private_key: KeyHandle, message: str, algorithm: Algorithm) -> bytes:
        """
        Sign the message.

        Raises:
            SigningError: malformed key or scheme mismatch
        """
        pass

    @abstractmethod
    def verify(
        self,
        public_key: KeyHandle,
        message: str,
        signature: bytes,
        algorithm: Algorithm
    ) -> bool:
        """
        Check a signature. Returns False for an invalid signature.

        Raises:
            VerificationInputError: structurally invalid inputs only
        """
        pass


class RsaCryptoProvider(CryptoProvider):
    """RSA-PSS / RSASSA-PKCS1-v1_5 provider backed by `cryptography`."""

    def __init__(self, salt_length: int = PSS_SALT_LENGTH):
        self.salt_length = salt_length

    def _padding(self, algorithm: Algorithm) -> padding.AsymmetricPadding:
        if algorithm == Algorithm.PSS:
            return padding.PSS(
                mgf=padding.MGF1(hashes.SHA256()),
                salt_length=self.salt_length
            )
        return padding.PKCS1v15()

    def generate_key_pair(self, algorithm: Algorithm, key_bits: int) -> KeyPair:
        try:
            algorithm = Algorithm.parse(algorithm)
        except ValueError as e:
            raise KeyGenerationError("Failed to generate key pair", str(e)) from e
        if key_bits not in SUPPORTED_KEY_BITS:
            raise KeyGenerationError(
                "Failed to generate key pair",
                f"unsupported key size {key_bits}"
            )

        try:
            private_key = rsa.generate_private_key(
                public_exponent=PUBLIC_EXPONENT,
                key_size=key_bits,
            )
        except (ValueError, TypeError) as e:
            raise KeyGenerationError("Failed to generate key pair", str(e)) from e

        return KeyPair(
            public_key=KeyHandle(private_key.public_key(), algorithm, key_bits),
            private_key=KeyHandle(private_key, algorithm, key_bits),
        )

    def hash(self, message: str) -> bytes:
        return hashlib.sha256(message.encode("utf-8")).digest()

    def sign(self, private_key: KeyHandle, message: str, algorithm: Algorithm) -> bytes:
        if not isinstance(private_key, KeyHandle) or not isinstance(
            private_key.key, rsa.RSAPrivateKey
        ):
            raise SigningError("Failed to sign message", "not an RSA private key")
        try:
            algorithm = Algorithm.parse(algorithm)
        except ValueError as e:
            raise SigningError("Failed to sign message", str(e)) from e
        if private_key.algorithm != algorithm:
            raise SigningError(
                "Failed to sign message",
                f"key was generated for {private_key.algorithm.value}, "
                f"cannot sign with {algorithm.value}"
            )

        try:
            return private_key.key.sign(
                message.encode("utf-8"),
                self._padding(algorithm),
                hashes.SHA256()
            )
        except (ValueError, TypeError) as e:
            raise SigningError("Failed to sign message", str(e)) from e

    def verify(
        self,
        public_key: KeyHandle,
        message: str,
        signature: bytes,
        algorithm: Algorithm
    ) -> bool:
        if not isinstance(public_key, KeyHandle) or not isinstance(
            public_key.key, rsa.RSAPublicKey
        ):
            raise VerificationInputError(
                "Failed to verify signature", "not an RSA public key"
            )
        if not isinstance(signature, (bytes, bytearray)):
            raise VerificationInputError(
                "Failed to verify signature", "signature must be bytes"
            )
        try:
            algorithm = Algorithm.parse(algorithm)
        except ValueError as e:
            raise VerificationInputError("Failed to verify signature", str(e)) from e
        if public_key.algorithm != algorithm:
            raise VerificationInputError(
                "Failed to verify signature",
                f"key was generated for {public_key.algorithm.value}"
            )

        try:
            public_key.key.verify(
                bytes(signature),
                message.encode("utf-8"),
                self._padding(algorithm),
                hashes.SHA256()
            )
            return True
        except InvalidSignature:
            return False
