"""
Export helpers for SigLab.

Portable text encodings of the engine's read-outs: PEM for keys
(SPKI public, unencrypted PKCS#8 private) and base64 for signatures.
"""

import base64
from typing import Dict, Optional

from cryptography.hazmat.primitives import serialization

from .models import KeyHandle, KeyPair, Principal


SIGNATURE_FILENAME = "signature.txt"


def b64e(b: bytes) -> str:
    """Base64 encode bytes to string."""
    return base64.b64encode(b).decode('ascii')


def b64d(s: str) -> bytes:
    """Base64 decode string to bytes."""
    return base64.b64decode(s.encode('ascii'))


def public_key_pem(handle: KeyHandle) -> str:
    """Public key as a `PUBLIC KEY` PEM block."""
    return handle.key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode('ascii')


def private_key_pem(handle: KeyHandle) -> str:
    """Private key as an unencrypted `PRIVATE KEY` PEM block."""
    return handle.key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode('ascii')


def signature_base64(signature: bytes) -> str:
    return b64e(signature)


def key_filename(principal: Principal, private: bool = False) -> str:
    """e.g. `A_public_key.pem`, `B_private_key.pem`."""
    kind = "private" if private else "public"
    return f"{Principal(principal).value}_{kind}_key.pem"


def export_key_pair(
    principal: Principal,
    key_pair: KeyPair,
    include_private: bool = False
) -> Dict[str, Optional[str]]:
    """
    Export a principal's key pair for download.

    Returns:
        Dict with principal, algorithm, key_bits, file names and PEM text.
        The private key is only included when asked for.
    """
    principal = Principal(principal)
    exported = {
        "principal": principal.value,
        "algorithm": key_pair.public_key.algorithm.value,
        "key_bits": key_pair.public_key.key_bits,
        "public_key_filename": key_filename(principal),
        "public_key_pem": public_key_pem(key_pair.public_key),
        "private_key_filename": None,
        "private_key_pem": None,
    }
    if include_private:
        exported["private_key_filename"] = key_filename(principal, private=True)
        exported["private_key_pem"] = private_key_pem(key_pair.private_key)
    return exported
