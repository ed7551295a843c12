"""Ethereum ``personal_sign`` signatures over secp256k1."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from Crypto.Hash import keccak

_P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
_G = (
    0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
    0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
)

ETHEREUM_PREFIX = b"\x19Ethereum Signed Message:\n32"

_Point = "tuple[int, int] | None"


def _add(a, b):
    if a is None:
        return b
    if b is None:
        return a
    (x1, y1), (x2, y2) = a, b
    if x1 == x2:
        if (y1 + y2) % _P == 0:
            return None
        slope = 3 * x1 * x1 * pow(2 * y1, -1, _P) % _P
    else:
        slope = (y2 - y1) * pow((x2 - x1) % _P, -1, _P) % _P
    x3 = (slope * slope - x1 - x2) % _P
    return x3, (slope * (x1 - x3) - y1) % _P


def _mul(k: int, point):
    result = None
    addend = point
    while k:
        if k & 1:
            result = _add(result, addend)
        addend = _add(addend, addend)
        k >>= 1
    return result


def _lift_x(x: int, odd: int) -> tuple[int, int]:
    alpha = (pow(x, 3, _P) + 7) % _P
    y = pow(alpha, (_P + 1) // 4, _P)
    if y * y % _P != alpha:
        raise ValueError("x coordinate is not on the curve")
    if y & 1 != odd:
        y = _P - y
    return x, y


def _compress(point: tuple[int, int]) -> bytes:
    x, y = point
    return bytes([2 + (y & 1)]) + x.to_bytes(32, "big")


def keccak_256(data: bytes) -> bytes:
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def signable_message(what: bytes) -> bytes:
    """The message that ``personal_sign`` and ``eth_sign`` sign for ``what``.

    The hash of the message is signed, so the length is always 32.
    """
    return ETHEREUM_PREFIX + keccak_256(what)


def recover_compressed(signature: bytes, message_hash: bytes) -> bytes:
    """Recover the compressed public key that signed ``message_hash``.

    Raises ``ValueError`` if no key can be recovered.
    """
    if len(signature) != 65:
        raise ValueError("signature must be 65 bytes")
    if len(message_hash) != 32:
        raise ValueError("message hash must be 32 bytes")
    v = signature[64]
    recovery_id = v - 27 if v > 26 else v
    if not 0 <= recovery_id <= 3:
        raise ValueError(f"invalid recovery id {v}")
    r = int.from_bytes(signature[:32], "big") % _N
    s = int.from_bytes(signature[32:64], "big") % _N
    if r == 0 or s == 0:
        raise ValueError("invalid signature scalars")
    x = r + _N if recovery_id & 2 else r
    if x >= _P:
        raise ValueError("invalid signature x coordinate")
    nonce_point = _lift_x(x, recovery_id & 1)
    e = int.from_bytes(message_hash, "big") % _N
    r_inv = pow(r, -1, _N)
    public = _add(_mul(-e * r_inv % _N, _G), _mul(s * r_inv % _N, nonce_point))
    if public is None:
        raise ValueError("recovered point at infinity")
    return _compress(public)


def public_from_secret(secret: bytes) -> bytes:
    """Compressed public key for a 32-byte secret scalar."""
    if len(secret) != 32:
        raise ValueError("secret must be 32 bytes")
    scalar = int.from_bytes(secret, "big")
    if not 0 < scalar < _N:
        raise ValueError("secret is out of range")
    return _compress(_mul(scalar, _G))


def account_from_public(public: bytes) -> bytes:
    """Account id of an ECDSA signer: BLAKE2b-256 of its compressed key."""
    if len(public) != 33:
        raise ValueError("compressed public key must be 33 bytes")
    return hashlib.blake2b(bytes(public), digest_size=32).digest()


@dataclass(frozen=True)
class EthereumSignature:
    """A 65-byte recoverable signature made by ``personal_sign``."""

    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))
        if len(self.data) != 65:
            raise ValueError("an Ethereum signature is 65 bytes")

    @classmethod
    def from_bytes(cls, data: bytes) -> EthereumSignature:
        return cls(bytes(data))

    def verify(self, message: bytes, account: bytes) -> bool:
        """``True`` if this signs ``message`` and was made by ``account``."""
        message_hash = keccak_256(signable_message(message))
        try:
            public = recover_compressed(self.data, message_hash)
        except ValueError:
            return False
        return account_from_public(public) == bytes(account)

    def __repr__(self) -> str:
        return f"EthereumSignature({list(self.data)!r})"