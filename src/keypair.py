"""
secp256k1 keypairs using coincurve (libsecp256k1) for performance.
Falls back to ecdsa if coincurve is unavailable.
"""

import secrets

from address import encode_address

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECRET_SIZE = 32

# Try fast C library first, fall back to pure Python
try:
    from coincurve import PublicKey as _CPublicKey

    def _get_pubkey(privkey_bytes: bytes) -> bytes:
        pk = _CPublicKey.from_valid_secret(privkey_bytes)
        return pk.format(compressed=True)

    _ENGINE = "coincurve"
except ImportError:
    from ecdsa import SECP256k1, SigningKey

    def _get_pubkey(privkey_bytes: bytes) -> bytes:
        sk = SigningKey.from_string(privkey_bytes, curve=SECP256k1)
        vk = sk.get_verifying_key()
        x = vk.pubkey.point.x()
        y = vk.pubkey.point.y()
        prefix = b"\x02" if y % 2 == 0 else b"\x03"
        return prefix + x.to_bytes(32, "big")

    _ENGINE = "ecdsa"


def get_engine():
    return _ENGINE


def _is_valid_secret(secret: bytes) -> bool:
    return len(secret) == SECRET_SIZE and 0 < int.from_bytes(secret, "big") < SECP256K1_ORDER


class KeyPair:
    """A private key and its lazily derived compressed public key."""

    __slots__ = ("privkey", "_pubkey")

    def __init__(self, privkey: bytes):
        self.privkey = privkey
        self._pubkey = None

    @classmethod
    def generate(cls) -> "KeyPair":
        while True:
            secret = secrets.token_bytes(SECRET_SIZE)
            if _is_valid_secret(secret):
                return cls(secret)

    @classmethod
    def from_secret(cls, secret: bytes) -> "KeyPair":
        if not _is_valid_secret(secret):
            raise ValueError("secret is not a valid secp256k1 private key")
        return cls(bytes(secret))

    @classmethod
    def from_hex(cls, value: str) -> "KeyPair":
        return cls.from_secret(bytes.fromhex(value))

    @property
    def pubkey(self) -> bytes:
        if self._pubkey is None:
            self._pubkey = _get_pubkey(self.privkey)
        return self._pubkey

    def to_hex(self) -> str:
        return self.privkey.hex()

    def address(self, mainnet: bool = True) -> str:
        return encode_address(self.pubkey, mainnet)
