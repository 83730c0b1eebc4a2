"""
Bech32 address encoding for XELIS-style addresses.

Addresses are written as ``<hrp>:<data><checksum>`` where the data part is
the 5-bit regrouping of ``x || parity || address_type`` for a compressed
secp256k1 public key. The checksum is the
classic BIP173 bech32 checksum over the expanded hrp and data.
"""

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
SEPARATOR = ":"
BECH32_CONST = 1

PREFIX_ADDRESS = "xel"
TESTNET_PREFIX_ADDRESS = "xet"

ADDRESS_TYPE_NORMAL = 0
COMPRESSED_KEY_SIZE = 33
MAX_ADDRESS_LENGTH = 90


class AddressError(ValueError):
    """Raised when an address string cannot be decoded."""


def _polymod(values):
    GEN = [0x3b6a57b2, 0x26508e6d, 0x1ea119fa, 0x3d4233dd, 0x2a1462b3]
    chk = 1
    for v in values:
        b = chk >> 25
        chk = (chk & 0x1FFFFFF) << 5 ^ v
        for i in range(5):
            chk ^= GEN[i] if ((b >> i) & 1) else 0
    return chk


def _hrp_expand(hrp):
    return [ord(x) >> 5 for x in hrp] + [0] + [ord(x) & 31 for x in hrp]


def _create_checksum(hrp, data):
    values = _hrp_expand(hrp) + data
    polymod = _polymod(values + [0, 0, 0, 0, 0, 0]) ^ BECH32_CONST
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(6)]


def _verify_checksum(hrp, data):
    return _polymod(_hrp_expand(hrp) + data) == BECH32_CONST


def convertbits(data, frombits, tobits, pad=True):
    acc = 0
    bits = 0
    ret = []
    maxv = (1 << tobits) - 1
    for value in data:
        acc = (acc << frombits) | value
        bits += frombits
        while bits >= tobits:
            bits -= tobits
            ret.append((acc >> bits) & maxv)
    if pad:
        if bits:
            ret.append((acc << (tobits - bits)) & maxv)
    elif bits >= frombits or ((acc << (tobits - bits)) & maxv):
        return None
    return ret


def is_charset(text: str) -> bool:
    return all(c in CHARSET for c in text)


def network_prefix(mainnet: bool = True) -> str:
    return PREFIX_ADDRESS if mainnet else TESTNET_PREFIX_ADDRESS


def encode(hrp: str, data: bytes) -> str:
    """Encode raw bytes under the given hrp."""
    five_bit = convertbits(data, 8, 5)
    checksum = _create_checksum(hrp, five_bit)
    return hrp + SEPARATOR + "".join(CHARSET[d] for d in five_bit + checksum)


def decode(text: str):
    """Decode an address string. Returns (hrp, data bytes)."""
    if len(text) > MAX_ADDRESS_LENGTH:
        raise AddressError(f"address too long ({len(text)} > {MAX_ADDRESS_LENGTH})")
    if text.lower() != text:
        raise AddressError("address must be lowercase")
    pos = text.rfind(SEPARATOR)
    if pos < 1 or pos + 7 > len(text):
        raise AddressError("missing or misplaced separator")
    hrp, payload = text[:pos], text[pos + 1:]
    for c in payload:
        if c not in CHARSET:
            raise AddressError(f"invalid character in address: {c}")
    values = [CHARSET.find(c) for c in payload]
    if not _verify_checksum(hrp, values):
        raise AddressError("invalid checksum")
    data = convertbits(values[:-6], 5, 8, False)
    if data is None:
        raise AddressError("invalid padding")
    return hrp, bytes(data)


def encode_address(public_key: bytes, mainnet: bool = True) -> str:
    """
    Encode a compressed public key for the given network.

    The payload is ``x || parity || address_type`` so the symbols right after
    the separator come from the x-coordinate and are uniformly distributed.
    """
    public_key = bytes(public_key)
    if len(public_key) != COMPRESSED_KEY_SIZE or public_key[0] not in (2, 3):
        raise AddressError("expected a 33-byte compressed public key")
    payload = public_key[1:] + public_key[:1] + bytes([ADDRESS_TYPE_NORMAL])
    return encode(network_prefix(mainnet), payload)


def decode_address(text: str):
    """Decode an address back into (mainnet, public_key)."""
    hrp, data = decode(text)
    if hrp == PREFIX_ADDRESS:
        mainnet = True
    elif hrp == TESTNET_PREFIX_ADDRESS:
        mainnet = False
    else:
        raise AddressError(f"unknown network prefix: {hrp}")
    if len(data) != COMPRESSED_KEY_SIZE + 1 or data[-1] != ADDRESS_TYPE_NORMAL:
        raise AddressError("unsupported address type")
    if data[-2] not in (2, 3):
        raise AddressError("invalid public key parity")
    return mainnet, data[-2:-1] + data[:-2]
