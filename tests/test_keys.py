import pytest

from address import decode_address
from keypair import SECP256K1_ORDER, KeyPair, get_engine
from mnemonics import (
    LANGUAGES,
    UnsupportedLanguage,
    check_language,
    key_to_words,
    words_to_key,
)

# secp256k1 generator point, i.e. the public key of secret 1
G_COMPRESSED = "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"


def secret(n: int) -> bytes:
    return n.to_bytes(32, "big")


class TestKeyPair:
    def test_engine(self):
        assert get_engine() in ("coincurve", "ecdsa")

    def test_public_key_of_one_is_generator(self):
        assert KeyPair.from_secret(secret(1)).pubkey.hex() == G_COMPRESSED

    def test_generate(self):
        keypair = KeyPair.generate()
        assert len(keypair.privkey) == 32
        assert len(keypair.pubkey) == 33
        assert keypair.pubkey[0] in (2, 3)
        assert KeyPair.generate().privkey != keypair.privkey

    @pytest.mark.parametrize("value", [secret(0), secret(SECP256K1_ORDER), b"\x01" * 31])
    def test_rejects_invalid_secret(self, value):
        with pytest.raises(ValueError):
            KeyPair.from_secret(value)

    def test_hex_round_trip(self):
        keypair = KeyPair.generate()
        assert KeyPair.from_hex(keypair.to_hex()).pubkey == keypair.pubkey

    def test_address_encodes_public_key(self):
        keypair = KeyPair.from_secret(secret(7))
        assert decode_address(keypair.address()) == (True, keypair.pubkey)
        assert keypair.address(mainnet=False).startswith("xet:")


class TestMnemonics:
    def test_zero_entropy_vector(self):
        assert key_to_words(bytes(32)) == ["abandon"] * 23 + ["art"]

    @pytest.mark.parametrize("language", range(len(LANGUAGES)))
    def test_words_recover_secret(self, language):
        value = KeyPair.from_secret(secret(123456789)).privkey
        words = key_to_words(value, language)
        assert len(words) == 24
        assert words_to_key(words, language) == value

    def test_bad_checksum_rejected(self):
        words = ["abandon"] * 24
        with pytest.raises(ValueError):
            words_to_key(words)

    def test_unknown_word_rejected(self):
        with pytest.raises(ValueError):
            words_to_key(["notaword"] * 24)

    @pytest.mark.parametrize("index", [-1, len(LANGUAGES), 999])
    def test_unsupported_language(self, index):
        with pytest.raises(UnsupportedLanguage) as info:
            key_to_words(bytes(32), index)
        assert info.value.index == index
        with pytest.raises(UnsupportedLanguage):
            check_language(index)

    def test_check_language_names(self):
        assert check_language(0) == "english"
