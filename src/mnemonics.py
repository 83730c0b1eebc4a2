"""
Seed words for private keys.

A 32-byte secret is used directly as BIP39 entropy, giving a 24-word
sequence that decodes back to the same secret.
"""

from typing import List, Sequence

from mnemonic import Mnemonic

LANGUAGES = (
    "english",
    "japanese",
    "korean",
    "spanish",
    "chinese_simplified",
    "chinese_traditional",
    "french",
    "italian",
    "czech",
    "portuguese",
)

_CODECS = {}


class UnsupportedLanguage(ValueError):
    def __init__(self, index: int):
        super().__init__(f"unsupported language index {index} (available: 0-{len(LANGUAGES) - 1})")
        self.index = index


def check_language(index: int) -> str:
    """Return the language name for an index, or raise UnsupportedLanguage."""
    if not 0 <= index < len(LANGUAGES):
        raise UnsupportedLanguage(index)
    return LANGUAGES[index]


def _codec(index: int) -> Mnemonic:
    name = check_language(index)
    codec = _CODECS.get(name)
    if codec is None:
        codec = _CODECS[name] = Mnemonic(name)
    return codec


def key_to_words(secret: bytes, language: int = 0) -> List[str]:
    words = _codec(language).to_mnemonic(bytes(secret))
    # japanese wordlists are joined with an ideographic space
    return words.split()


def words_to_key(words: Sequence[str], language: int = 0) -> bytes:
    codec = _codec(language)
    try:
        return bytes(codec.to_entropy(list(words)))
    except LookupError as e:
        raise ValueError(f"unknown seed word: {e}") from e
