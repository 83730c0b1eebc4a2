import threading

import pytest

from keypair import KeyPair

FILLER = "xel:qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqq"


class ScriptedSource:
    """
    Keypair source whose addresses follow a fixed script.

    Keys come from secrets 1, 2, 3... so runs are reproducible. Once the
    script is used up, every further call blocks on ``release`` before
    handing out a non-matching filler address.
    """

    def __init__(self, addresses, release: threading.Event):
        self._lock = threading.Lock()
        self._script = list(addresses)
        self._next_secret = 1
        self.release = release
        self.exhausted = threading.Event()
        self.addresses = {}
        self.calls = 0

    def __call__(self) -> KeyPair:
        with self._lock:
            keypair = KeyPair.from_secret(self._next_secret.to_bytes(32, "big"))
            self._next_secret += 1
            self.calls += 1
            address = self._script.pop(0) if self._script else None
            if address is None:
                self.exhausted.set()
        if address is None:
            self.release.wait(timeout=10)
            address = FILLER
        with self._lock:
            self.addresses[keypair.pubkey] = address
        return keypair

    def encode(self, pubkey: bytes, mainnet: bool = True) -> str:
        with self._lock:
            return self.addresses[pubkey]


@pytest.fixture
def stop_event():
    event = threading.Event()
    yield event
    event.set()


@pytest.fixture
def scripted(stop_event):
    def make(addresses):
        return ScriptedSource(addresses, stop_event)
    return make
