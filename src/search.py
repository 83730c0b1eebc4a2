"""
Vanity address search engine.

Each worker thread loops generate -> encode -> test, bumps the shared rate
counter once per attempt and reports every match it finds. Workers share
nothing else apart from an optional stop event.
"""

import enum
import logging
import os
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from address import CHARSET, SEPARATOR, encode_address, network_prefix
from keypair import KeyPair
from mnemonics import UnsupportedLanguage, key_to_words
from telemetry import RateTracker

logger = logging.getLogger(__name__)


class Placement(enum.Enum):
    PREFIX = "prefix"
    SUFFIX = "suffix"
    ANYWHERE = "anywhere"

    def __str__(self):
        return self.value


def matches(placement: Placement, address: str, content: str) -> bool:
    if placement is Placement.PREFIX:
        return address.startswith(content)
    if placement is Placement.SUFFIX:
        return address.endswith(content)
    return content in address


# ============================================================
# Configuration
# ============================================================
class ConfigError(ValueError):
    pass


class EmptyPattern(ConfigError):
    def __init__(self):
        super().__init__("Content can't be empty")


class InvalidCharacter(ConfigError):
    def __init__(self, char: str):
        super().__init__(f"Invalid character in content: {char!r} (allowed: {CHARSET})")
        self.char = char


class InvalidThreadCount(ConfigError):
    def __init__(self, count):
        super().__init__(f"Number of threads must be at least 1 (got {count})")
        self.count = count


@dataclass(frozen=True)
class SearchConfig:
    content: str
    placement: Placement = Placement.PREFIX
    language: int = 0
    num_threads: int = 1
    continue_after_match: bool = True
    stop_all_on_match: bool = False
    mainnet: bool = True

    @property
    def target(self) -> str:
        """String the address is tested against."""
        if self.placement is Placement.PREFIX:
            return f"{network_prefix(self.mainnet)}{SEPARATOR}{self.content}"
        return self.content


def validate_content(content: str):
    if not content:
        raise EmptyPattern()
    for c in content:
        if c not in CHARSET:
            raise InvalidCharacter(c)


def validate_config(config: SearchConfig):
    validate_content(config.content)
    if config.num_threads < 1:
        raise InvalidThreadCount(config.num_threads)


def detect_threads() -> Optional[int]:
    return os.cpu_count()


def resolve_thread_count(requested: Optional[int], detect: Callable[[], Optional[int]] = detect_threads):
    """Return (threads to use, detected threads)."""
    detected = detect()
    if not detected:
        logger.warning("Couldn't detect number of available threads, fallback to 1 thread only")
        detected = 1
    threads = detected if requested is None else requested
    if threads < 1:
        raise InvalidThreadCount(threads)
    return threads, detected


# ============================================================
# Workers
# ============================================================
@dataclass(frozen=True)
class MatchResult:
    thread: int
    address: str
    private_key: str
    words: Optional[List[str]] = None

    @property
    def seed(self) -> Optional[str]:
        return " ".join(self.words) if self.words is not None else None


def report_match(result: MatchResult):
    logger.info("Thread #%d found: %s", result.thread, result.address)
    logger.info("Private key: %s", result.private_key)
    if result.words is not None:
        logger.info("Seed: %s", result.seed)
    else:
        logger.warning("Seed: unavailable, mnemonic encoding failed (recover from the private key)")


class Worker(threading.Thread):
    """One search thread. Exits only via the stop event or its own match."""

    def __init__(
        self,
        thread_id: int,
        config: SearchConfig,
        tracker: RateTracker,
        stop_event: threading.Event,
        keypairs: Callable[[], KeyPair] = KeyPair.generate,
        encode: Callable[[bytes, bool], str] = encode_address,
        on_match: Callable[[MatchResult], None] = report_match,
    ):
        super().__init__(name=f"vanity-{thread_id}", daemon=True)
        self.thread_id = thread_id
        self.config = config
        self.tracker = tracker
        self.stop_event = stop_event
        self.keypairs = keypairs
        self.encode = encode
        self.on_match = on_match
        self.found = 0

    def build_result(self, keypair: KeyPair, address: str) -> MatchResult:
        try:
            words = key_to_words(keypair.privkey, self.config.language)
        except UnsupportedLanguage as e:
            logger.error("Thread #%d couldn't encode seed words: %s", self.thread_id, e)
            words = None
        return MatchResult(self.thread_id, address, keypair.to_hex(), words)

    def run(self):
        config = self.config
        target = config.target
        placement = config.placement
        mainnet = config.mainnet

        while not self.stop_event.is_set():
            keypair = self.keypairs()
            address = self.encode(keypair.pubkey, mainnet)
            valid = matches(placement, address, target)
            self.tracker.increment()
            if not valid:
                continue

            self.found += 1
            self.on_match(self.build_result(keypair, address))

            if config.stop_all_on_match:
                self.stop_event.set()
                break
            if not config.continue_after_match:
                break

        logger.debug("Thread #%d stopped after %d match(es)", self.thread_id, self.found)


def dispatch(
    config: SearchConfig,
    tracker: RateTracker,
    stop_event: Optional[threading.Event] = None,
    **worker_kwargs,
) -> List[Worker]:
    """Validate the configuration and start one worker per thread."""
    validate_config(config)
    if stop_event is None:
        stop_event = threading.Event()

    workers = [
        Worker(i, config, tracker, stop_event, **worker_kwargs)
        for i in range(config.num_threads)
    ]
    for worker in workers:
        worker.start()
    return workers
