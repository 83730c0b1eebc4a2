#!/usr/bin/env python3
"""
XELIS Vanity Address Search
===========================
Generates random keypairs on every CPU thread until the encoded address
contains the requested content, then prints the address, private key and
seed words.

Usage:
    xel-vanity --content abc --placement suffix --num-threads 8

Every option can also be set through the matching VANITY_* environment
variable (e.g. VANITY_CONTENT=abc).
"""

import argparse
import logging
import os
import sys
import threading
from typing import List

from address import CHARSET, network_prefix
from keypair import get_engine
from logs import DEFAULT_LOGS_PATH, LoggingSetupError, setup_logging
from mnemonics import LANGUAGES, UnsupportedLanguage, check_language
from search import (
    ConfigError, Placement, SearchConfig, Worker, detect_threads, dispatch,
    resolve_thread_count, validate_content,
)
from telemetry import RateTracker, StatusLine

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

STOP_ON_MATCH = ("none", "thread", "all")
NETWORKS = ("mainnet", "testnet")
SUPERVISE_INTERVAL = 1.0


def _env(name: str, default=None):
    # string defaults still go through argparse type conversion
    return os.getenv(name) or default


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xel-vanity",
        description="Search for a XELIS address containing the given content.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("-c", "--content", default=os.getenv("VANITY_CONTENT", ""),
                        help=f"content to search for, using only: {CHARSET}")
    parser.add_argument("-p", "--placement", type=Placement, choices=list(Placement),
                        default=_env("VANITY_PLACEMENT", "prefix"),
                        help="where the content must appear in the address")
    parser.add_argument("-l", "--language", type=int, default=_env("VANITY_LANGUAGE", "0"),
                        help="seed language index: " + ", ".join(f"{i}={n}" for i, n in enumerate(LANGUAGES)))
    parser.add_argument("-n", "--num-threads", type=int, default=_env("VANITY_NUM_THREADS"),
                        help="number of threads to use (default: detected CPU threads)")
    parser.add_argument("--network", choices=NETWORKS, default=_env("VANITY_NETWORK", "mainnet"),
                        help="network prefix of generated addresses")
    parser.add_argument("--stop-on-match", choices=STOP_ON_MATCH,
                        default=_env("VANITY_STOP_ON_MATCH", "none"),
                        help="what stops after a match: nothing, the finding thread, or all threads")
    parser.add_argument("--disable-log-color", action="store_true",
                        help="disable the usage of colors in log")
    parser.add_argument("--disable-interactive-mode", action="store_true",
                        help="disable the status line and terminal commands")
    parser.add_argument("--log-level", default=os.getenv("VANITY_LOG_LEVEL", "info"),
                        help="log level (debug, info, warning, error)")
    parser.add_argument("--logs-path", default=os.getenv("VANITY_LOGS_PATH", DEFAULT_LOGS_PATH),
                        help="directory for logs.log")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv=None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)
    # argparse skips the choices check for defaults taken from the environment
    if args.network not in NETWORKS:
        parser.error(f"invalid VANITY_NETWORK: {args.network!r} (choose from {', '.join(NETWORKS)})")
    if args.stop_on_match not in STOP_ON_MATCH:
        parser.error(f"invalid VANITY_STOP_ON_MATCH: {args.stop_on_match!r} "
                     f"(choose from {', '.join(STOP_ON_MATCH)})")
    return args


def load_config(args: argparse.Namespace, detect=None) -> SearchConfig:
    """Turn parsed arguments into a validated SearchConfig."""
    validate_content(args.content)
    threads, detected = resolve_thread_count(args.num_threads, detect or detect_threads)
    check_language(args.language)
    logger.info("Total threads to use: %d (detected: %d)", threads, detected)

    return SearchConfig(
        content=args.content,
        placement=args.placement,
        language=args.language,
        num_threads=threads,
        continue_after_match=args.stop_on_match == "none",
        stop_all_on_match=args.stop_on_match == "all",
        mainnet=args.network == "mainnet",
    )


# ============================================================
# Interactive commands
# ============================================================
COMMANDS = {
    "help": "show this help",
    "status": "show running threads and attempts",
    "exit": "stop searching and exit",
    "quit": "alias for exit",
}


def handle_command(line: str, workers: List[Worker], tracker: RateTracker, stop_event: threading.Event):
    command = line.strip().lower()
    if not command:
        return
    if command == "help":
        for name, text in COMMANDS.items():
            print(f"  {name:<8} {text}")
    elif command == "status":
        alive = sum(1 for w in workers if w.is_alive())
        found = sum(w.found for w in workers)
        logger.info("Threads running: %d/%d | attempts: %d | found: %d",
                    alive, len(workers), tracker.total, found)
    elif command in ("exit", "quit"):
        stop_event.set()
    else:
        logger.warning("Unknown command '%s', type 'help' for the list", command)


def read_commands(workers, tracker, stop_event, stream=None):
    stream = stream or sys.stdin
    for line in stream:
        handle_command(line, workers, tracker, stop_event)
        if stop_event.is_set():
            return
    # stdin closed
    logger.debug("Command input closed")


def wait_for_workers(workers: List[Worker], stop_event: threading.Event, interval: float = SUPERVISE_INTERVAL):
    """Block until stopped or until every worker is done."""
    while not stop_event.wait(interval):
        if not any(w.is_alive() for w in workers):
            return


# ============================================================
# Main
# ============================================================
def main(argv=None) -> int:
    args = parse_args(argv)
    interactive = not args.disable_interactive_mode

    try:
        setup_logging(args.log_level, args.logs_path, color=not args.disable_log_color)
    except LoggingSetupError as e:
        print(f"Couldn't initialize logging: {e}", file=sys.stderr)
        return 1

    try:
        config = load_config(args)
    except (ConfigError, UnsupportedLanguage) as e:
        logger.error("%s", e)
        return 1

    logger.info("Searching for address with content: %s at placement '%s' (%s, prefix %s)",
                config.content, config.placement, args.network, network_prefix(config.mainnet))
    logger.info("Seed language: %s | crypto engine: %s", LANGUAGES[config.language], get_engine())

    tracker = RateTracker()
    stop_event = threading.Event()
    workers = dispatch(config, tracker, stop_event)

    if interactive:
        StatusLine(tracker, stop_event, color=not args.disable_log_color).start()
        threading.Thread(target=read_commands, args=(workers, tracker, stop_event),
                         name="commands", daemon=True).start()

    try:
        wait_for_workers(workers, stop_event)
    except KeyboardInterrupt:
        print()
    stop_event.set()

    tracker.snapshot()
    found = sum(w.found for w in workers)
    logger.info("Stopped after %d attempts, %d match(es) found", tracker.total, found)
    return 0


if __name__ == "__main__":
    sys.exit(main())
