#!/usr/bin/env python3
"""
SigLab Command Line Interface

Usage:
    siglab run [--message M] [--algorithm PSS|PKCS1v1.5] [--key-bits N]
               [--tamper-message] [--swap-key] [--corrupt-signature]
               [--seed S] [--json]
    siglab demo
"""

import argparse
import asyncio
import json
import random
import sys

from .config import (
    DEFAULT_ALGORITHM,
    DEFAULT_KEY_BITS,
    DEFAULT_SCENARIO_MESSAGE,
    LOG_JSON,
    LOG_LEVEL,
    STEP_DELAY,
    is_debug,
)
from .logging_config import configure_logging
from .models import Algorithm, RunState, ScenarioConfig, SUPPORTED_KEY_BITS
from .orchestrator import SimulationOrchestrator

EXIT_VERIFIED = 0
EXIT_REJECTED = 1
EXIT_FAILED = 2

_MARKS = {"info": " ", "success": "✓", "warning": "!", "error": "✗"}


def print_log(orchestrator: SimulationOrchestrator, start: int = 0):
    """Print log entries from position `start` onwards."""
    for entry in orchestrator.log[start:]:
        print(f"{_MARKS[entry.level.value]} [{entry.actor.value:>8}] {entry.text}")


async def simulate(config: ScenarioConfig, seed=None, step_delay=STEP_DELAY) -> SimulationOrchestrator:
    """Provision keys and run one scenario on a fresh orchestrator."""
    rng = random.Random(seed) if seed is not None else None
    orchestrator = SimulationOrchestrator(rng=rng, step_delay=step_delay)
    await orchestrator.provision_keys(config)
    if orchestrator.has_keys:
        await orchestrator.run_scenario(config)
    return orchestrator


def exit_code(orchestrator: SimulationOrchestrator) -> int:
    if orchestrator.state != RunState.COMPLETE or orchestrator.outcome is None:
        return EXIT_FAILED
    return EXIT_VERIFIED if orchestrator.outcome.verified else EXIT_REJECTED


def cmd_run(args):
    """Run one scenario and print its trace."""
    config = ScenarioConfig.from_flags(
        message=args.message,
        algorithm=args.algorithm,
        key_bits=args.key_bits,
        tamper_message=args.tamper_message,
        swap_key=args.swap_key,
        corrupt_signature=args.corrupt_signature,
    )
    orchestrator = asyncio.run(simulate(config, seed=args.seed))

    if args.json:
        print(json.dumps({
            "config": config.to_dict(),
            "result": orchestrator.to_dict(),
            "log": orchestrator.event_log.to_list(),
        }, indent=2))
    else:
        print_log(orchestrator)

    code = exit_code(orchestrator)
    if code == EXIT_VERIFIED:
        print("\n✓ Signature verified", file=sys.stderr)
    elif code == EXIT_REJECTED:
        print("\n✗ Signature rejected", file=sys.stderr)
    else:
        print(f"\n✗ Simulation did not complete: {orchestrator.last_error}", file=sys.stderr)
    return code


def cmd_demo(args):
    """Walk through the clean exchange and each attack in turn."""
    scenarios = [
        ("Clean exchange", {}),
        ("Message tampered in transit", {"tamper_message": True}),
        ("Receiver trusts the wrong public key", {"swap_key": True}),
        ("Signature bytes corrupted", {"corrupt_signature": True}),
        ("All three attacks", {"tamper_message": True, "swap_key": True, "corrupt_signature": True}),
    ]

    print("=" * 60)
    print("SigLab Hash-then-Sign Demonstration")
    print("=" * 60)

    async def walk():
        orchestrator = SimulationOrchestrator(step_delay=STEP_DELAY)
        await orchestrator.provision_keys(ScenarioConfig(algorithm=args.algorithm))
        print_log(orchestrator)
        for title, flags in scenarios:
            print("\n" + "-" * 60)
            print(title)
            print("-" * 60)
            start = len(orchestrator.log)
            await orchestrator.run_scenario(
                ScenarioConfig.from_flags(algorithm=args.algorithm, **flags)
            )
            print_log(orchestrator, start)
            outcome = orchestrator.outcome
            print(f"Verified: {outcome.verified if outcome else 'n/a'}")

    asyncio.run(walk())

    print("\n" + "=" * 60)
    print("Demonstration complete.")
    print("=" * 60)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="siglab",
        description="SigLab hash-then-sign simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  siglab demo                                 Run demonstration
  siglab run --tamper-message                 Tamper with the message in transit
  siglab run -a PKCS1v1.5 --corrupt-signature --seed 7 --json
        """
    )
    algorithms = [a.value for a in Algorithm]
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Operator log level (default: SIGLAB_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # run
    run_parser = subparsers.add_parser("run", help="Run one signing scenario")
    run_parser.add_argument("-m", "--message", default=DEFAULT_SCENARIO_MESSAGE, help="Message A signs")
    run_parser.add_argument("-a", "--algorithm", default=DEFAULT_ALGORITHM, choices=algorithms, help="Signature scheme")
    run_parser.add_argument("-k", "--key-bits", type=int, default=DEFAULT_KEY_BITS, choices=SUPPORTED_KEY_BITS, help="RSA modulus size")
    run_parser.add_argument("--tamper-message", action="store_true", help="Append a marker to the message in transit")
    run_parser.add_argument("--swap-key", action="store_true", help="Verify with B's public key instead of A's")
    run_parser.add_argument("--corrupt-signature", action="store_true", help="Flip three signature bytes")
    run_parser.add_argument("--seed", type=int, help="Seed for signature corruption")
    run_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    # demo
    demo_parser = subparsers.add_parser("demo", help="Run demonstration")
    demo_parser.add_argument("-a", "--algorithm", default=DEFAULT_ALGORITHM, choices=algorithms, help="Signature scheme")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # SIGLAB_DEBUG overrides the requested level
    level = "DEBUG" if is_debug() else args.log_level
    configure_logging(level=level, json_format=LOG_JSON)

    if args.command == "run":
        sys.exit(cmd_run(args))
    elif args.command == "demo":
        sys.exit(cmd_demo(args))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
