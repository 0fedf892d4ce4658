#!/usr/bin/env python3
"""
SigLab Example - Attacks Against One Signed Message

A signs a payment instruction for B. The same key pairs are reused
while the adversary tries each attack, so the only thing that changes
between runs is what happens in transit.

Run with: python examples/tamper_walkthrough.py
"""

import asyncio
import random

from siglab import Actor, ScenarioConfig, SimulationOrchestrator


MESSAGE = "Pay Carol 250.00 from account 0042"


async def main():
    orchestrator = SimulationOrchestrator(rng=random.Random(2024), step_delay=0)
    await orchestrator.provision_keys(ScenarioConfig(message=MESSAGE))

    for flags in ({}, {"tamper_message": True}, {"corrupt_signature": True}, {"swap_key": True}):
        config = ScenarioConfig.from_flags(message=MESSAGE, **flags)
        start = len(orchestrator.log)
        await orchestrator.run_scenario(config)

        label = ", ".join(flags) or "no attack"
        print(f"\n=== {label} ===")
        for entry in orchestrator.log[start:]:
            if entry.actor == Actor.ATTACKER or entry.level.value == "warning":
                print(f"  [{entry.actor.value}] {entry.text}")

        outcome = orchestrator.outcome
        verdict = "ACCEPTED" if outcome.verified else "REJECTED"
        print(f"  B {verdict} the message (verified with {outcome.used_key.value}'s key)")


if __name__ == "__main__":
    asyncio.run(main())
