# src/ponder_cycle/scripts/cycle_check.py
"""
Print the cycle state and trigger decisions for an instant.

Useful when checking a scheduler configuration: run it with the instant the
cron job fires and confirm the phase and notification it would produce.
"""

import argparse
import json
import sys
from datetime import datetime

from ponder_cycle.core.civil_time import absolute_to_civil, to_instant, utcnow
from ponder_cycle.core.notifications import TriggerTick
from ponder_cycle.core.phase import cycle_date_for, get_phase_info
from ponder_cycle.core.prompt_window import get_prompt_window
from ponder_cycle.services.notification_trigger import evaluate_trigger


def build_report(now: datetime) -> dict[str, object]:
    """Collect phase, prompt window and trigger decisions for ``now``.

    Args:
        now: Instant to evaluate

    Returns:
        JSON-serializable report
    """
    info = get_phase_info(now)
    cycle_date = cycle_date_for(now)
    window = get_prompt_window(cycle_date)
    triggers = {}
    for tick in TriggerTick:
        decision = evaluate_trigger(tick, now)
        triggers[tick.value] = (
            decision.notification_type.value if decision.notification_type else None
        )

    return {
        "now": now.isoformat(),
        "civil": str(absolute_to_civil(now)),
        "phase": info.phase.value,
        "phase_started_at": info.phase_started_at.isoformat(),
        "phase_ends_at": info.phase_ends_at.isoformat(),
        "seconds_remaining": int(info.time_remaining.total_seconds()),
        "cycle_date": cycle_date.isoformat(),
        "prompt_window": {
            "available_at": window.available_at.isoformat(),
            "response_window_close_at": window.response_window_close_at.isoformat(),
            "release_at": window.release_at.isoformat(),
        },
        "triggers": triggers,
    }


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Ponder cycle state check")
    p.add_argument("--at", default=None,
                   help="ISO 8601 instant with offset, e.g. 2026-01-12T14:00:01+00:00 (default: now)")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.at:
        try:
            now = to_instant(datetime.fromisoformat(args.at))
        except ValueError as exc:
            print(f"Invalid --at value: {exc}", file=sys.stderr)
            return 2
    else:
        now = utcnow()

    print(json.dumps(build_report(now), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
