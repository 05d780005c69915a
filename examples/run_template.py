import argparse
import sys
from pathlib import Path

# Ensure local repo package is used even if another "mcusim" is on PYTHONPATH.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mcusim import MCUSimulator
from mcusim.templates import get_template, list_templates


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a bundled example program.")
    parser.add_argument(
        "template",
        nargs="?",
        default="led-blink",
        help="Template id (use --list to see them)",
    )
    parser.add_argument("--list", action="store_true", help="List templates and exit")
    parser.add_argument(
        "--steps",
        type=int,
        default=10,
        help="Number of sample points to print",
    )
    parser.add_argument(
        "--ms",
        type=int,
        default=500,
        help="Simulated milliseconds per sample",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    if args.list:
        for template in list_templates():
            print(f"{template.id:22} {template.category:14} {template.name}")
        return

    sim = MCUSimulator()
    result = sim.execute_code(get_template(args.template).code)
    if not result.success:
        print(f"{result.error_kind}: {result.error}")
        return
    sim.start()

    for step in range(args.steps):
        tick = sim.tick(args.ms)
        if tick is not None and not tick.success:
            print(f"{tick.error_kind}: {tick.error}")
            return
        snap = sim.get_state()
        pins = "".join("1" if p.state else "0" for p in snap.gpio[:8])
        print(
            f"t={(step + 1) * args.ms:>6}ms",
            "PA", pins,
            "LCD", "|".join(snap.lcd.lines()),
            "MOTOR", snap.motor_speed, snap.motor_direction.value,
        )


if __name__ == "__main__":
    main()
