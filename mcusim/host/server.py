"""TCP host server and command-line entry point.

Serves line-delimited JSON requests (see HostSession) so a UI in another
process can drive a simulator. With ``--script`` it instead runs one program
headless and prints the final LCD contents and serial log.
"""

from __future__ import annotations

import argparse
import json
import logging
import socketserver
import sys
import threading
from pathlib import Path
from typing import Optional, Sequence

from mcusim.core.controller import MCUSimulator
from mcusim.core.exceptions import SimulatorError
from mcusim.host.session import HostSession
from mcusim.utils.config_loader import get_config, load_config
from mcusim.utils.consts import DEFAULT_PROFILE

logger = logging.getLogger(__name__)


class _HostHandler(socketserver.StreamRequestHandler):
    def handle(self) -> None:
        session: HostSession = self.server.session  # type: ignore[attr-defined]
        while True:
            line = self.rfile.readline()
            if not line:
                break
            try:
                request = json.loads(line.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                response = {"ok": False, "error": f"Invalid JSON: {exc}"}
            else:
                if isinstance(request, dict):
                    response = session.handle_request(request)
                else:
                    response = {"ok": False, "error": "Request must be a JSON object"}

            self.wfile.write((json.dumps(response) + "\n").encode("utf-8"))


class HostServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self, host: str, port: int, session: HostSession):
        super().__init__((host, port), _HostHandler)
        self.session = session


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="MCU peripheral simulator host")
    parser.add_argument(
        "--profile", default=DEFAULT_PROFILE, help="Bundled board profile name"
    )
    parser.add_argument("--config", help="Path to a custom profile YAML")
    parser.add_argument(
        "--host", default="127.0.0.1", help="Bind host (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port", type=int, default=3344, help="Bind port (default: 3344)"
    )
    parser.add_argument("--script", help="Run this program headless instead of serving")
    parser.add_argument(
        "--ticks", type=int, default=10, help="Host ticks to run after --script"
    )
    parser.add_argument(
        "--tick-ms", type=int, default=100, help="Simulated milliseconds per tick"
    )
    parser.add_argument("--serial-lines", type=int, default=20, help="Serial entries to print")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def run_script(simulator: MCUSimulator, source: str, ticks: int, tick_ms: int, serial_lines: int) -> int:
    """Execute, start and tick a program, then print the result."""
    result = simulator.execute_code(source)
    if not result.success:
        print(f"Execution failed ({result.error_kind}): {result.error}")
        return 1

    simulator.start()
    for _ in range(ticks):
        tick_result = simulator.tick(tick_ms)
        if tick_result is not None and not tick_result.success:
            print(f"Loop failed ({tick_result.error_kind}): {tick_result.error}")
            return 1

    snapshot = simulator.get_state()
    print("LCD:")
    for line in snapshot.lcd.lines():
        print(f"  |{line}|")
    print(f"Motor: {snapshot.motor_speed} {snapshot.motor_direction.value}")
    print(f"Temperature: {snapshot.temperature:.1f} C")
    print("Serial:")
    for entry in simulator.state.serial.tail(serial_lines):
        print(f"  [{entry.direction.value}] {entry.data}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = load_config(args.profile, args.config) if args.config else get_config(args.profile)
    except SimulatorError as exc:
        print(exc, file=sys.stderr)
        return 2

    simulator = MCUSimulator(config=config)

    if args.script:
        source = Path(args.script).read_text(encoding="utf-8")
        return run_script(simulator, source, args.ticks, args.tick_ms, args.serial_lines)

    lock = threading.RLock()
    session = HostSession(simulator, lock=lock)
    server = HostServer(args.host, args.port, session)
    logger.info("Host server listening on %s:%d (profile=%s)", args.host, args.port, args.profile)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
