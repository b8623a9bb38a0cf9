"""Tick daemon: drives the update controller on the configured refresh period.

Usage:
    python -m astroweather daemon --config astroweather.yaml
    python -m astroweather daemon --interval 600
    python -m astroweather daemon --stop
"""

import json
import logging
import os
import signal
import sys
import time
from pathlib import Path

from astroweather.config.schema import WeatherConfig
from astroweather.models.common import utc_now, utc_now_iso
from astroweather.models.forecast import TickStatus
from astroweather.pipeline.update_controller import UpdateController

logger = logging.getLogger(__name__)

MIN_INTERVAL = 1
PID_DIR = Path("data")
PID_FILE = PID_DIR / "astroweather.pid"
STATE_FILE = PID_DIR / "astroweather_state.json"


class WeatherDaemon:
    """Calls UpdateController.tick() in a loop with signal handling."""

    def __init__(
        self,
        config: WeatherConfig,
        interval: int | None = None,
        controller: UpdateController | None = None,
    ):
        self.config = config
        if interval is None:
            interval = config.ops.refresh_period_seconds
        self.interval = max(interval, MIN_INTERVAL)
        self.controller = controller or UpdateController(config)
        self._running = False
        self._total_ticks = 0
        self._total_ok = 0
        self._total_failures = 0
        self._started_at: str | None = None

    def start(self) -> None:
        """Start the daemon loop."""
        self._check_not_already_running()
        self._write_pid()
        self._setup_signals()
        self._running = True
        self._started_at = utc_now_iso()

        logger.info(
            "Daemon started: mode=%s interval=%ds pid=%d",
            self.config.mode, self.interval, os.getpid(),
        )
        print(f"Weather daemon started (pid {os.getpid()}, every {self.interval}s)")
        print("   Stop: python -m astroweather daemon --stop")

        try:
            self._loop()
        except KeyboardInterrupt:
            logger.info("Daemon interrupted by keyboard")
        finally:
            self._cleanup()

    def _loop(self) -> None:
        while self._running:
            tick_start = time.monotonic()
            self._run_one_tick()
            self._save_state()

            # Sleep in 1-second increments so we can respond to signals
            sleep_until = tick_start + self.interval
            while self._running and time.monotonic() < sleep_until:
                time.sleep(1)

    def _run_one_tick(self) -> bool:
        """Execute a single tick. Returns True when the status is OK."""
        self._total_ticks += 1
        try:
            result = self.controller.tick(utc_now())
        except Exception:
            self._total_failures += 1
            logger.exception("Tick #%d crashed", self._total_ticks)
            return False

        if result.status == TickStatus.OK:
            self._total_ok += 1
            logger.info("Tick #%d OK: %s", self._total_ticks, result.summary)
            return True
        if result.status == TickStatus.ALERT:
            self._total_failures += 1
        logger.warning(
            "Tick #%d %s: %s", self._total_ticks, result.status, result.message
        )
        return False

    def _setup_signals(self) -> None:
        """Handle SIGTERM and SIGINT for graceful shutdown."""
        def _stop(signum: int, frame: object) -> None:
            sig_name = signal.Signals(signum).name
            logger.info("Received %s, shutting down gracefully...", sig_name)
            self._running = False

        signal.signal(signal.SIGTERM, _stop)
        signal.signal(signal.SIGINT, _stop)

    def _check_not_already_running(self) -> None:
        """Prevent duplicate daemons."""
        if PID_FILE.exists():
            try:
                pid = int(PID_FILE.read_text().strip())
                os.kill(pid, 0)
                print(f"Daemon already running (pid {pid}). Stop it first:")
                print("   python -m astroweather daemon --stop")
                sys.exit(1)
            except (ProcessLookupError, ValueError):
                # Stale PID file
                PID_FILE.unlink(missing_ok=True)
            except PermissionError:
                print(f"Daemon may be running (pid {pid}), can't verify.")
                sys.exit(1)

    def _write_pid(self) -> None:
        PID_DIR.mkdir(parents=True, exist_ok=True)
        PID_FILE.write_text(str(os.getpid()))

    def _save_state(self) -> None:
        """Persist tick counters and the last status for `daemon --status`."""
        last = self.controller.last_result
        state = {
            "pid": os.getpid(),
            "started_at": self._started_at,
            "interval": self.interval,
            "mode": self.config.mode.value,
            "total_ticks": self._total_ticks,
            "total_ok": self._total_ok,
            "total_failures": self._total_failures,
            "last_status": last.status.value if last else None,
            "last_message": (last.summary or last.message) if last else None,
            "forecast_age_seconds": self.controller.cache.age_seconds(utc_now()),
            "last_update": utc_now_iso(),
        }
        PID_DIR.mkdir(parents=True, exist_ok=True)
        STATE_FILE.write_text(json.dumps(state, indent=2))

    def _cleanup(self) -> None:
        PID_FILE.unlink(missing_ok=True)
        self._save_state()
        logger.info(
            "Daemon stopped: %d ticks (%d ok, %d failed)",
            self._total_ticks, self._total_ok, self._total_failures,
        )


def stop_daemon() -> int:
    """Stop a running daemon by sending SIGTERM."""
    if not PID_FILE.exists():
        print("No daemon running (no PID file found)")
        return 1

    try:
        pid = int(PID_FILE.read_text().strip())
    except ValueError:
        print("Corrupt PID file, removing")
        PID_FILE.unlink(missing_ok=True)
        return 1

    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        print(f"Daemon not running (stale pid {pid}), cleaning up")
        PID_FILE.unlink(missing_ok=True)
        return 0

    print(f"Stopping daemon (pid {pid})...")
    os.kill(pid, signal.SIGTERM)

    # A tick in flight finishes within the HTTP read timeout
    for _ in range(30):
        time.sleep(1)
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            print("Daemon stopped")
            PID_FILE.unlink(missing_ok=True)
            return 0

    print("Daemon didn't stop in 30s, sending SIGKILL")
    os.kill(pid, signal.SIGKILL)
    PID_FILE.unlink(missing_ok=True)
    return 0


def daemon_status() -> int:
    """Print daemon status from the state file."""
    if not STATE_FILE.exists():
        print("No daemon state found")
        return 1

    state = json.loads(STATE_FILE.read_text())
    pid = state.get("pid", "?")

    running = False
    try:
        os.kill(int(pid), 0)
        running = True
    except (ProcessLookupError, ValueError, TypeError):
        pass

    print(f"Daemon {'running' if running else 'stopped'}")
    print(f"  PID: {pid}")
    print(f"  Mode: {state.get('mode', 'unknown')}")
    print(f"  Interval: {state.get('interval', '?')}s")
    print(f"  Started: {state.get('started_at', '?')}")
    print(f"  Ticks: {state.get('total_ticks', 0)}")
    print(f"  OK: {state.get('total_ok', 0)}")
    print(f"  Failures: {state.get('total_failures', 0)}")
    print(f"  Last status: {state.get('last_status', '?')}")
    print(f"  Last message: {state.get('last_message', '?')}")
    age = state.get("forecast_age_seconds")
    print(f"  Forecast age: {age:.0f}s" if age is not None else "  Forecast age: none")
    print(f"  Last update: {state.get('last_update', '?')}")
    return 0
