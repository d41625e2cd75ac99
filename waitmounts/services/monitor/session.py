import asyncio
import logging
import signal
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional

from rich.console import Console

from ...logging_config import log_success, setup_logging, teardown_logging
from ...models import MonitorConfig

_HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


@dataclass
class MonitorSession:
    """Outcome of a monitoring session, filled in while the session closes."""

    exit_code: int = 0
    received_signal: Optional[str] = None


@asynccontextmanager
async def monitor_session(
    config: MonitorConfig,
    version: str,
    log_level: str = "INFO",
    console: Optional[Console] = None,
) -> AsyncIterator[MonitorSession]:
    """
    Session lifespan: log handlers and signal handlers are acquired on entry
    and released on every exit path, and the final log line is always written.

    SIGINT/SIGTERM cancel the task running the session; that cancellation ends
    the session normally (exit code 0). Any other exception is logged and
    re-raised with the session exit code set to 1.
    """
    handlers = setup_logging(config.log_path, config.daemon_mode, log_level, console)
    session = MonitorSession()

    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    installed: List[signal.Signals] = []

    def _on_signal(sig: signal.Signals) -> None:
        session.received_signal = sig.name
        logging.warning(f"Received {sig.name}, shutting down mount monitoring")
        task.cancel()

    for sig in _HANDLED_SIGNALS:
        try:
            loop.add_signal_handler(sig, _on_signal, sig)
            installed.append(sig)
        except (NotImplementedError, RuntimeError) as e:
            logging.debug(f"Cannot install handler for {sig.name}: {e}")

    logging.info("===== Mount monitoring session started =====")
    logging.info(f"wait-mounts version {version}")
    logging.info(f"Monitoring mounts: {' '.join(config.mount_points)}")
    logging.info(f"Managing containers: {' '.join(config.container_ids)}")

    try:
        yield session
    except asyncio.CancelledError:
        if session.received_signal is None:
            session.exit_code = 1
            raise
        task.uncancel()
        logging.info(f"Mount monitoring stopped by {session.received_signal}")
    except Exception as e:
        session.exit_code = 1
        logging.error(f"Script terminated with error: {e}")
        raise
    else:
        log_success("Script completed successfully")
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
        logging.info(
            f"===== Mount monitoring session ended (exit code {session.exit_code}) ====="
        )
        teardown_logging(handlers)
