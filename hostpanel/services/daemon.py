"""
Provisioning daemon wake-up

The daemon re-scans every status column on its own; the wake-up carries no
payload. Delivery is best effort: the committed rows are the queue, so a
failed wake-up is logged and nothing else happens. A delivered wake-up says
nothing about whether provisioning succeeded.

Wire protocol (line based, one answer per line, "250 ..." means OK):
    <- 250 welcome
    -> helo <panel version>
    <- 250 ...
    -> execute backend command
    <- 250 ...
    -> bye
    <- 250 ...
"""
import logging
import socket
from dataclasses import dataclass
from typing import Callable, Optional

from hostpanel.config import settings
from hostpanel.exceptions import ProvisioningError
from hostpanel.middleware.metrics import DAEMON_REQUESTS

logger = logging.getLogger("hostpanel.daemon")

ANSWER_OK = 250


class DaemonProtocolError(ProvisioningError):
    pass


@dataclass(frozen=True)
class WakeupHint:
    """Outcome of a best-effort wake-up. Truthy only when the daemon acknowledged it."""
    delivered: bool
    detail: str = ""

    def __bool__(self) -> bool:
        return self.delivered


class DaemonNotifier:
    """Sends at most one wake-up per instance; build one per request."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        timeout: Optional[float] = None,
        mode: Optional[str] = None,
        version: Optional[str] = None,
        connect: Callable[..., socket.socket] = socket.create_connection,
    ):
        self.host = host or settings.DAEMON_HOST
        self.port = port or settings.DAEMON_PORT
        self.timeout = timeout if timeout is not None else settings.DAEMON_TIMEOUT
        self.mode = mode or settings.DAEMON_NOTIFY_MODE
        self.version = version or settings.APP_VERSION
        self._connect = connect
        self._sent = False

    @property
    def sent(self) -> bool:
        return self._sent

    def notify(self) -> WakeupHint:
        if self._sent:
            return WakeupHint(True, "daemon already requested")

        if self.mode == "none":
            self._sent = True
            DAEMON_REQUESTS.labels(outcome="skipped").inc()
            return WakeupHint(True, "daemon notification disabled")

        try:
            self._exchange()
        except (OSError, ValueError, DaemonProtocolError) as exc:
            DAEMON_REQUESTS.labels(outcome="failed").inc()
            logger.error(
                "Couldn't send request to the provisioning daemon at %s:%s: %s",
                self.host, self.port, exc,
            )
            return WakeupHint(False, str(exc))

        self._sent = True
        DAEMON_REQUESTS.labels(outcome="delivered").inc()
        logger.debug("Provisioning daemon request delivered")
        return WakeupHint(True, "daemon request successful")

    # ── protocol ──

    def _exchange(self) -> None:
        with self._connect((self.host, self.port), timeout=self.timeout) as sock:
            sock.settimeout(self.timeout)
            reader = sock.makefile("r", encoding="utf-8", errors="replace", newline="\n")
            try:
                self._read_answer(reader)  # welcome
                for command in (f"helo {self.version}", "execute backend command", "bye"):
                    sock.sendall(f"{command}\n".encode("utf-8"))
                    self._read_answer(reader)
            finally:
                reader.close()

    @staticmethod
    def _read_answer(reader) -> str:
        answer = reader.readline()
        if not answer:
            raise DaemonProtocolError("connection closed by the daemon")
        code = answer.split(" ", 1)[0].strip()
        if not code.isdigit() or int(code) != ANSWER_OK:
            raise DaemonProtocolError(f"unexpected answer: {answer.strip()!r}")
        return answer
