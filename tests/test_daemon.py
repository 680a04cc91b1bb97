"""Daemon wake-up over the line protocol, against a local TCP server."""
import socket
import socketserver
import threading

import pytest

from hostpanel.services.daemon import DaemonNotifier, WakeupHint


class _DaemonHandler(socketserver.StreamRequestHandler):
    def handle(self):
        self.server.connections += 1
        self.wfile.write(self.server.welcome)
        for raw in self.rfile:
            command = raw.decode("utf-8").strip()
            self.server.received.append(command)
            reply = self.server.answer(command)
            self.wfile.write(reply if isinstance(reply, bytes) else reply.encode("utf-8"))
            if command == "bye":
                break


class _FakeDaemon(socketserver.ThreadingTCPServer):
    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, answer, welcome=b"250 OK i-MSCP daemon ready\n"):
        super().__init__(("127.0.0.1", 0), _DaemonHandler)
        self.answer = answer
        self.welcome = welcome
        self.received = []
        self.connections = 0


@pytest.fixture
def daemon_server():
    servers = []

    def start(answer=lambda command: "250 OK\n", **kwargs):
        server = _FakeDaemon(answer, **kwargs)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return server

    yield start
    for server in servers:
        server.shutdown()
        server.server_close()


def _notifier(server, **kwargs):
    host, port = server.server_address
    return DaemonNotifier(host=host, port=port, timeout=2.0, mode="socket", version="1.5.3", **kwargs)


def test_wakeup_hint_truthiness():
    assert WakeupHint(True)
    assert not WakeupHint(False, "refused")


def test_successful_exchange(daemon_server):
    server = daemon_server()
    notifier = _notifier(server)

    hint = notifier.notify()

    assert hint
    assert notifier.sent
    assert server.received == ["helo 1.5.3", "execute backend command", "bye"]


def test_only_one_request_per_notifier(daemon_server):
    server = daemon_server()
    notifier = _notifier(server)

    assert notifier.notify()
    assert notifier.notify()
    assert server.connections == 1


def test_non_250_answer_is_a_failed_delivery(daemon_server):
    server = daemon_server(lambda command: "500 unknown command\n" if command.startswith("execute") else "250 OK\n")
    notifier = _notifier(server)

    hint = notifier.notify()

    assert not hint
    assert "500" in hint.detail
    assert not notifier.sent


def test_unreachable_daemon_does_not_raise():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    # nothing listens on the port anymore
    notifier = DaemonNotifier(host="127.0.0.1", port=port, timeout=1.0, mode="socket")

    hint = notifier.notify()

    assert not hint
    assert not notifier.sent


def test_mode_none_skips_the_socket():
    def connect(*args, **kwargs):
        raise AssertionError("socket must not be opened")

    notifier = DaemonNotifier(mode="none", connect=connect)

    assert notifier.notify()
    assert notifier.sent


def test_undecodable_welcome_still_delivers(daemon_server):
    server = daemon_server(welcome=b"250 \xff\xfe daemon\n")
    notifier = _notifier(server)

    hint = notifier.notify()

    assert hint
    assert server.received == ["helo 1.5.3", "execute backend command", "bye"]


def test_undecodable_error_answer_is_a_failed_delivery(daemon_server):
    server = daemon_server(lambda command: b"\xff\xfe garbage\n" if command.startswith("execute") else "250 OK\n")
    notifier = _notifier(server)

    hint = notifier.notify()

    assert not hint
    assert "unexpected answer" in hint.detail
    assert not notifier.sent
