"""Pytest configuration and shared fixtures for test suite"""

import socket
import threading
import time
from typing import Any, Dict, Generator, List, Optional, Tuple

import pytest

from syslogger.errors import SyslogConnectionError
from syslogger.tcp_syslog_receiver import TCPSyslogReceiver
from syslogger.udp_syslog_receiver import UDPSyslogReceiver


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests requiring network")


class FakeTransport:
    """In-memory transport recording every write"""

    def __init__(self, local_address: str = '10.0.0.1:40000') -> None:
        self.local_address = local_address
        self.writes: List[bytes] = []
        self.write_attempts = 0
        self.fail_writes = 0  # number of upcoming writes that raise
        self.fail_close = False
        self.closed = False

    def write(self, data: bytes) -> int:
        self.write_attempts += 1
        if self.closed:
            raise OSError("write on closed transport")
        if self.fail_writes > 0:
            self.fail_writes -= 1
            raise BrokenPipeError("broken pipe")
        self.writes.append(data)
        return len(data)

    def close(self) -> None:
        self.closed = True
        if self.fail_close:
            raise OSError("close failed")


class FakeDialer:
    """Dialer handing out FakeTransports; can be told to fail"""

    def __init__(self) -> None:
        self.transports: List[FakeTransport] = []
        self.calls: List[Tuple[str, str, Optional[float]]] = []
        self.fail = False

    def __call__(self, network: str, address: str, timeout: Optional[float] = None) -> FakeTransport:
        self.calls.append((network, address, timeout))
        if self.fail:
            raise SyslogConnectionError(f"dial {network} {address}: connection refused")

        transport = FakeTransport()
        self.transports.append(transport)
        return transport

    @property
    def writes(self) -> List[bytes]:
        return [data for transport in self.transports for data in transport.writes]

    @property
    def write_attempts(self) -> int:
        return sum(transport.write_attempts for transport in self.transports)


class CollectingWriter:
    """Receiver writer that keeps parsed messages in memory"""

    def __init__(self) -> None:
        self.messages: List[Dict[str, Any]] = []
        self.lock = threading.Lock()

    def write(self, parsed_message: Dict[str, Any]) -> None:
        with self.lock:
            self.messages.append(parsed_message)

    def wait_for(self, count: int, timeout: float = 3.0) -> List[Dict[str, Any]]:
        """Wait until at least count messages arrived"""
        deadline = time.time() + timeout
        while time.time() < deadline:
            with self.lock:
                if len(self.messages) >= count:
                    break
            time.sleep(0.02)
        with self.lock:
            return list(self.messages)


@pytest.fixture
def fake_dialer() -> FakeDialer:
    return FakeDialer()


@pytest.fixture
def collecting_writer() -> CollectingWriter:
    return CollectingWriter()


@pytest.fixture
def fixed_timestamp(monkeypatch) -> str:
    """Freeze the timestamp written by SyslogClient"""
    stamp = '2025-11-17T10:30:45Z'
    monkeypatch.setattr('syslogger.syslog_client.timestamp', lambda: stamp)
    return stamp


def _wait_until_running(receiver: Any, max_wait: float = 3.0) -> None:
    start_time = time.time()
    while time.time() - start_time < max_wait:
        if receiver.running:
            break
        time.sleep(0.05)
    time.sleep(0.1)


@pytest.fixture
def udp_receiver_with_port(
    collecting_writer: CollectingWriter
) -> Generator[Tuple[UDPSyslogReceiver, int], None, None]:
    """Create UDP receiver on an available port"""
    receiver = UDPSyslogReceiver(host='127.0.0.1', port=0, writer=collecting_writer)

    thread = threading.Thread(target=receiver.start, daemon=True)
    thread.start()
    _wait_until_running(receiver)

    yield receiver, receiver.port

    receiver.stop()
    thread.join(timeout=2)


@pytest.fixture
def tcp_receiver_with_port(
    collecting_writer: CollectingWriter
) -> Generator[Tuple[TCPSyslogReceiver, int], None, None]:
    """Create TCP receiver on an available port"""
    receiver = TCPSyslogReceiver(host='127.0.0.1', port=0, writer=collecting_writer)

    thread = threading.Thread(target=receiver.start, daemon=True)
    thread.start()
    _wait_until_running(receiver)

    yield receiver, receiver.port

    receiver.stop()
    thread.join(timeout=2)


@pytest.fixture
def unused_tcp_port() -> int:
    """A local TCP port with nothing listening on it"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(('127.0.0.1', 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
