import logging
import os
import socket
import sys
import threading
from datetime import datetime
from typing import Any, Optional, Union

from .errors import InvalidPriorityError, WriteError
from .priority import Severity, combine, is_valid_priority
from .transport import Dialer, Transport, dial_transport

logger = logging.getLogger(__name__)


def timestamp(now: Optional[datetime] = None) -> str:
    """RFC 3339 timestamp with seconds precision, e.g. 2006-01-02T15:04:05+07:00"""
    if now is None:
        now = datetime.now().astimezone()

    stamp = now.isoformat(timespec='seconds')
    if stamp.endswith('+00:00'):
        stamp = stamp[:-6] + 'Z'
    return stamp


def program_name() -> str:
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else 'python'


def local_hostname() -> str:
    """Local host name, or '' when it cannot be determined"""
    try:
        return socket.gethostname()
    except OSError:
        return ''


class SyslogClient:
    """
    Connection to a syslog server.

    Every message carries the facility of the configured priority. The
    severity is the configured one for write() and the method's own for
    emerg() ... debug().

    All connection state is guarded by a single lock, so one client can be
    shared between threads. A failed write triggers one reconnect followed
    by one more write attempt.
    """

    def __init__(self,
                 network: str,
                 address: str,
                 priority: int,
                 tag: str = '',
                 hostname: str = '',
                 timeout: Optional[float] = None,
                 dialer: Dialer = dial_transport) -> None:
        """
        Args:
            network: Transport kind ("tcp", "udp", ...)
            address: Server address as "host:port"
            priority: Default facility|severity, 0 .. LOCAL7|DEBUG
            tag: Program tag placed in every message (default: program name)
            hostname: Sender name (default: local host name, then the
                      connection's local address)
            timeout: Socket timeout in seconds passed to the dialer
            dialer: Callable opening a transport

        Raises:
            InvalidPriorityError: priority out of range
        """
        if not is_valid_priority(priority):
            raise InvalidPriorityError(priority)

        self.priority: int = priority
        self.tag: str = tag or program_name()
        self.hostname: str = hostname or local_hostname()
        self.network: str = network
        self.address: str = address
        self.timeout: Optional[float] = timeout
        self.dialer: Dialer = dialer

        self.conn: Optional[Transport] = None
        self.lock: threading.Lock = threading.Lock()

    def _connect(self) -> None:
        """
        (Re)open the transport. Must be called with self.lock held.

        Raises whatever the dialer raises.
        """
        if self.conn is not None:
            # a stale connection failing to close must not stop the reconnect
            try:
                self._close_connection()
            except OSError as e:
                logger.debug(f"Ignoring error closing stale connection: {e}")

        self.conn = self.dialer(self.network, self.address, self.timeout)

        if not self.hostname:
            self.hostname = self.conn.local_address

    def _close_connection(self) -> None:
        conn, self.conn = self.conn, None
        if conn is not None:
            conn.close()

    def write(self, data: Union[bytes, str]) -> int:
        """Send a message with the configured priority. Returns len(data)."""
        return self._write_and_retry(self.priority, data)

    def emit(self, severity: int, message: Union[bytes, str]) -> int:
        """
        Send a message with the given severity and the configured facility.

        Returns:
            Number of bytes of message accepted (excluding syslog framing)

        Raises:
            SyslogConnectionError: reconnecting failed
            WriteError: the write failed again after reconnecting
        """
        return self._write_and_retry(severity, message)

    def emerg(self, message: Union[bytes, str]) -> int:
        return self.emit(Severity.EMERG, message)

    def alert(self, message: Union[bytes, str]) -> int:
        return self.emit(Severity.ALERT, message)

    def crit(self, message: Union[bytes, str]) -> int:
        return self.emit(Severity.CRIT, message)

    def err(self, message: Union[bytes, str]) -> int:
        return self.emit(Severity.ERR, message)

    def warning(self, message: Union[bytes, str]) -> int:
        return self.emit(Severity.WARNING, message)

    def notice(self, message: Union[bytes, str]) -> int:
        return self.emit(Severity.NOTICE, message)

    def info(self, message: Union[bytes, str]) -> int:
        return self.emit(Severity.INFO, message)

    def debug(self, message: Union[bytes, str]) -> int:
        return self.emit(Severity.DEBUG, message)

    def _write_and_retry(self, severity: int, message: Union[bytes, str]) -> int:
        if isinstance(message, str):
            message = message.encode('utf-8')

        priority = combine(self.priority, severity)

        with self.lock:
            if self.conn is not None:
                try:
                    return self._write(priority, message)
                except OSError as e:
                    logger.debug(f"Write to {self.network} {self.address} failed, reconnecting: {e}")

            self._connect()

            try:
                return self._write(priority, message)
            except OSError as e:
                raise WriteError(f"write to {self.network} {self.address}: {e}") from e

    def _write(self, priority: int, message: bytes) -> int:
        """
        Format and send one message: <PRI>TIMESTAMP HOSTNAME TAG[PID]: MSG
        Returns len(message), not the number of framed bytes sent.
        """
        nl = b'' if message.endswith(b'\n') else b'\n'

        header = f"<{priority}>{timestamp()} {self.hostname} {self.tag}[{os.getpid()}]: "
        self.conn.write(header.encode('utf-8') + message + nl)

        return len(message)

    def close(self) -> None:
        """Close the connection. Closing twice is a no-op."""
        with self.lock:
            self._close_connection()

    @property
    def connected(self) -> bool:
        return self.conn is not None

    def __enter__(self) -> 'SyslogClient':
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        self.close()
        return False


def dial(network: str,
         address: str,
         priority: int,
         tag: str = '',
         hostname: str = '',
         timeout: Optional[float] = None,
         dialer: Dialer = dial_transport) -> SyslogClient:
    """
    Create a SyslogClient and make its first connection.

    Raises:
        InvalidPriorityError: priority out of range
        SyslogConnectionError: the first connection could not be made
    """
    client = SyslogClient(network, address, priority, tag=tag, hostname=hostname,
                          timeout=timeout, dialer=dialer)

    with client.lock:
        client._connect()

    return client
