import logging
import socket
from typing import Callable, Optional, Tuple

from .errors import SyslogConnectionError

logger = logging.getLogger(__name__)

# network name -> (address family, socket type)
NETWORKS = {
    'tcp': (socket.AF_UNSPEC, socket.SOCK_STREAM),
    'tcp4': (socket.AF_INET, socket.SOCK_STREAM),
    'tcp6': (socket.AF_INET6, socket.SOCK_STREAM),
    'udp': (socket.AF_UNSPEC, socket.SOCK_DGRAM),
    'udp4': (socket.AF_INET, socket.SOCK_DGRAM),
    'udp6': (socket.AF_INET6, socket.SOCK_DGRAM),
}


def split_address(address: str, family: int = socket.AF_UNSPEC) -> Tuple[str, int]:
    """
    Split "host:port" into its parts.
    An empty host (":514") means the loopback address: ::1 for AF_INET6,
    127.0.0.1 otherwise. IPv6 hosts go in brackets.
    """
    host, sep, port = address.rpartition(':')
    if not sep:
        raise SyslogConnectionError(f"missing port in address {address!r}")

    if host.startswith('[') and host.endswith(']'):
        host = host[1:-1]

    try:
        port_number = int(port)
    except ValueError:
        raise SyslogConnectionError(f"invalid port in address {address!r}") from None

    if not host:
        host = '::1' if family == socket.AF_INET6 else '127.0.0.1'

    return host, port_number


def format_address(sockname: Tuple) -> str:
    host, port = sockname[0], sockname[1]
    if ':' in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


class Transport:
    """A connected stream or datagram socket to a syslog server"""

    def __init__(self, sock: socket.socket, network: str) -> None:
        self.sock: socket.socket = sock
        self.network: str = network

    @property
    def local_address(self) -> str:
        """Local endpoint as "host:port" """
        return format_address(self.sock.getsockname())

    def write(self, data: bytes) -> int:
        """Send data in a single transport write"""
        if self.sock.type == socket.SOCK_STREAM:
            self.sock.sendall(data)
            return len(data)
        return self.sock.send(data)

    def close(self) -> None:
        self.sock.close()


def _open_socket(family: int, socktype: int, host: str, port: int,
                 timeout: Optional[float]) -> socket.socket:
    """Connect to the first address of host that accepts the connection"""
    last_error: Optional[OSError] = None

    for af, stype, proto, _, sockaddr in socket.getaddrinfo(host, port, family, socktype):
        sock = socket.socket(af, stype, proto)
        try:
            sock.settimeout(timeout)
            sock.connect(sockaddr)
            return sock
        except OSError as e:
            sock.close()
            last_error = e

    raise last_error or OSError(f"no address found for {host}")


def dial_transport(network: str, address: str, timeout: Optional[float] = None) -> Transport:
    """
    Open a transport to address over network ("tcp" or "udp", with an
    optional "4"/"6" suffix to pin the address family).

    For "udp" nothing is sent while connecting, so an unreachable server
    usually only shows up on a later write.

    Raises:
        SyslogConnectionError: unknown network, malformed address or the
            connection could not be established
    """
    if network not in NETWORKS:
        raise SyslogConnectionError(f"unknown network {network!r}")

    family, socktype = NETWORKS[network]
    host, port = split_address(address, family)

    try:
        sock = _open_socket(family, socktype, host, port, timeout)
    except OSError as e:
        raise SyslogConnectionError(f"dial {network} {address}: {e}") from e

    logger.debug(f"Connected {network} transport to {host}:{port}")
    return Transport(sock, network)


Dialer = Callable[[str, str, Optional[float]], Transport]
