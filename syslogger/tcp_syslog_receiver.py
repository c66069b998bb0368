import logging
import select
import socket
import threading
from datetime import datetime
from typing import List, Optional, Tuple

from .line_reader import LineReader
from .syslog_parser import SyslogParser

logger = logging.getLogger(__name__)


class TCPSyslogReceiver:
    """Receive newline-framed syslog messages over TCP, one thread per connection"""

    def __init__(self, host: str = '0.0.0.0', port: int = 5514,
                 writer: Optional[object] = None) -> None:
        self.host: str = host
        self.port: int = port
        self.writer: Optional[object] = writer
        self.running: bool = False
        self.connections: List[Tuple[socket.socket, threading.Thread]] = []
        self.lock: threading.Lock = threading.Lock()

    def start(self) -> None:
        """Accept connections until stop() is called. Blocks the calling thread."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((self.host, self.port))
        sock.listen(5)
        sock.setblocking(False)
        self.port = sock.getsockname()[1]
        self.running = True

        logger.info(f"TCP syslog receiver listening on {self.host}:{self.port}")

        while self.running:
            try:
                readable, _, _ = select.select([sock], [], [], 1.0)
                if readable:
                    client_sock, client_addr = sock.accept()
                    logger.info(f"New connection from {client_addr}")

                    handler = threading.Thread(
                        target=self._handle_connection,
                        args=(client_sock, client_addr),
                        daemon=True
                    )
                    handler.start()

                    with self.lock:
                        self.connections.append((client_sock, handler))
            except Exception as e:
                if self.running:
                    logger.error(f"Error accepting connection: {e}")

        sock.close()

    def _handle_connection(self, sock: socket.socket, addr: Tuple[str, int]) -> None:
        reader = LineReader()

        try:
            while self.running:
                readable, _, _ = select.select([sock], [], [], 1.0)
                if not readable:
                    continue

                try:
                    data = sock.recv(4096)
                except OSError as e:
                    if self.running:
                        logger.error(f"Error reading from {addr}: {e}")
                    break

                if not data:
                    logger.info(f"Connection closed by {addr}")
                    for line in reader.flush():
                        self._process_message(line, addr[0])
                    break

                for line in reader.feed(data):
                    self._process_message(line, addr[0])
        except (OSError, ValueError) as e:
            # select() on a socket closed by stop()
            logger.debug(f"Connection handler for {addr} interrupted: {e}")
        finally:
            sock.close()
            with self.lock:
                self.connections = [(s, t) for s, t in self.connections if s is not sock]
            logger.info(f"Connection handler for {addr} terminated")

    def _process_message(self, message: str, source_ip: str) -> None:
        parsed = SyslogParser.parse(message)

        parsed['source_ip'] = source_ip
        parsed['received_at'] = datetime.now().isoformat()

        if self.writer:
            self.writer.write(parsed)

    def disconnect_all(self) -> None:
        """Drop every client connection, leaving the listener up"""
        with self.lock:
            connections = list(self.connections)

        for sock, _ in connections:
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError as e:
                logger.debug(f"Shutdown of client socket failed: {e}")

    def stop(self) -> None:
        self.running = False
        self.disconnect_all()
