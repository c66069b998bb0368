import logging
import socket
from datetime import datetime
from typing import Optional

from .syslog_parser import SyslogParser

logger = logging.getLogger(__name__)


class UDPSyslogReceiver:
    """Receive syslog messages over UDP, one message per datagram"""

    def __init__(self, host: str = '0.0.0.0', port: int = 5514,
                 writer: Optional[object] = None) -> None:
        """
        Args:
            host: Interface to bind to
                  - '0.0.0.0' = All interfaces (default)
                  - '127.0.0.1' = Localhost only
            port: UDP port to listen on (default: 5514)
            writer: Object with write(parsed_message), e.g. a MessagePrinter
        """
        self.host: str = host
        self.port: int = port
        self.writer: Optional[object] = writer
        self.running: bool = False

    def start(self) -> None:
        """Receive until stop() is called. Blocks the calling thread."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.bind((self.host, self.port))
        sock.settimeout(1.0)
        self.port = sock.getsockname()[1]
        self.running = True

        logger.info(f"UDP syslog receiver listening on {self.host}:{self.port}")

        while self.running:
            try:
                data, addr = sock.recvfrom(65535)
                message = data.decode('utf-8', errors='replace')
                self._process_message(message, addr[0])
            except socket.timeout:
                continue
            except Exception as e:
                if self.running:
                    logger.error(f"Error receiving UDP message: {e}")

        sock.close()

    def _process_message(self, message: str, source_ip: str) -> None:
        parsed = SyslogParser.parse(message)

        parsed['source_ip'] = source_ip
        parsed['received_at'] = datetime.now().isoformat()

        if self.writer:
            self.writer.write(parsed)

    def stop(self) -> None:
        self.running = False
