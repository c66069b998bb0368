import logging
import sys
import threading
from typing import Any, Dict, Optional, TextIO

logger = logging.getLogger(__name__)


class MessagePrinter:
    """Print received syslog messages, one line each, to a text stream"""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        """
        Args:
            stream: Output stream (default: sys.stdout at write time)
        """
        self.stream: Optional[TextIO] = stream
        self.lock: threading.Lock = threading.Lock()
        self.is_closed: bool = False

    @staticmethod
    def format(parsed_message: Dict[str, Any]) -> str:
        """timestamp source facility.severity hostname tag[pid]: message"""
        fields = [
            parsed_message.get('timestamp', '-'),
            parsed_message.get('source_ip', '-'),
            f"{parsed_message.get('facility', 'unknown')}.{parsed_message.get('severity', 'unknown')}",
        ]
        if 'hostname' in parsed_message:
            fields.append(parsed_message['hostname'])
        if 'tag' in parsed_message:
            fields.append(f"{parsed_message['tag']}[{parsed_message['pid']}]:")

        fields.append(parsed_message.get('message', ''))
        return ' '.join(str(field) for field in fields)

    def write(self, parsed_message: Dict[str, Any]) -> None:
        """Thread-safe: lines from different connections never interleave"""
        # Quick check without lock
        if self.is_closed:
            logger.warning("Attempted write to closed MessagePrinter")
            return

        line = self.format(parsed_message)

        with self.lock:
            # Double-check after acquiring lock
            if self.is_closed:
                return

            stream = self.stream or sys.stdout
            stream.write(line + '\n')
            stream.flush()

    def close(self) -> None:
        with self.lock:
            self.is_closed = True

    def __enter__(self) -> 'MessagePrinter':
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        self.close()
        return False
