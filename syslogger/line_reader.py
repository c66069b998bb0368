import logging
from typing import List

logger = logging.getLogger(__name__)


class LineReader:
    """Split a TCP byte stream into newline-terminated syslog lines"""

    MAX_LINE_LENGTH = 65535  # 64KB

    def __init__(self, max_line_len: int = MAX_LINE_LENGTH) -> None:
        self.buffer: bytes = b''
        self.max_line_len = max_line_len
        self.discarding: bool = False

    def feed(self, data: bytes) -> List[str]:
        """Feed data and return complete lines, without their newline"""
        self.buffer += data
        lines: List[str] = []

        while True:
            newline_idx = self.buffer.find(b'\n')
            if newline_idx == -1:
                break

            line = self.buffer[:newline_idx]
            self.buffer = self.buffer[newline_idx + 1:]

            if self.discarding:
                # tail of an oversized line
                self.discarding = False
                continue

            lines.append(self._decode(line))

        if len(self.buffer) > self.max_line_len:
            logger.warning(f"Line too long: more than {self.max_line_len} bytes, skipping")
            self.buffer = b''
            self.discarding = True

        return lines

    def flush(self) -> List[str]:
        """Return a final unterminated line left in the buffer, if any"""
        line, self.buffer = self.buffer, b''
        if not line or self.discarding:
            self.discarding = False
            return []
        return [self._decode(line)]

    def _decode(self, line: bytes) -> str:
        try:
            return line.decode('utf-8')
        except UnicodeDecodeError as e:
            logger.warning(f"UTF-8 error, using replacement: {e}")
            return line.decode('utf-8', errors='replace')
