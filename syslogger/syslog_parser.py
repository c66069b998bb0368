import logging
import re
from typing import Any, Dict, Pattern

from .priority import facility_name, severity_name

logger = logging.getLogger(__name__)


class SyslogParser:
    """
    Decode syslog lines as written by SyslogClient:

        <PRI>TIMESTAMP HOSTNAME TAG[PID]: MESSAGE

    The timestamp is RFC 3339 with a timezone offset. Lines that do not
    match keep whatever can be recovered (the PRI at least).
    """

    LINE_PATTERN: Pattern[str] = re.compile(
        r'^<(?P<pri>\d{1,3})>(?P<timestamp>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2}))\s'
        r'(?P<hostname>\S*)\s(?P<tag>[^\s\[]*)\[(?P<pid>\d+)\]:\s(?P<msg>.*)$',
        re.DOTALL
    )

    PRI_PATTERN: Pattern[str] = re.compile(r'^<(\d{1,3})>(.*)$', re.DOTALL)

    @classmethod
    def parse(cls, line: str) -> Dict[str, Any]:
        """
        Parse one line (trailing newline optional) into a dict with keys
        priority, facility, severity, timestamp, hostname, tag, pid,
        message and raw. Never raises.
        """
        text = line[:-1] if line.endswith('\n') else line

        match = cls.LINE_PATTERN.match(text)
        if match:
            return cls._parse_line(match, line)

        pri_match = cls.PRI_PATTERN.match(text)
        if pri_match:
            pri = int(pri_match.group(1))
            return {
                'priority': pri,
                'facility': facility_name(pri),
                'severity': severity_name(pri),
                'message': pri_match.group(2),
                'raw': line
            }

        logger.debug(f"Line without priority: {text!r}")
        return {
            'priority': 13,  # user.notice
            'facility': 'user',
            'severity': 'notice',
            'message': text,
            'raw': line
        }

    @classmethod
    def _parse_line(cls, match: 're.Match[str]', raw: str) -> Dict[str, Any]:
        data = match.groupdict()
        pri = int(data['pri'])

        return {
            'priority': pri,
            'facility': facility_name(pri),
            'severity': severity_name(pri),
            'timestamp': data['timestamp'],
            'hostname': data['hostname'],
            'tag': data['tag'],
            'pid': int(data['pid']),
            'message': data['msg'],
            'raw': raw
        }
