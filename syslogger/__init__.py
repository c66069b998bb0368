"""
Syslog Client Package

A minimal syslog client that formats log lines as
<PRI>TIMESTAMP HOSTNAME TAG[PID]: MESSAGE and sends them over TCP or UDP,
reconnecting once when the connection is lost. Ships with a small
demonstration receiver that prints what it gets.
"""

from .errors import (InvalidFacilityError, InvalidLevelError, InvalidPriorityError,
                     SyslogConnectionError, SyslogError, WriteError)
from .line_reader import LineReader
from .message_printer import MessagePrinter
from .priority import (FACILITY_MASK, MAX_PRIORITY, SEVERITY_MASK, Facility, Severity,
                       combine, facility_of, parse_priority, severity_of)
from .syslog_client import SyslogClient, dial
from .syslog_parser import SyslogParser
from .tcp_syslog_receiver import TCPSyslogReceiver
from .transport import Transport, dial_transport
from .udp_syslog_receiver import UDPSyslogReceiver

__all__ = [
    'FACILITY_MASK',
    'Facility',
    'InvalidFacilityError',
    'InvalidLevelError',
    'InvalidPriorityError',
    'LineReader',
    'MAX_PRIORITY',
    'MessagePrinter',
    'SEVERITY_MASK',
    'Severity',
    'SyslogClient',
    'SyslogConnectionError',
    'SyslogError',
    'SyslogParser',
    'TCPSyslogReceiver',
    'Transport',
    'UDPSyslogReceiver',
    'WriteError',
    'combine',
    'dial',
    'dial_transport',
    'facility_of',
    'parse_priority',
    'severity_of',
]

__version__ = '1.0.0'
