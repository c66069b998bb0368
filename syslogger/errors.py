"""Exceptions raised by the syslog client and the priority codec"""


class SyslogError(Exception):
    """Base class for every error raised by this package"""


class InvalidPriorityError(SyslogError, ValueError):
    """Combined priority is outside 0 .. LOCAL7|DEBUG"""

    def __init__(self, priority: int) -> None:
        super().__init__(f"invalid syslog priority: {priority}")
        self.priority: int = priority


class InvalidFacilityError(SyslogError, ValueError):
    def __init__(self, facility: str) -> None:
        super().__init__(f"invalid syslog facility: {facility.upper()}")
        self.facility: str = facility


class InvalidLevelError(SyslogError, ValueError):
    def __init__(self, level: str) -> None:
        super().__init__(f"invalid syslog level: {level.upper()}")
        self.level: str = level


class SyslogConnectionError(SyslogError, ConnectionError):
    """Could not open a transport to the syslog server"""


class WriteError(SyslogError, OSError):
    """Message could not be written, even after reconnecting"""
