import logging
from enum import IntEnum
from typing import Dict

from .errors import InvalidFacilityError, InvalidLevelError

logger = logging.getLogger(__name__)

SEVERITY_MASK = 0x07
FACILITY_MASK = 0xF8


class Severity(IntEnum):
    """
    Syslog severity levels (low-order 3 bits of a priority).
    Same values as /usr/include/sys/syslog.h on Linux, BSD and OS X.
    """
    EMERG = 0
    ALERT = 1
    CRIT = 2
    ERR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


class Facility(IntEnum):
    """Syslog facilities, stored shifted left 3 bits. Codes 12-15 are reserved."""
    KERN = 0 << 3
    USER = 1 << 3
    MAIL = 2 << 3
    DAEMON = 3 << 3
    AUTH = 4 << 3
    SYSLOG = 5 << 3
    LPR = 6 << 3
    NEWS = 7 << 3
    UUCP = 8 << 3
    CRON = 9 << 3
    AUTHPRIV = 10 << 3
    FTP = 11 << 3
    LOCAL0 = 16 << 3
    LOCAL1 = 17 << 3
    LOCAL2 = 18 << 3
    LOCAL3 = 19 << 3
    LOCAL4 = 20 << 3
    LOCAL5 = 21 << 3
    LOCAL6 = 22 << 3
    LOCAL7 = 23 << 3


MAX_PRIORITY: int = Facility.LOCAL7 | Severity.DEBUG

# Accepted mnemonics for "facility.level" strings
FACILITY_NAMES: Dict[str, Facility] = {f.name: f for f in Facility}

LEVEL_NAMES: Dict[str, Severity] = {s.name: s for s in Severity}
LEVEL_NAMES['WARN'] = Severity.WARNING


def combine(facility: int, severity: int) -> int:
    """Pack a facility and a severity into one priority value."""
    return (facility & FACILITY_MASK) | (severity & SEVERITY_MASK)


def facility_of(priority: int) -> int:
    """Facility half of a priority, still shifted."""
    return priority & FACILITY_MASK


def severity_of(priority: int) -> int:
    return priority & SEVERITY_MASK


def facility_name(priority: int) -> str:
    """Lowercase facility mnemonic of a priority, 'unknown' for reserved codes"""
    try:
        return Facility(facility_of(priority)).name.lower()
    except ValueError:
        return 'unknown'


def severity_name(priority: int) -> str:
    return Severity(severity_of(priority)).name.lower()


def is_valid_priority(priority: int) -> bool:
    return 0 <= priority <= MAX_PRIORITY


def parse_facility(token: str) -> Facility:
    facility = FACILITY_NAMES.get(token.upper())
    if facility is None:
        raise InvalidFacilityError(token)
    return facility


def parse_level(token: str) -> Severity:
    level = LEVEL_NAMES.get(token.upper())
    if level is None:
        raise InvalidLevelError(token)
    return level


def parse_priority(text: str) -> int:
    """
    Parse a "facility.level" string such as "local3.err" into a priority.

    Both tokens are case-insensitive and "warn" is accepted for "warning".
    Only the first two dot-separated tokens are looked at; anything after
    the second token is ignored.

    Raises:
        InvalidFacilityError: facility token is not a known mnemonic
        InvalidLevelError: level token is missing or not a known mnemonic
    """
    tokens = text.split('.')

    facility = parse_facility(tokens[0])
    level = parse_level(tokens[1] if len(tokens) > 1 else '')

    logger.debug(f"Parsed priority {text!r} as {facility | level}")
    return facility | level
