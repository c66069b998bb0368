"""mylogger: send one message to a syslog server."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .errors import SyslogError
from .priority import parse_priority
from .syslog_client import dial

logger = logging.getLogger(__name__)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send a message to a syslog server")
    parser.add_argument(
        "-c", "--network", choices=['tcp', 'udp'],
        default=os.environ.get('SYSLOG_NETWORK', 'udp'),
        help="Connect to this network (default: udp, env SYSLOG_NETWORK)",
    )
    parser.add_argument(
        "-n", "--address", default=os.environ.get('SYSLOG_ADDRESS', ':514'),
        help="Write to this remote syslog server (default: :514, env SYSLOG_ADDRESS)",
    )
    parser.add_argument(
        "-p", "--priority", default=os.environ.get('SYSLOG_PRIORITY', 'user.notice'),
        help="Mark given message with this priority (default: user.notice, env SYSLOG_PRIORITY)",
    )
    parser.add_argument(
        "-t", "--tag", default='',
        help="Mark every line with this tag (default: program name)",
    )
    parser.add_argument(
        "-l", "--hostname", default='',
        help="Override syslog sender with this name (default: hostname)",
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Socket timeout in seconds",
    )
    parser.add_argument("message", nargs='*', help="Message words, joined with spaces")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    args = build_cli_parser().parse_args(argv)

    try:
        priority = parse_priority(args.priority)
        with dial(args.network, args.address, priority,
                  tag=args.tag, hostname=args.hostname, timeout=args.timeout) as client:
            message = ' '.join(args.message)
            if message:
                client.write(message)
    except SyslogError as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
