#!/usr/bin/env python3
"""
Syslog Daemon - Demonstration Receiver
Listens for syslog messages over UDP and/or TCP and prints every message it
receives to stdout until SIGINT or SIGTERM.
"""

import argparse
import logging
import os
import signal
import sys
import threading
from typing import List, Optional

from .errors import SyslogError
from .message_printer import MessagePrinter
from .tcp_syslog_receiver import TCPSyslogReceiver
from .transport import split_address
from .udp_syslog_receiver import UDPSyslogReceiver

logger = logging.getLogger(__name__)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print syslog messages received over the network")
    parser.add_argument(
        "--addr", default=os.environ.get('SYSLOG_ADDR', ':5514'),
        help="Address to listen on (default: :5514, env SYSLOG_ADDR)",
    )
    parser.add_argument(
        "--network", choices=['udp', 'tcp', 'both'],
        default=os.environ.get('SYSLOG_NETWORK', 'udp'),
        help="Transport to listen on (default: udp, env SYSLOG_NETWORK)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    args = build_cli_parser().parse_args(argv)

    try:
        host, port = split_address(args.addr)
    except SyslogError as e:
        logger.error(str(e))
        return 1
    if args.addr.startswith(':'):
        host = '0.0.0.0'

    printer = MessagePrinter()
    receivers = []

    if args.network in ('udp', 'both'):
        receivers.append(UDPSyslogReceiver(host=host, port=port, writer=printer))
    if args.network in ('tcp', 'both'):
        receivers.append(TCPSyslogReceiver(host=host, port=port, writer=printer))

    threads = [threading.Thread(target=receiver.start, daemon=True) for receiver in receivers]
    for thread in threads:
        thread.start()

    shutdown = threading.Event()

    def _signal_handler(sig, frame):
        logger.info("Shutdown signal received, stopping...")
        shutdown.set()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    while not shutdown.is_set():
        if not any(thread.is_alive() for thread in threads):
            logger.error("All receivers exited")
            break
        shutdown.wait(1.0)

    for receiver in receivers:
        receiver.stop()
    for thread in threads:
        thread.join(timeout=2)
    printer.close()

    print("Server is now down.")
    return 0 if shutdown.is_set() else 1


if __name__ == '__main__':
    sys.exit(main())
