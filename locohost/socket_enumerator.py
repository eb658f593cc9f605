"""
Find TCP sockets in LISTEN state bound to loopback or wildcard addresses
"""
import logging
import re
import shutil
from typing import List, Optional

import psutil

from .commands import CommandRunner
from .models import RawSocket

logger = logging.getLogger(__name__)

LSOF_LISTEN_ARGS = ['lsof', '-iTCP', '-sTCP:LISTEN', '-n', '-P']

# COMMAND PID USER FD TYPE DEVICE SIZE/OFF NODE NAME
LSOF_MIN_FIELDS = 9
LSOF_NAME_FIELD = 8

_PORT_SUFFIX = re.compile(r':(\d+)$')


def is_local_address(host: str) -> bool:
    """True for loopback, wildcard and literal localhost addresses"""
    host = host.strip('[]')
    # Dual-stack sockets report IPv4 loopback as ::ffff:127.x.x.x
    if host.lower().startswith('::ffff:'):
        host = host[len('::ffff:'):]
    if host in ('*', 'localhost', '0.0.0.0', '::', '::1'):
        return True
    return host.startswith('127.')


def parse_lsof_listing(output: str) -> List[RawSocket]:
    """Parse `lsof -iTCP -sTCP:LISTEN -n -P` output into raw sockets

    Lines that are too short, have no trailing :port, or are bound to a
    non-local address are skipped.
    """
    sockets = []
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < LSOF_MIN_FIELDS:
            continue

        name = parts[LSOF_NAME_FIELD]
        port_match = _PORT_SUFFIX.search(name)
        if not port_match:
            continue

        host = name[:port_match.start()]
        if not is_local_address(host):
            continue

        try:
            pid = int(parts[1])
        except ValueError:
            # Header row ("COMMAND PID ...") lands here
            continue

        sockets.append(RawSocket(pid=pid, port=int(port_match.group(1)), command_name=parts[0]))
    return sockets


class LsofSocketLister:
    """Socket enumeration through lsof (macOS and most Linux boxes)"""

    def __init__(self, runner: Optional[CommandRunner] = None):
        self.runner = runner or CommandRunner()

    def list_listening(self) -> List[RawSocket]:
        output = self.runner.run(LSOF_LISTEN_ARGS)
        if not output.strip():
            logger.debug("lsof returned no listening sockets")
            return []
        return parse_lsof_listing(output)


class PsutilSocketLister:
    """Socket enumeration through psutil, for machines without lsof"""

    def list_listening(self) -> List[RawSocket]:
        try:
            connections = psutil.net_connections(kind='tcp')
        except (psutil.AccessDenied, PermissionError) as e:
            logger.debug("Cannot list connections: %s", e)
            return []

        sockets = []
        for conn in connections:
            if conn.status != psutil.CONN_LISTEN or not conn.laddr or not conn.pid:
                continue
            if not is_local_address(conn.laddr.ip):
                continue

            try:
                name = psutil.Process(conn.pid).name()
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                name = ''

            sockets.append(RawSocket(pid=conn.pid, port=conn.laddr.port, command_name=name))
        return sockets


def default_socket_lister(runner: Optional[CommandRunner] = None):
    """Prefer lsof, fall back to psutil when lsof is not installed"""
    if shutil.which('lsof'):
        return LsofSocketLister(runner)
    logger.info("lsof not found on PATH, using psutil to enumerate sockets")
    return PsutilSocketLister()
