"""Host, runtime and network facts attached to records as ``inferred``.

The snapshot is captured fresh on every call so each record reflects the
state of the process at the moment it was written.
"""

from __future__ import annotations

import ipaddress
import locale
import os
import platform
import socket
import sys
import time
import tracemalloc
from collections.abc import Callable
from datetime import datetime
from typing import Any

import psutil

from hostlog.config.settings import ENVIRONMENT_VARIABLE


SnapshotProvider = Callable[[], dict[str, Any]]

UNKNOWN = "unknown"
NO_ADDRESS = "none"
CPUINFO_PATH = "/proc/cpuinfo"


def capture_snapshot(hostname: str | None = None) -> dict[str, Any]:
    """Capture the current environment snapshot.

    Args:
        hostname: Hostname to report; resolved from the OS when omitted.

    Returns:
        A mapping with ``system``, ``runtime``, ``environment``,
        ``hardware`` and ``network`` sections, or an error-shaped mapping
        if any fact could not be gathered.
    """
    try:
        addresses = _ipv4_addresses()
        return {
            "system": _system_section(hostname or socket.gethostname()),
            "runtime": _runtime_section(),
            "environment": _environment_section(),
            "hardware": _hardware_section(),
            "network": {
                "ip_addresses": addresses or [NO_ADDRESS],
                "primary_ip": addresses[0] if addresses else NO_ADDRESS,
            },
        }
    except Exception as exc:
        return {
            "error": "Failed to gather system information",
            "message": str(exc) or type(exc).__name__,
        }


def _system_section(hostname: str) -> dict[str, Any]:
    return {
        "platform": sys.platform,
        "arch": platform.machine(),
        "type": platform.system(),
        "release": platform.release(),
        "hostname": hostname,
    }


def _runtime_section() -> dict[str, Any]:
    process = psutil.Process()
    memory = process.memory_info()
    heap_used, heap_peak = tracemalloc.get_traced_memory()
    return {
        "python_version": platform.python_version(),
        "pid": process.pid,
        "uptime": int(time.time() - process.create_time()),
        "memory": {
            "rss": memory.rss,
            "vms": memory.vms,
            "heap_used": heap_used,
            "heap_peak": heap_peak,
            "allocated_blocks": sys.getallocatedblocks(),
        },
    }


def _environment_section() -> dict[str, Any]:
    language = locale.getlocale()[0]
    return {
        "env": os.environ.get(ENVIRONMENT_VARIABLE) or UNKNOWN,
        "timezone": datetime.now().astimezone().tzname() or UNKNOWN,
        "locale": language.replace("_", "-") if language else UNKNOWN,
    }


def _hardware_section() -> dict[str, Any]:
    memory = psutil.virtual_memory()
    return {
        "cpu_cores": psutil.cpu_count(logical=True) or os.cpu_count() or 0,
        "cpu_model": _cpu_model(),
        "total_memory": memory.total,
        "free_memory": memory.available,
    }


def _cpu_model() -> str:
    """Return the first ``model name`` from /proc/cpuinfo, else what platform knows."""
    try:
        with open(CPUINFO_PATH, encoding="utf-8", errors="replace") as cpuinfo:
            for line in cpuinfo:
                key, _, value = line.partition(":")
                if key.strip() == "model name" and value.strip():
                    return value.strip()
    except OSError:
        # not Linux, or /proc is not mounted
        pass
    return platform.processor() or platform.machine() or UNKNOWN


def _ipv4_addresses() -> list[str]:
    """Return non-loopback IPv4 addresses in interface order."""
    addresses: list[str] = []
    for interface_addresses in psutil.net_if_addrs().values():
        for address in interface_addresses:
            if address.family != socket.AF_INET:
                continue
            if ipaddress.ip_address(address.address).is_loopback:
                continue
            addresses.append(address.address)
    return addresses
