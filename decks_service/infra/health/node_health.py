"""
Runtime health snapshot of the node hosting this service.
"""

import os
import platform
import socket
import sys
import time
from datetime import datetime, timezone
from typing import Any, Dict, List

_PROCESS_STARTED = time.monotonic()


def _cpu() -> Dict[str, Any]:
    cores = os.cpu_count() or 1
    try:
        load1, load5, load15 = os.getloadavg()
    except (AttributeError, OSError):
        load1 = load5 = load15 = 0.0
    return {
        "load1": load1,
        "load5": load5,
        "load15": load15,
        "cores": cores,
        "utilization": min(100, int(load1 / cores * 100)),
    }


def _mem() -> Dict[str, Any]:
    try:
        page_size = os.sysconf("SC_PAGE_SIZE")
        total = os.sysconf("SC_PHYS_PAGES") * page_size
        free = os.sysconf("SC_AVPHYS_PAGES") * page_size
    except (AttributeError, ValueError, OSError):
        return {"free": None, "total": None, "percent": None}
    return {
        "free": free,
        "total": total,
        "percent": round(free * 100 / total, 2) if total else None,
    }


def _os_uptime() -> float:
    try:
        with open("/proc/uptime") as fh:
            return float(fh.read().split()[0])
    except (OSError, ValueError, IndexError):
        return 0.0


def _process_memory() -> Dict[str, Any]:
    try:
        import resource

        usage = resource.getrusage(resource.RUSAGE_SELF)
        # Linux reports KiB, macOS bytes
        scale = 1 if sys.platform == "darwin" else 1024
        return {"maxrss": usage.ru_maxrss * scale}
    except ImportError:
        return {}


def _ip_addresses() -> List[str]:
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None)
    except OSError:
        return []
    addresses = {info[4][0] for info in infos}
    return sorted(a for a in addresses if not a.startswith("127.") and a != "::1")


def get_node_health() -> Dict[str, Any]:
    """Collect the node health structure (cpu, mem, os, process, client, net, time)."""
    now = datetime.now(timezone.utc)
    try:
        user = os.getlogin()
    except OSError:
        user = None
    return {
        "cpu": _cpu(),
        "mem": _mem(),
        "os": {
            "uptime": _os_uptime(),
            "type": platform.system(),
            "release": platform.release(),
            "hostname": socket.gethostname(),
            "arch": platform.machine(),
            "platform": sys.platform,
            "user": user,
        },
        "process": {
            "pid": os.getpid(),
            "memory": _process_memory(),
            "uptime": time.monotonic() - _PROCESS_STARTED,
            "argv": list(sys.argv),
        },
        "client": {
            "type": "python",
            "version": platform.python_version(),
            "langVersion": sys.version.split()[0],
        },
        "net": {"ip": _ip_addresses()},
        "time": {
            "now": int(now.timestamp() * 1000),
            "iso": now.isoformat(),
            "utc": now.strftime("%a, %d %b %Y %H:%M:%S GMT"),
        },
    }
