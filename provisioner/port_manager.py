import logging
import socket
from typing import Callable

import config
from provisioner.errors import PortRangeExhausted
from provisioner.models import PortRequest, PortResolution

logger = logging.getLogger(__name__)

PortProbe = Callable[[int], bool]


def is_port_open(port: int, host: str = config.PORT_PROBE_HOST) -> bool:
    """Return True if something on the host accepts connections on this port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.settimeout(config.PORT_PROBE_TIMEOUT)
        in_use = s.connect_ex((host, port)) == 0
    logger.debug("probe %s:%d -> %s", host, port, "in use" if in_use else "free")
    return in_use


def find_next_port(range_min: int, range_max: int, probe: PortProbe = is_port_open) -> int | None:
    """First free port in [range_min, range_max], scanning upwards. None if all are taken."""
    for port in range(range_min, range_max + 1):
        if not probe(port):
            return port
    return None


def resolve(request: PortRequest, probe: PortProbe = is_port_open) -> PortResolution:
    """Keep the preferred port if it is free, otherwise fall back to the lowest free port in range.

    The fallback scan starts at range_min, not preferred + 1, so the fallback can be
    lower than the preferred port.
    """
    if not probe(request.preferred):
        return PortResolution(request=request, resolved_port=request.preferred)

    port = find_next_port(request.range_min, request.range_max, probe)
    if port is None:
        logger.error(
            "no free port for %s in %d-%d", request.name, request.range_min, request.range_max
        )
        raise PortRangeExhausted(request.name, request.range_min, request.range_max)

    logger.warning("%s port %d is in use, falling back to %d", request.name, request.preferred, port)
    return PortResolution(request=request, resolved_port=port, used_fallback=True)


def resolve_port(
    label: str,
    preferred: int,
    range_min: int,
    range_max: int,
    probe: PortProbe = is_port_open,
) -> int:
    request = PortRequest(name=label, preferred=preferred, range_min=range_min, range_max=range_max)
    return resolve(request, probe).resolved_port
