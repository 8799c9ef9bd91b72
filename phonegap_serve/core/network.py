"""Network utilities for phonegap_serve."""

import logging
import socket

logger = logging.getLogger(__name__)

FALLBACK_ADDRESS = "127.0.0.1"


def get_local_ip() -> str:
    """
    Best-effort address at which a device on the local network can reach us.

    Opens a UDP socket "towards" a public address to find the interface the OS
    would route through; no packets are sent. Falls back to the address of the
    hostname, then to 127.0.0.1. Never raises.

    Returns:
        str: Dotted-quad IPv4 address
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            # Use Google's public DNS (doesn't actually connect)
            s.connect(("8.8.8.8", 80))
            local_ip: str = s.getsockname()[0]
            if local_ip and not local_ip.startswith("0."):
                if not _is_private_ip(local_ip):
                    logger.debug("Outbound interface %s is not in a private range", local_ip)
                return local_ip
    except OSError:
        logger.debug("UDP route probe failed, trying hostname lookup", exc_info=True)

    try:
        host_ip = socket.gethostbyname(socket.gethostname())
        if host_ip:
            return host_ip
    except OSError:
        logger.debug("Hostname lookup failed", exc_info=True)

    return FALLBACK_ADDRESS


def _is_private_ip(ip: str) -> bool:
    """Check if IP address is in private ranges."""
    try:
        octets = [int(x) for x in ip.split(".")]

        # Must have exactly 4 octets for a valid IPv4 address
        if len(octets) != 4:
            return False

        if not all(0 <= octet <= 255 for octet in octets):
            return False

        # 10.0.0.0/8, 172.16.0.0/12, 192.168.0.0/16
        if octets[0] == 10 or (octets[0] == 172 and 16 <= octets[1] <= 31):
            return True
        if octets[0] == 192 and octets[1] == 168:
            return True
        return octets[0] == 127

    except (ValueError, IndexError):
        return False


def format_url(address: str, port: int) -> str:
    """Build the http URL a device should open."""
    return f"http://{address}:{port}/"
