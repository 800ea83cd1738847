from typing import Optional

IPV4_MAPPED_PREFIX = "::ffff:"
IPV6_LOOPBACK = "::1"

def normalize_ip(ip: Optional[str]) -> Optional[str]:
    """
    Map a socket-reported address to its IPv4 form.

    '::ffff:192.168.1.1' -> '192.168.1.1', '::1' -> '127.0.0.1'; anything else
    (including None and '') is returned unchanged.
    """
    if not ip:
        return ip
    if ip.startswith(IPV4_MAPPED_PREFIX):
        return ip[len(IPV4_MAPPED_PREFIX):]
    if ip == IPV6_LOOPBACK:
        return "127.0.0.1"
    return ip
