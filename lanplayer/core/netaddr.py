"""Caller IP detection behind an optional reverse proxy."""
import ipaddress
from typing import Mapping, Optional


def normalize_ip(raw: str) -> str:
    """Canonical dotted form for IPv4-mapped IPv6 and IPv6 loopback; others unchanged."""
    ip = (raw or "").strip()
    if not ip:
        return ""
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        return ip
    if isinstance(addr, ipaddress.IPv6Address):
        if addr.ipv4_mapped is not None:
            return str(addr.ipv4_mapped)
        if addr.is_loopback:
            return "127.0.0.1"
    return str(addr)


def client_ip(
    headers: Mapping[str, str],
    peer_host: Optional[str],
    trust_proxy: bool = True,
) -> str:
    """Leftmost X-Forwarded-For entry when trusted, else the socket peer."""
    if trust_proxy:
        forwarded = headers.get("x-forwarded-for") or ""
        first = forwarded.split(",")[0].strip()
        if first:
            return normalize_ip(first)
    return normalize_ip(peer_host or "")
