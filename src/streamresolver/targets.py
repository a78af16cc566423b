"""
Capability flags and execution targets.

Flags are requirements: a resolver (or a stream) lists the capabilities it
needs, and an environment is the set of capabilities the caller satisfies.
"""
from __future__ import annotations
from enum import Enum

CORS_ALLOWED = "cors-allowed"     # unrestricted cross-origin fetches
IP_LOCKED = "ip-locked"           # origin only serves the IP that resolved it
CF_BLOCKED = "cf-blocked"         # behind a Cloudflare challenge
PROXY_BLOCKED = "proxy-blocked"   # refuses proxied requests

ALL_FLAGS = frozenset({CORS_ALLOWED, IP_LOCKED, CF_BLOCKED, PROXY_BLOCKED})


class Target(str, Enum):
    BROWSER = "browser"
    BROWSER_EXTENSION = "browser-extension"
    NATIVE = "native"
    ANY = "any"


_TARGET_CAPABILITIES = {
    Target.BROWSER: frozenset(),
    Target.BROWSER_EXTENSION: frozenset({CORS_ALLOWED}),
    Target.NATIVE: frozenset({CORS_ALLOWED}),
    Target.ANY: frozenset(),
}


def make_environment(target: Target | str = Target.NATIVE,
                     consistent_ip_for_requests: bool = True) -> frozenset[str]:
    """Capability set satisfied by ``target``.

    IP-locked origins are only reachable when every request of a run leaves
    from the same IP as the eventual playback.
    """
    caps = set(_TARGET_CAPABILITIES[Target(target)])
    if consistent_ip_for_requests:
        caps.add(IP_LOCKED)
    return frozenset(caps)
