import hashlib

from ..data.base import GeographicFix

def normalize_address(addr: str) -> str:
    """
    Minimal normalization so mock lookups are stable:
    - trim whitespace
    - lowercase
    - collapse multiple spaces
    """
    return " ".join(addr.strip().lower().split())

def weather_cache_key(fix: GeographicFix) -> str:
    """
    Cache partition for weather: one entry per postal region.
    Case is passed through as the geocoder returned it.
    """
    return f"{fix.country_code}/{fix.postal_code}"

def fnv1a_32(s: str) -> int:
    """Deterministic, fast hash for seed generation."""
    h = 0x811c9dc5
    for c in s.encode("utf-8"):
        h ^= c
        h = (h * 0x01000193) & 0xFFFFFFFF
    return h

def seeded_rand(seed: int, n: int = 1) -> list[float]:
    """
    Stateless pseudo-random generator (Mulberry32-like) so
    same seed → same outputs without storing PRNG state.
    """
    out = []
    t = (seed + 0x6D2B79F5) & 0xFFFFFFFF
    for _ in range(n):
        t = (t ^ (t >> 15)) * (t | 1) & 0xFFFFFFFF
        t ^= t + ((t ^ (t >> 7)) * (t | 61) & 0xFFFFFFFF)
        r = ((t ^ (t >> 14)) & 0xFFFFFFFF) / 4294967296.0
        out.append(r)
    return out

def weak_etag(payload_bytes: bytes) -> str:
    """Weak ETag for client-side conditional requests."""
    h = hashlib.sha256(payload_bytes).hexdigest()[:24]
    return f'W/"{h}"'
