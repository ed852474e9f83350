
"""Key digests for the continuum.
- Named hashlib / xxhash algorithms return raw digest bytes
- Legacy "crc32" returns the char codes of the checksum's decimal digits
  (node-memcached compat); digest() joins them with commas
- Any callable overrides the built-in provider
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union
import hashlib
import logging

import xxhash

log = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "md5"

CRC32_POLYNOMIAL = 0xEDB88320


def _build_crc32_table() -> List[int]:
    table = []
    for n in range(256):
        c = n
        for _ in range(8):
            c = (c >> 1) ^ CRC32_POLYNOMIAL if c & 1 else c >> 1
        table.append(c)
    return table


CRC32_TABLE = _build_crc32_table()


def crc32(data: bytes) -> int:
    crc = 0xFFFFFFFF
    for b in data:
        crc = (crc >> 8) ^ CRC32_TABLE[(crc ^ b) & 0xFF]
    return crc ^ 0xFFFFFFFF


def crc32_digits(key: str) -> List[int]:
    """Char codes of the unsigned decimal checksum, e.g. 2356372769 -> [50, 51, 53, ...]."""
    return list(str(crc32(_encode(key))).encode("ascii"))


_XXHASH_DIGESTS: Dict[str, Callable[[bytes], bytes]] = {
    "xxh32": xxhash.xxh32_digest,
    "xxh64": xxhash.xxh64_digest,
    "xxh3_64": xxhash.xxh3_64_digest,
    "xxh3_128": xxhash.xxh3_128_digest,
    "xxh128": xxhash.xxh128_digest,
}


@dataclass(frozen=True)
class Named:
    name: str


@dataclass(frozen=True)
class Custom:
    func: Callable[[str], Any]


HashAlgorithm = Union[Named, Custom]


def as_algorithm(algorithm: Union[None, str, Callable[[str], Any], Named, Custom]) -> HashAlgorithm:
    if algorithm is None:
        return Named(DEFAULT_ALGORITHM)
    if isinstance(algorithm, (Named, Custom)):
        return algorithm
    if isinstance(algorithm, str):
        return Named(algorithm.lower())
    if callable(algorithm):
        return Custom(algorithm)
    raise ValueError(f"Unsupported hash algorithm {algorithm!r}")


def coerce_key(key: Any) -> str:
    """String form of a lookup key; this is also the cache key."""
    if isinstance(key, str):
        return key
    if isinstance(key, (bytes, bytearray)):
        return bytes(key).decode("utf-8", "surrogateescape")
    return str(key)


def _encode(key: str) -> bytes:
    return key.encode("utf-8", "surrogateescape")


def _named_hasher(name: str) -> Callable[[str], Any]:
    if name == "crc32":
        return crc32_digits
    if name in _XXHASH_DIGESTS:
        fn = _XXHASH_DIGESTS[name]
        return lambda key: fn(_encode(key))
    if name.startswith("shake_") or name not in hashlib.algorithms_available:
        raise ValueError(f"Unsupported hash algorithm {name!r}")
    # hashlib.new still fails for names the linked OpenSSL lists but refuses
    hashlib.new(name)
    return lambda key: hashlib.new(name, _encode(key)).digest()


def to_digest_bytes(raw: Any) -> bytes:
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw)
    if isinstance(raw, bool):
        raise TypeError("hash function returned a bool")
    if isinstance(raw, int):
        return str(raw).encode("ascii")
    if isinstance(raw, str):
        return raw.encode("utf-8")
    # sequences are hashed through their comma-joined text form
    return ",".join(str(c) for c in raw).encode("ascii")


def point_value(digest: bytes, offset: int = 0) -> int:
    """Little-endian uint32 from the 4 bytes at ``offset``; missing bytes read as 0."""
    window = digest[offset:offset + 4]
    if len(window) < 4:
        window = window.ljust(4, b"\0")
    return int.from_bytes(window, "little")


class KeyHasher:
    """Resolves a HashAlgorithm once and exposes hash / digest / hash_value."""
    def __init__(self, algorithm: Union[None, str, Callable[[str], Any], Named, Custom] = None):
        self.algorithm = as_algorithm(algorithm)
        if isinstance(self.algorithm, Custom):
            self._fn = self.algorithm.func
        else:
            self._fn = _named_hasher(self.algorithm.name)
        log.debug("resolved hash algorithm=%r", self.algorithm)

    @property
    def name(self) -> Optional[str]:
        if isinstance(self.algorithm, Named):
            return self.algorithm.name
        return None

    def hash(self, key: Any) -> Any:
        return self._fn(coerce_key(key))

    def digest(self, key: Any) -> bytes:
        return to_digest_bytes(self.hash(key))

    def hash_value(self, key: Any) -> int:
        return point_value(self.digest(key), 0)
