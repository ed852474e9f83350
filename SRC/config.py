
"""Ring configuration.
vnode count, replicas per digest (or a named compatibility mode) and cache bound.
"""
from dataclasses import dataclass
from typing import Optional

from continuum import DEFAULT_REPLICAS, DEFAULT_VNODES
from lru_cache import DEFAULT_MAX_SIZE

# libketama hashes 4 points out of every md5 digest, python's hash_ring only 3
COMPATIBILITY_REPLICAS = {
    "ketama": 4,
    "hash_ring": 3,
}


@dataclass
class RingConfig:
    vnode_count: int = DEFAULT_VNODES
    replicas: int = DEFAULT_REPLICAS
    compatibility: Optional[str] = None
    max_cache_size: int = DEFAULT_MAX_SIZE

    def __post_init__(self):
        if self.compatibility is not None:
            if self.compatibility not in COMPATIBILITY_REPLICAS:
                raise ValueError(f"Unknown compatibility mode {self.compatibility!r}")
            self.replicas = COMPATIBILITY_REPLICAS[self.compatibility]
        if self.vnode_count < 1:
            raise ValueError("vnode_count must be at least 1")
        if self.replicas < 1:
            raise ValueError("replicas must be at least 1")
        if self.max_cache_size < 1:
            raise ValueError("max_cache_size must be at least 1")
