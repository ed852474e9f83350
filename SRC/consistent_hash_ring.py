
"""Weighted ketama hash ring.
- Sorted point array for O(log N) lookups via bisect, wrapping past the end
- Weighted vnodes per server, several replicas sliced out of each digest
- LRU memo of key -> server, patched in place on swap
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union
import bisect
import logging
import threading

from compat import DeprecatedAliases
from config import RingConfig
from continuum import RingPoint, build_continuum
from hashing import Custom, KeyHasher, Named, coerce_key
from lru_cache import LRUCache
from servers import Node, ServerSpec, parse_servers, to_server_spec

log = logging.getLogger(__name__)


class HashRing(DeprecatedAliases):
    """Consistent hashing ring compatible with libketama (and python hash_ring)."""
    def __init__(
        self,
        servers: Any = None,
        algorithm: Union[None, str, Callable[[str], Any], Named, Custom] = None,
        config: Optional[RingConfig] = None,
    ):
        self.config = config or RingConfig()
        self._hasher = KeyHasher(algorithm)
        self._lock = threading.RLock()
        self._ring: List[RingPoint] = []
        self._tokens: List[int] = []
        self._nodes: Dict[str, Node] = {}
        self.cache = LRUCache(self.config.max_cache_size)
        for node in parse_servers(to_server_spec(servers)):
            self._nodes[node.id] = node
        self._rebuild()

    @property
    def algorithm(self):
        return self._hasher.algorithm

    @property
    def vnode_count(self) -> int:
        return self.config.vnode_count

    @property
    def replicas(self) -> int:
        return self.config.replicas

    def _rebuild(self) -> None:
        with self._lock:
            ring = build_continuum(
                list(self._nodes.values()),
                self._hasher.digest,
                vnodes=self.config.vnode_count,
                replicas=self.config.replicas,
            )
            self._ring, self._tokens = ring, [p.value for p in ring]
            self.cache.clear()

    # hashing

    def hash(self, key: Any) -> Any:
        return self._hasher.hash(key)

    def digest(self, key: Any) -> bytes:
        return self._hasher.digest(key)

    def hash_value(self, key: Any) -> int:
        return self._hasher.hash_value(key)

    # lookup

    def find(self, hash_value: int) -> int:
        """Index of the first point at or after ``hash_value`` on the circle.

        Wraps to 0 past the last point. On an empty ring the answer is 0 and
        meaningless, so check ``len(ring)`` first.
        """
        tokens = self._tokens
        idx = bisect.bisect_left(tokens, hash_value)
        if idx >= len(tokens):
            return 0
        return idx

    def get(self, key: Any) -> Optional[str]:
        cache_key = coerce_key(key)
        with self._lock:
            if not self._ring:
                return None
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached
            owner = self._ring[self.find(self.hash_value(cache_key))].owner
            self.cache.set(cache_key, owner)
            return owner

    def range(self, key: Any, size: Optional[int] = None, unique: bool = True) -> List[str]:
        """Walk clockwise from ``key`` collecting up to ``size`` servers.

        A missing or zero ``size`` means one entry per registered server.
        """
        with self._lock:
            ring = self._ring
            if not ring:
                return []
            if not size:
                size = len(self._nodes)
            out: List[str] = []
            start = self.find(self.hash_value(key))
            n = len(ring)
            for i in range(n):
                owner = ring[(start + i) % n].owner
                if unique and owner in out:
                    continue
                out.append(owner)
                if len(out) == size:
                    break
            return out

    def points(self, servers: Union[None, str, Iterable[str]] = None) -> Dict[str, List[int]]:
        if isinstance(servers, str):
            servers = [servers]
        with self._lock:
            wanted = list(self._nodes) if servers is None else list(servers)
            out: Dict[str, List[int]] = {s: [] for s in wanted}
            for p in self._ring:
                bucket = out.get(p.owner)
                if bucket is not None:
                    bucket.append(p.value)
            return out

    # topology

    def add(self, servers: Union[ServerSpec, Any]) -> None:
        incoming = parse_servers(to_server_spec(servers))
        with self._lock:
            added = []
            for node in incoming:
                if node.id in self._nodes:
                    continue
                self._nodes[node.id] = node
                added.append(node.id)
            self._rebuild()
        log.debug("added servers=%s points=%d", added, len(self._ring))

    def remove(self, server: str) -> None:
        with self._lock:
            if self._nodes.pop(server, None) is None:
                log.debug("remove of unknown server=%s", server)
            self._rebuild()
        log.debug("removed server=%s points=%d", server, len(self._ring))

    def swap(self, from_server: str, to_server: str) -> None:
        """Hand every point of ``from_server`` to ``to_server`` in place.

        Cheaper than remove + add and keeps cached lookups, but the result is
        not the distribution a fresh ring with ``to_server`` would have.
        """
        with self._lock:
            self._ring = [
                RingPoint(p.value, to_server) if p.owner == from_server else p
                for p in self._ring
            ]
            patched = self.cache.update_matching(from_server, to_server)
            if from_server in self._nodes:
                # rename in place, keeping registry order
                nodes: Dict[str, Node] = {}
                for sid, node in self._nodes.items():
                    if sid == from_server:
                        nodes[to_server] = node.renamed(to_server)
                    elif sid != to_server:
                        nodes[sid] = node
                self._nodes = nodes
        log.debug("swapped server=%s -> %s cache_patched=%d", from_server, to_server, patched)

    def reset(self) -> None:
        with self._lock:
            self._ring, self._tokens = [], []
            self.cache.clear()

    def end(self) -> None:
        with self._lock:
            self.reset()
            self._nodes = {}

    # introspection

    def nodes(self) -> List[str]:
        with self._lock:
            return list(self._nodes.keys())

    @property
    def servers(self) -> List[Node]:
        with self._lock:
            return list(self._nodes.values())

    def __len__(self) -> int:
        return len(self._ring)

    def __contains__(self, server: object) -> bool:
        return server in self._nodes

    def dump_tokens(self) -> List[Tuple[int, str]]:
        with self._lock:
            return [(p.value, p.owner) for p in self._ring]

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "nodes": len(self._nodes),
                "points": len(self._ring),
                "vnode_count": self.config.vnode_count,
                "replicas": self.config.replicas,
                "cached": len(self.cache),
            }

    def clone(self) -> "HashRing":
        """Copy of the ring (not its cache) for before/after comparison."""
        with self._lock:
            other = HashRing(algorithm=self._hasher.algorithm, config=self.config)
            other._nodes = dict(self._nodes)
            other._ring = list(self._ring)
            other._tokens = list(self._tokens)
            return other
