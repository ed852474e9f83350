
"""Ketama continuum construction.
Each node gets a weight-proportional number of vnodes (or its own override);
every vnode digest is sliced into `replicas` little-endian 32-bit points.
"""
from __future__ import annotations

from typing import Callable, List, NamedTuple, Sequence
import logging
import math

from hashing import point_value
from servers import Node

log = logging.getLogger(__name__)

DEFAULT_VNODES = 40
DEFAULT_REPLICAS = 4


class RingPoint(NamedTuple):
    value: int
    owner: str


def points_per_node(node: Node, total_weight: float, node_count: int, vnodes: int = DEFAULT_VNODES) -> int:
    if node.vnodes:
        return node.vnodes
    share = node.weight / total_weight
    return int(math.floor(share * vnodes * node_count))


def build_continuum(
    nodes: Sequence[Node],
    digest: Callable[[str], bytes],
    vnodes: int = DEFAULT_VNODES,
    replicas: int = DEFAULT_REPLICAS,
) -> List[RingPoint]:
    if not nodes:
        return []
    total = sum(n.weight for n in nodes)
    count = len(nodes)
    points: List[RingPoint] = []
    for node in nodes:
        length = points_per_node(node, total, count, vnodes)
        for i in range(length):
            d = digest(f"{node.id}-{i}")
            for r in range(replicas):
                points.append(RingPoint(point_value(d, r * 4), node.id))
    # list.sort is stable, so colliding points keep insertion order
    points.sort(key=lambda p: p.value)
    log.debug("built continuum nodes=%d points=%d", count, len(points))
    return points
