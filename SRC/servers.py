
"""Server specifications for the ring.
Single / list / weighted map / per-node options, normalized to Node records.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple, Union
from collections.abc import Iterable, Mapping
import numbers


@dataclass(frozen=True)
class Node:
    id: str
    weight: float = 1
    vnodes: Optional[int] = None
    host: Optional[str] = None
    port: Optional[int] = None

    def renamed(self, new_id: str) -> "Node":
        host, port = split_address(new_id)
        return replace(self, id=new_id, host=host, port=port)


@dataclass(frozen=True)
class NodeOptions:
    weight: float = 1
    vnodes: Optional[int] = None


@dataclass(frozen=True)
class Single:
    id: str


@dataclass(frozen=True)
class ServerList:
    ids: Tuple[str, ...]

    @classmethod
    def of(cls, ids: Iterable[str]) -> "ServerList":
        return cls(tuple(ids))


@dataclass(frozen=True)
class WeightedMap:
    weights: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class OptionsMap:
    options: Dict[str, NodeOptions] = field(default_factory=dict)

    @classmethod
    def of(cls, raw: Mapping[str, Mapping[str, Any]]) -> "OptionsMap":
        return cls({
            server: NodeOptions(weight=opts.get("weight", 1), vnodes=opts.get("vnodes"))
            for server, opts in raw.items()
        })


ServerSpec = Union[Single, ServerList, WeightedMap, OptionsMap]


def split_address(server: str) -> Tuple[Optional[str], Optional[int]]:
    """Split ``host:port`` (or ``[v6]:port``); anything else is host-only."""
    host, sep, port = server.rpartition(":")
    if not sep or not port.isdigit():
        return server, None
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        # bare IPv6 address without a port
        return server, None
    return host, int(port)


def make_node(server: str, weight: Any = 1, vnodes: Any = None) -> Node:
    if not isinstance(server, str) or not server:
        raise ValueError(f"Invalid server identifier {server!r}")
    if weight is None:
        weight = 1
    if isinstance(weight, bool) or not isinstance(weight, numbers.Real) or weight <= 0:
        raise ValueError(f"Server {server} weight must be a positive number, got {weight!r}")
    if vnodes is not None:
        if isinstance(vnodes, bool) or not isinstance(vnodes, numbers.Integral) or vnodes < 0:
            raise ValueError(f"Server {server} vnodes must be a positive integer, got {vnodes!r}")
        vnodes = int(vnodes) or None
    host, port = split_address(server)
    return Node(id=server, weight=weight, vnodes=vnodes, host=host, port=port)


def to_server_spec(servers: Any) -> ServerSpec:
    """Lift raw constructor input into a ServerSpec variant."""
    if isinstance(servers, (Single, ServerList, WeightedMap, OptionsMap)):
        return servers
    if servers is None:
        return ServerList(())
    if isinstance(servers, str):
        return Single(servers)
    if isinstance(servers, Mapping):
        if not any(isinstance(v, (Mapping, NodeOptions)) for v in servers.values()):
            return WeightedMap(dict(servers))
        options = {}
        for k, v in servers.items():
            if isinstance(v, NodeOptions):
                options[k] = v
            elif isinstance(v, Mapping):
                options[k] = NodeOptions(v.get("weight", 1), v.get("vnodes"))
            else:
                options[k] = NodeOptions(weight=v)
        return OptionsMap(options)
    if isinstance(servers, Iterable):
        return ServerList.of(servers)
    raise ValueError(f"Unsupported server specification {servers!r}")


def parse_servers(spec: ServerSpec) -> List[Node]:
    if isinstance(spec, Single):
        nodes = [make_node(spec.id)]
    elif isinstance(spec, ServerList):
        nodes = [make_node(s) for s in spec.ids]
    elif isinstance(spec, WeightedMap):
        nodes = [make_node(s, weight=w) for s, w in spec.weights.items()]
    elif isinstance(spec, OptionsMap):
        nodes = [make_node(s, weight=o.weight, vnodes=o.vnodes) for s, o in spec.options.items()]
    else:
        raise ValueError(f"Unsupported server specification {spec!r}")
    seen: Dict[str, Node] = {}
    for node in nodes:
        seen.setdefault(node.id, node)
    return list(seen.values())
