
"""Legacy method names kept around for older callers.
Each alias warns once per process, then forwards to the current API.
"""
from __future__ import annotations

from typing import Any, Callable, Optional, Set
import logging

log = logging.getLogger(__name__)

# alias -> replacement (None: removed without replacement)
DEPRECATED_ALIASES = {
    "replace_server": None,
    "replace": None,
    "remove_server": "remove",
    "add_server": "add",
    "get_node": "get",
    "get_node_position": "find",
    "position": "find",
}

_notified: Set[str] = set()


def _deprecated(alias: str, target: Optional[str]) -> Callable[..., Any]:
    def forward(self, *args, **kwargs):
        if alias not in _notified:
            _notified.add(alias)
            if target:
                log.warning("[deprecated] HashRing.%s is removed, use HashRing.%s as replacement", alias, target)
            else:
                log.warning("[deprecated] HashRing.%s is removed, the API has no replacement", alias)
        if target:
            return getattr(self, target)(*args, **kwargs)
        return None

    forward.__name__ = alias
    forward.__doc__ = f"Deprecated alias of {target}." if target else "Deprecated, does nothing."
    return forward


class DeprecatedAliases:
    pass


for _alias, _target in DEPRECATED_ALIASES.items():
    setattr(DeprecatedAliases, _alias, _deprecated(_alias, _target))
