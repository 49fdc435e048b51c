"""Placeholder substitution in asset text."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from typing import Optional

SIDECAR_IMAGES = (
    ("${PROVISIONER_IMAGE}", "PROVISIONER_IMAGE"),
    ("${ATTACHER_IMAGE}", "ATTACHER_IMAGE"),
    ("${RESIZER_IMAGE}", "RESIZER_IMAGE"),
    ("${SNAPSHOTTER_IMAGE}", "SNAPSHOTTER_IMAGE"),
    ("${NODE_DRIVER_REGISTRAR_IMAGE}", "NODE_DRIVER_REGISTRAR_IMAGE"),
    ("${LIVENESS_PROBE_IMAGE}", "LIVENESS_PROBE_IMAGE"),
    ("${LIVENESS_PROBE_CONTROL_PLANE_IMAGE}", "LIVENESS_PROBE_CONTROL_PLANE_IMAGE"),
    ("${KUBE_RBAC_PROXY_IMAGE}", "KUBE_RBAC_PROXY_IMAGE"),
    ("${KUBE_RBAC_PROXY_CONTROL_PLANE_IMAGE}", "KUBE_RBAC_PROXY_CONTROL_PLANE_IMAGE"),
    ("${TOOLS_IMAGE}", "TOOLS_IMAGE"),
)


class Replacer:
    """Replaces a list of old strings with new ones.

    Replacements happen left to right through the text without overlapping,
    and at each position the pairs are tried in the order they were given.
    """

    def __init__(self, *oldnew: str) -> None:
        if len(oldnew) % 2:
            raise ValueError("Replacer needs an even number of arguments")
        self.pairs: tuple[tuple[str, str], ...] = tuple(zip(oldnew[::2], oldnew[1::2]))
        self._table: dict[str, str] = {}
        for old, new in self.pairs:
            self._table.setdefault(old, new)
        self._pattern = (
            re.compile("|".join(re.escape(old) for old, _ in self.pairs)) if self.pairs else None
        )

    def replace(self, text: str) -> str:
        """Return ``text`` with every replacement applied."""
        if self._pattern is None:
            return text
        return self._pattern.sub(lambda match: self._table[match.group(0)], text)

    def __repr__(self) -> str:
        return f"Replacer({self.pairs!r})"


def sidecar_replacer(environ: Optional[Mapping[str, str]] = None) -> Replacer:
    """Build the replacer for sidecar image placeholders from the environment."""
    env = os.environ if environ is None else environ
    return Replacer(
        *(item for placeholder, name in SIDECAR_IMAGES for item in (placeholder, env.get(name, "")))
    )