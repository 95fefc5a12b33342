from __future__ import annotations

from collections.abc import Mapping
from typing import Final

DEFAULT_HEADERS: Final[Mapping[str, str]] = {"Content-Type": "application/json"}

# Sent by CredentialedClient; merged last so it beats caller headers.
CREDENTIAL_HEADERS: Final[Mapping[str, str]] = {
    "Content-Type": "application/json",
    "credentials": "include",
}


def merge_headers(*layers: Mapping[str, str] | None) -> dict[str, str]:
    """Merge header mappings left to right; later layers win.

    Names compare case-insensitively (HTTP semantics), and the winning
    layer's spelling of the name is kept.
    """

    merged: dict[str, str] = {}
    for layer in layers:
        if not layer:
            continue
        for name, value in layer.items():
            lowered = name.lower()
            for existing in [k for k in merged if k.lower() == lowered]:
                del merged[existing]
            merged[name] = value
    return merged
