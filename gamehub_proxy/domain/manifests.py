from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional

__all__ = [
    "TYPE_TO_MANIFEST",
    "BASE_INFO_PATH",
    "DNS_POOL_PATH",
    "STEAM_HOST_PATH",
    "manifest_path",
]

# Component type code -> manifest path on the static-content host.
TYPE_TO_MANIFEST: Mapping[int, str] = MappingProxyType(
    {
        1: "/components/box64_manifest",
        2: "/components/drivers_manifest",
        3: "/components/dxvk_manifest",
        4: "/components/vkd3d_manifest",
        5: "/components/games_manifest",
        6: "/components/libraries_manifest",
        7: "/components/steam_manifest",
    }
)

BASE_INFO_PATH = "/base/getBaseInfo"
DNS_POOL_PATH = "/game/getDnsIpPool"
STEAM_HOST_PATH = "/game/getSteamHost/index"


def manifest_path(type_code: Any) -> Optional[str]:
    """Return the manifest path for a component type, or None if unknown.

    Numeric strings are accepted; clients send ``"3"`` as often as ``3``.
    """
    if isinstance(type_code, str) and type_code.strip().isdigit():
        type_code = int(type_code)
    if isinstance(type_code, bool) or not isinstance(type_code, int):
        return None
    return TYPE_TO_MANIFEST.get(type_code)
