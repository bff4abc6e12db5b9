"""Resolution/format policy for Bilibili stream requests.

``qn`` selects the resolution, ``fnval`` the container:

    qn   label     login
    16   360P      no
    32   480P      no
    64   720P      no
    74   720P60    yes
    80   1080P     yes
    112  1080P+    yes
    116  1080P60   yes
    120  4K        yes
"""

from __future__ import annotations

from dataclasses import dataclass

from vidsource.domain.entities.media import ContainerFormat, Resolution

_QUALITY_CODES: dict[Resolution, tuple[int, str]] = {
    Resolution.LOW: (16, "360P"),
    Resolution.STANDARD: (32, "480P"),
    Resolution.HIGH: (64, "720P"),
    Resolution.HIGH_60FPS: (74, "720P60"),
    Resolution.FULL_HD: (80, "1080P"),
    Resolution.FULL_HD_PLUS: (112, "1080P+"),
    Resolution.FULL_HD_60FPS: (116, "1080P60"),
    Resolution.UHD_4K: (120, "4K"),
}

# Every tier at or above this one requires a logged-in session
AUTH_THRESHOLD = Resolution.HIGH_60FPS

_FORMAT_CODES: dict[ContainerFormat, int] = {
    ContainerFormat.FLV: 0,
    ContainerFormat.MP4: 1,
    ContainerFormat.DASH: 16,
}
_FNVAL_4K = 128


@dataclass(frozen=True)
class PlatformCodes:
    """Concrete query parameters for the stream-address endpoint."""

    qn: int
    fnval: int
    fourk: int = 0

    def as_params(self) -> dict[str, int]:
        return {"qn": self.qn, "fnval": self.fnval, "fourk": self.fourk}


def needs_auth(resolution: Resolution) -> bool:
    return resolution >= AUTH_THRESHOLD


def to_platform_codes(
    resolution: Resolution, container: ContainerFormat
) -> PlatformCodes:
    """Translate an abstract quality request into ``qn``/``fnval`` codes."""
    qn, _ = _QUALITY_CODES[resolution]
    fnval = _FORMAT_CODES[container]
    fourk = 0
    if resolution is Resolution.UHD_4K:
        fourk = 1
        if container is ContainerFormat.DASH:
            fnval |= _FNVAL_4K
    return PlatformCodes(qn=qn, fnval=fnval, fourk=fourk)


def dimension() -> list[tuple[int, str]]:
    """All supported ``qn`` codes with labels, lowest to highest."""
    return [_QUALITY_CODES[tier] for tier in sorted(_QUALITY_CODES)]


def tier_for_code(qn: int) -> Resolution | None:
    """Reverse lookup of a ``qn`` code as printed by :func:`dimension`."""
    for tier, (code, _) in _QUALITY_CODES.items():
        if code == qn:
            return tier
    return None
