from typing import Optional

import attrs

from src.service.shared_kernel.domain.enum.dimension import Dimension


def _to_coordinates(value: Optional[tuple[int, int, int]]) -> Optional[tuple[int, int, int]]:
    if value is None:
        return None
    return tuple(value)  # type: ignore[return-value]


@attrs.frozen
class Location:
    coordinates: Optional[tuple[int, int, int]] = attrs.field(
        default=None, converter=_to_coordinates
    )
    description: Optional[str] = None
    dimension: Optional[Dimension] = None


@attrs.frozen
class Software:
    name: Optional[str] = None
    version: Optional[str] = None  # Anything human-readable: date, hash, semver
