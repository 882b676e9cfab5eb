from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import OfficeLocation


class OfficeLocationRepository(Protocol):
    def list_all(self) -> Sequence[OfficeLocation]:
        raise NotImplementedError

    def get_by_id(self, location_id: int) -> Optional[OfficeLocation]:
        raise NotImplementedError

    def create(self, *, name: str, lat: float, lng: float, radius: int) -> int:
        """Insert an office; raises ConflictError when the name is taken."""

        raise NotImplementedError

    def update(self, location_id: int, *, name: str, lat: float, lng: float, radius: int) -> bool:
        raise NotImplementedError

    def delete(self, location_id: int) -> bool:
        raise NotImplementedError
