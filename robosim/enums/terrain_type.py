from enum import Enum
from typing import List, Optional, Union


class TerrainType(str, Enum):
    SAND = "sand"
    CONCRETE = "concrete"
    GRASS = "grass"
    GRAVEL = "gravel"

    @classmethod
    def parse(cls, value: Union[str, "TerrainType", None]) -> Optional["TerrainType"]:
        """Return the matching terrain, or None when the value is not a known terrain."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None

    @classmethod
    def values(cls) -> List[str]:
        return [terrain.value for terrain in cls]
