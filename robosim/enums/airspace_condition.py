from enum import Enum
from typing import List, Optional, Union


class AirspaceCondition(str, Enum):
    CALM = "calm"
    LIGHT_WIND = "light_wind"
    GUSTY = "gusty"
    TURBULENT = "turbulent"

    @classmethod
    def parse(
        cls, value: Union[str, "AirspaceCondition", None]
    ) -> Optional["AirspaceCondition"]:
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
        return [condition.value for condition in cls]
