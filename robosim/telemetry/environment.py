from typing import Dict, Union

from pydantic import BaseModel, ConfigDict

from robosim.enums.airspace_condition import AirspaceCondition
from robosim.enums.terrain_type import TerrainType


class TerrainParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    slip_probability: float
    friction_variance: float
    impact_damping: float
    sinkage: float


class AirspaceParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    turbulence_intensity: float
    gust_probability: float
    position_variance: float


TERRAIN_PARAMS: Dict[TerrainType, TerrainParams] = {
    TerrainType.SAND: TerrainParams(
        slip_probability=0.15, friction_variance=0.20, impact_damping=0.70, sinkage=0.02
    ),
    TerrainType.CONCRETE: TerrainParams(
        slip_probability=0.02, friction_variance=0.05, impact_damping=0.95, sinkage=0.0
    ),
    TerrainType.GRASS: TerrainParams(
        slip_probability=0.08, friction_variance=0.15, impact_damping=0.80, sinkage=0.01
    ),
    TerrainType.GRAVEL: TerrainParams(
        slip_probability=0.12, friction_variance=0.18, impact_damping=0.75, sinkage=0.015
    ),
}

AIRSPACE_PARAMS: Dict[AirspaceCondition, AirspaceParams] = {
    AirspaceCondition.CALM: AirspaceParams(
        turbulence_intensity=0.10, gust_probability=0.02, position_variance=0.05
    ),
    AirspaceCondition.LIGHT_WIND: AirspaceParams(
        turbulence_intensity=0.25, gust_probability=0.08, position_variance=0.15
    ),
    AirspaceCondition.GUSTY: AirspaceParams(
        turbulence_intensity=0.50, gust_probability=0.20, position_variance=0.35
    ),
    AirspaceCondition.TURBULENT: AirspaceParams(
        turbulence_intensity=0.80, gust_probability=0.40, position_variance=0.60
    ),
}


def terrain_params(terrain: Union[TerrainType, str, None]) -> TerrainParams:
    """Coefficients for a terrain; anything unrecognized gets concrete's row."""
    parsed = TerrainType.parse(terrain)
    if parsed is None:
        return TERRAIN_PARAMS[TerrainType.CONCRETE]
    return TERRAIN_PARAMS[parsed]


def airspace_params(condition: Union[AirspaceCondition, str, None]) -> AirspaceParams:
    """Coefficients for an airspace condition; anything unrecognized gets calm's row."""
    parsed = AirspaceCondition.parse(condition)
    if parsed is None:
        return AIRSPACE_PARAMS[AirspaceCondition.CALM]
    return AIRSPACE_PARAMS[parsed]
