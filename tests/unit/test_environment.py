from robosim.enums.airspace_condition import AirspaceCondition
from robosim.enums.terrain_type import TerrainType
from robosim.telemetry.environment import airspace_params, terrain_params


def test_terrain_table():
    sand = terrain_params(TerrainType.SAND)
    assert sand.slip_probability == 0.15
    assert sand.friction_variance == 0.20
    assert sand.impact_damping == 0.70
    assert sand.sinkage == 0.02

    gravel = terrain_params("gravel")
    assert gravel.slip_probability == 0.12
    assert gravel.sinkage == 0.015


def test_unknown_terrain_falls_back_to_concrete():
    assert terrain_params("lava") == terrain_params(TerrainType.CONCRETE)
    assert terrain_params(None) == terrain_params(TerrainType.CONCRETE)


def test_airspace_table():
    turbulent = airspace_params(AirspaceCondition.TURBULENT)
    assert turbulent.turbulence_intensity == 0.80
    assert turbulent.gust_probability == 0.40
    assert turbulent.position_variance == 0.60


def test_unknown_airspace_falls_back_to_calm():
    assert airspace_params("hurricane") == airspace_params(AirspaceCondition.CALM)


def test_enum_parse():
    assert TerrainType.parse(" Sand ") == TerrainType.SAND
    assert TerrainType.parse("mud") is None
    assert AirspaceCondition.parse("gusty") == AirspaceCondition.GUSTY
    assert AirspaceCondition.parse("stormy") is None
