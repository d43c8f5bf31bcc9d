from enum import Enum


class FlightPhase(str, Enum):
    TAKEOFF = "takeoff"
    HOVER = "hover"
    WAYPOINT = "waypoint"
    LAND = "land"
