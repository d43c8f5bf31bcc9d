from enum import Enum
from typing import List, Optional


class ToolName(str, Enum):
    CONFIGURE_PHYSICS = "configure_physics"
    UPDATE_MOTOR_PARAMS = "update_motor_params"
    RUN_SIMULATION = "run_simulation"
    ANALYZE_SIMULATION_VIDEO = "analyze_simulation_video"
    SEARCH_KNOWLEDGE_BASE = "search_knowledge_base"
    START_AUTONOMOUS_RESEARCH = "start_autonomous_research"

    @classmethod
    def get(cls, name: str) -> Optional["ToolName"]:
        for tool in cls:
            if tool.value == name:
                return tool
        return None

    @classmethod
    def values(cls) -> List[str]:
        return [tool.value for tool in cls]
