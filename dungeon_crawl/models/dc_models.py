from pydantic import BaseModel
from enum import Enum
from uuid import UUID


class ActionType(str, Enum):
    combat = "Combat"  # fight the room's monster
    search = "Search"  # search the room for treasure, potion or trap
    flee = "Flee"


class ActionResult(str, Enum):
    victory = "Victory"
    defeat = "Defeat"
    found_treasure = "FoundTreasure"
    found_potion = "FoundPotion"
    triggered_trap = "TriggeredTrap"
    escaped = "Escaped"


class GameStatus(str, Enum):
    in_progress = "InProgress"
    completed = "Completed"
    failed = "Failed"  # health reached 0
    abandoned = "Abandoned"


class RoomType(str, Enum):
    combat = "Combat"
    search = "Search"


class StartGameModel(BaseModel):
    player_id: UUID


class PerformActionModel(BaseModel):
    action_type: ActionType
