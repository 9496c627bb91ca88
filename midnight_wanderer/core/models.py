from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, StrictBool, StrictStr

Phase = Literal["idle", "awaiting_text", "awaiting_image", "failed"]


@dataclass(frozen=True)
class Turn:
    """One entry of the adventure log: a player action or a narrator beat."""
    text: str
    image: Optional[str] = None     # data URI, narrator turns only
    is_player_input: bool = False


@dataclass
class GameState:
    """
    Everything the page renders: the ordered turn log plus the scalars
    folded in from the latest narrator reply.
    """
    turns: List[Turn] = field(default_factory=list)
    current_location: str = ""
    is_game_over: bool = False
    game_over_reason: str = ""
    is_loading: bool = False
    last_error: Optional[str] = None
    phase: Phase = "idle"
    turn: int = 0                   # committed narrator beats

    @property
    def latest_image(self) -> Optional[str]:
        for t in reversed(self.turns):
            if t.image:
                return t.image
        return None

    @property
    def can_submit(self) -> bool:
        return not (self.is_loading or self.is_game_over)


# ——— Model reply schema ——————————————————————————————————

class TurnResult(BaseModel):
    scene_description: StrictStr = Field(..., alias="sceneDescription")
    location: StrictStr
    image_prompt: StrictStr = Field(..., alias="promptForImage")
    is_game_over: StrictBool = Field(..., alias="isGameOver")
    game_over_reason: Optional[StrictStr] = Field(None, alias="gameOverReason")

    model_config = {"populate_by_name": True}
