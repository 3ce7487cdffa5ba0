"""Runtime settings for the PerfectXO engine."""

from __future__ import annotations

import os
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


ENV_PREFIX = "PERFECTXO_"

_ENV_FIELDS: Dict[str, str] = {
    "MOVE_DELAY": "move_delay",
    "RESET_DELAY": "reset_delay",
    "RANDOMIZE_OPENING": "randomize_opening_move",
    "COMPUTER_FIRST": "computer_moves_first",
}


class EngineSettings(BaseModel):
    """Timing and turn-order policy shared by the scheduler and controller."""

    model_config = ConfigDict(frozen=True)

    move_delay: float = Field(
        default=0.5, ge=0.0, description="Seconds the computer 'thinks' before moving"
    )
    reset_delay: float = Field(
        default=4.0, ge=0.0, description="Seconds a finished game stays on screen"
    )
    randomize_opening_move: bool = Field(
        default=True,
        description="Pick a random cell instead of searching when the board is empty",
    )
    computer_moves_first: bool = False

    @property
    def user_plays_first(self) -> bool:
        return not self.computer_moves_first

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        env = os.environ if environ is None else environ
        values = {
            name: env[ENV_PREFIX + key]
            for key, name in _ENV_FIELDS.items()
            if ENV_PREFIX + key in env
        }
        return cls(**values)
