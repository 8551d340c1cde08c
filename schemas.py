"""
Pydantic data models for API responses.

These classes mirror the statistics returned by the simulation engine and
ensure that responses are properly validated and serialised by FastAPI.
"""

from pydantic import BaseModel, Field


class ActionOutcome(BaseModel):
    """Odds and expected value of one player action."""

    estimated_value: float = Field(0.0, description="bet_size × (win − loss); ties are neutral.")
    win: float = Field(0.0, ge=0, le=1, description="Probability of beating the dealer.")
    loss: float = Field(0.0, ge=0, le=1, description="Probability of losing to the dealer.")
    tie: float = Field(0.0, ge=0, le=1, description="Probability of a push.")


class SimulationOut(BaseModel):
    """
    Outcomes for every action the front-end displays.  The split fields hold
    the neutral all-zero outcome when the hand is not a pair.
    """

    can_split: bool = Field(..., description="Whether the player's hand is a pair.")
    stand: ActionOutcome
    hit_once: ActionOutcome
    hit_twice: ActionOutcome
    hit_thrice: ActionOutcome
    split_hit_once: ActionOutcome = Field(default_factory=ActionOutcome)
    split_hit_twice: ActionOutcome = Field(default_factory=ActionOutcome)
    split_hit_thrice: ActionOutcome = Field(default_factory=ActionOutcome)
