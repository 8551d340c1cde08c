"""
FastAPI application exposing the Blackjack action-outcome estimator.

The front-end posts the visible table state (the player's cards, the
dealer's up card, the number of decks, the bet size and a trial count) and
receives, for every action it can display, the probability of winning,
losing and tying together with the expected value of the bet.  Each card is
represented solely by its rank (e.g. ``"9"`` or ``"K"``).

Usage:
    uvicorn app:app --reload

Endpoints:
    GET  /health       – simple health check
    GET  /actions      – list of action names in display order
    POST /simulate     – run the Monte Carlo simulation for one hand
"""

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, field_validator

from actions import ACTIONS
from config import get_settings
from game import InvalidParameter, Rank
from schemas import ActionOutcome, SimulationOut
from simulation import (
    MAX_PLAYER_CARDS,
    MIN_PLAYER_CARDS,
    ActionStats,
    SimulationRequest,
    SimulationResult,
    simulate,
)

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Blackjack Odds API", version="1.0.0")


class SimRequest(BaseModel):
    """Parameters for the simulation endpoint."""

    player_cards: List[Rank] = Field(
        ...,
        min_length=MIN_PLAYER_CARDS,
        max_length=MAX_PLAYER_CARDS,
        description="Ranks of the player's current cards. Empty slots (null or \"\") are ignored.",
    )
    dealer_card: Rank = Field(..., description="Rank of the dealer's visible card.")
    num_decks: int = Field(6, ge=1, le=8, description="Number of decks in the shoe.")
    bet_size: float = Field(10.0, ge=0, description="Bet amount used for the expected value.")
    num_trials: int = Field(
        10_000,
        ge=0,
        le=settings.max_trials,
        description="Number of simulated trials per action.",
    )
    seed: Optional[int] = Field(
        None,
        description="Random seed for reproducible simulations. Leave blank for non‑deterministic behaviour.",
    )
    dealer_hits_soft_17: Optional[bool] = Field(
        None,
        description="Whether the dealer hits a soft 17. Defaults to the server setting.",
    )

    @field_validator("player_cards", mode="before")
    @classmethod
    def drop_empty_slots(cls, v):
        if isinstance(v, list):
            return [card for card in v if card not in (None, "")]
        return v


def _outcome(stats: ActionStats) -> ActionOutcome:
    return ActionOutcome(
        estimated_value=stats.estimated_value,
        win=stats.win_probability,
        loss=stats.loss_probability,
        tie=stats.tie_probability,
    )


def to_response(result: SimulationResult) -> SimulationOut:
    """Map engine statistics onto the display record; missing actions stay neutral."""
    outcomes = {name: _outcome(result[name]) for name in result}
    return SimulationOut(can_split=result.can_split, **outcomes)


@app.get("/health")
def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/actions", response_model=List[str])
def list_actions() -> List[str]:
    """Return the names of all actions the simulator can evaluate."""
    return list(ACTIONS.keys())


@app.post("/simulate", response_model=SimulationOut)
def run_simulation(req: SimRequest) -> SimulationOut:
    """
    Estimate the outcome of every applicable action for the posted hand.

    The simulation blocks until every trial has run; FastAPI executes this
    endpoint in its thread pool so other requests are still served.
    """
    hits_soft_17 = req.dealer_hits_soft_17
    if hits_soft_17 is None:
        hits_soft_17 = settings.dealer_hits_soft_17
    try:
        request = SimulationRequest(
            player_cards=tuple(req.player_cards),
            dealer_card=req.dealer_card,
            num_decks=req.num_decks,
            bet_size=req.bet_size,
            num_trials=req.num_trials,
            seed=req.seed,
            hits_soft_17=hits_soft_17,
        )
    except InvalidParameter as exc:
        logger.warning("Rejected simulation request: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    result = simulate(request, workers=settings.workers)
    return to_response(result)
