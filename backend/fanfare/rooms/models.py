"""Pydantic models for inbound websocket intents."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field

from fanfare_engine.cards import Card
from fanfare_engine.cards import Color


class CreateRoomRequest(BaseModel):
    """create_room payload."""

    display_name: str = Field(min_length=1, max_length=32)
    character_id: int = Field(ge=0)
    max_players: int | None = None


class JoinRoomRequest(BaseModel):
    """join_room payload."""

    room_id: str = Field(min_length=1, max_length=16)
    display_name: str = Field(min_length=1, max_length=32)
    character_id: int = Field(ge=0)


class CardModel(BaseModel):
    color: Color
    value: int = Field(ge=3, le=6)

    def to_card(self) -> Card:
        return Card(color=self.color, value=self.value)


class PlayCardsRequest(BaseModel):
    """play_cards payload."""

    cards: list[CardModel] = Field(min_length=1)


class UseSkillCardRequest(BaseModel):
    """use_skill_card payload."""

    skill_id: str = Field(min_length=1)
