"""Pydantic schemas for configuration and game files."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class SheetsConfig(BaseModel):
    """Exporter settings, loaded from data/sheets_config.json."""

    google_app_email: Optional[str] = None
    google_app_private_key: Optional[str] = None
    template_path: str = 'data/naqt-scoresheet-electronic-template.xlsx'

    @field_validator('google_app_email')
    @classmethod
    def validate_email(cls, v):
        """Service account emails look like name@project.iam.gserviceaccount.com."""
        if v is not None and '@' not in v:
            raise ValueError(f'Invalid service account email: {v}')
        return v

    @property
    def has_google_credentials(self) -> bool:
        return bool(self.google_app_email) and bool(self.google_app_private_key)

    class Config:
        extra = 'forbid'


class PlayerEntry(BaseModel):
    """Player in a game file."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    team: Optional[str] = None

    class Config:
        extra = 'forbid'


class ActionEntry(BaseModel):
    """A buzz and its score."""

    player: str = Field(..., min_length=1)
    score: int
    name: Optional[str] = None

    class Config:
        extra = 'forbid'


class BonusEntry(BaseModel):
    """Bonus heard by one team, with the points for each part."""

    team: str = Field(..., min_length=1)
    parts: list[int] = Field(..., min_length=1)

    class Config:
        extra = 'forbid'


class PhaseEntry(BaseModel):
    """One tossup/bonus cycle."""

    actions: list[ActionEntry] = Field(default_factory=list)
    bonus: Optional[BonusEntry] = None

    class Config:
        extra = 'forbid'


class GameFile(BaseModel):
    """Complete game file structure."""

    teams: dict[str, str] = Field(default_factory=dict)
    players: list[PlayerEntry]
    phases: list[PhaseEntry] = Field(default_factory=list)

    @field_validator('players')
    @classmethod
    def validate_unique_players(cls, v):
        """Ensure no player is listed twice."""
        seen = set()
        for player in v:
            if player.id in seen:
                raise ValueError(f'Duplicate player ID: {player.id}')
            seen.add(player.id)
        return v

    class Config:
        extra = 'forbid'
