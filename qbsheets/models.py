"""Data models for the scoresheet exporter."""

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from .columns import ColumnAddress

T = TypeVar('T')

ROWS = 'ROWS'
COLUMNS = 'COLUMNS'


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of an export step: a value on success, a message on failure."""
    success: bool
    value: Optional[T] = None
    error_message: str = ''

    @classmethod
    def ok(cls, value: T) -> 'Result[T]':
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error_message: str) -> 'Result[T]':
        return cls(success=False, error_message=error_message)


@dataclass(frozen=True)
class PlayerTeamPair:
    """A player and the team they play for."""
    player_id: str
    display_name: str
    team_id: str = ''  # Empty means the player stands alone as their own team

    def __post_init__(self):
        if not self.team_id:
            object.__setattr__(self, 'team_id', self.player_id)

    @property
    def is_on_team(self) -> bool:
        return self.player_id != self.team_id


@dataclass(frozen=True)
class ScoreAction:
    """A single buzz and the points it earned."""
    player_id: str
    display_name: str
    score: int
    team_id: Optional[str] = None


@dataclass(frozen=True)
class PhaseScore:
    """Scoring for one tossup/bonus cycle."""
    scoring_actions: tuple[ScoreAction, ...] = ()
    bonus_team_id: Optional[str] = None
    bonus_scores: tuple[int, ...] = ()


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of a match: rosters and the phases in play order."""
    team_id_to_names: dict[str, str] = field(default_factory=dict)
    players: tuple[PlayerTeamPair, ...] = ()
    phase_scores: tuple[PhaseScore, ...] = ()


@dataclass(frozen=True)
class CellWrite:
    """
    A write to one cell, or to a run of cells along a row or column.

    The run starts at (column, row). With ROWS the values go right from the
    starting column; with COLUMNS they go down from the starting row.
    """
    sheet_name: str
    column: ColumnAddress
    row: int
    values: tuple[Any, ...]
    major_dimension: str = ROWS

    @classmethod
    def single(cls, sheet_name: str, column: ColumnAddress, row: int, value: Any) -> 'CellWrite':
        return cls(sheet_name, column, row, (value,))

    @classmethod
    def along_row(cls, sheet_name: str, column: ColumnAddress, row: int, values) -> 'CellWrite':
        return cls(sheet_name, column, row, tuple(values), ROWS)

    @classmethod
    def along_column(cls, sheet_name: str, column: ColumnAddress, row: int, values) -> 'CellWrite':
        return cls(sheet_name, column, row, tuple(values), COLUMNS)

    @property
    def range(self) -> str:
        """A1 notation for the cells covered by this write."""
        start = f'{self.column}{self.row}'
        if len(self.values) == 1:
            return f"'{self.sheet_name}'!{start}"

        # The starting cell already holds the first value
        if self.major_dimension == COLUMNS:
            end = f'{self.column}{self.row + len(self.values) - 1}'
        else:
            end = f'{self.column.add(len(self.values) - 1)}{self.row}'
        return f"'{self.sheet_name}'!{start}:{end}"

    def cells(self) -> list[tuple[ColumnAddress, int, Any]]:
        """Expand into (column, row, value) for each cell."""
        if self.major_dimension == COLUMNS:
            return [(self.column, self.row + i, value) for i, value in enumerate(self.values)]
        return [(self.column.add(i), self.row, value) for i, value in enumerate(self.values)]

    def to_value_range(self) -> dict[str, Any]:
        """Body entry for a values.batchUpdate request."""
        value_range: dict[str, Any] = {
            'range': self.range,
            'values': [list(self.values)],
        }
        if self.major_dimension == COLUMNS and len(self.values) > 1:
            value_range['majorDimension'] = COLUMNS
        return value_range


@dataclass
class ScoresheetPlan:
    """Everything needed to write one scoresheet, built before any I/O."""
    writes: list[CellWrite] = field(default_factory=list)
    clear_ranges: list[str] = field(default_factory=list)
    trimmed: bool = False
