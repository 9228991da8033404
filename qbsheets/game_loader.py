"""Loading saved games from JSON files.

Example game file:

    {
        "teams": {"alpha": "Alpha", "beta": "Beta"},
        "players": [
            {"id": "2", "name": "Alice", "team": "alpha"},
            {"id": "4", "name": "Bob", "team": "beta"}
        ],
        "phases": [
            {"actions": [{"player": "2", "score": 15}], "bonus": {"team": "alpha", "parts": [10, 0, 10]}},
            {"actions": [{"player": "4", "score": -5}]}
        ]
    }
"""

from pathlib import Path

from .models import GameSnapshot, PhaseScore, PlayerTeamPair, ScoreAction
from .schemas import GameFile
from .utils import load_json


def build_game_snapshot(game_file: GameFile) -> GameSnapshot:
    """Convert a validated game file into the snapshot the generators read."""
    players = tuple(
        PlayerTeamPair(player_id=entry.id, display_name=entry.name, team_id=entry.team or '')
        for entry in game_file.players
    )
    players_by_id = {pair.player_id: pair for pair in players}

    phase_scores = []
    for phase in game_file.phases:
        actions = []
        for action in phase.actions:
            pair = players_by_id.get(action.player)
            actions.append(
                ScoreAction(
                    player_id=action.player,
                    display_name=action.name or (pair.display_name if pair else action.player),
                    score=action.score,
                    team_id=pair.team_id if pair else None,
                )
            )

        phase_scores.append(
            PhaseScore(
                scoring_actions=tuple(actions),
                bonus_team_id=phase.bonus.team if phase.bonus else None,
                bonus_scores=tuple(phase.bonus.parts) if phase.bonus else (),
            )
        )

    return GameSnapshot(
        team_id_to_names=dict(game_file.teams),
        players=players,
        phase_scores=tuple(phase_scores),
    )


def load_game(path: str | Path) -> GameSnapshot:
    """
    Load a game from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file doesn't match the game file schema
    """
    return build_game_snapshot(load_json(path, schema=GameFile))
