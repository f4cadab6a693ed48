"""Tests for GameSettings and GameResult."""

import pytest

from kingside.core.enums import Color
from kingside.core.errors import InvalidSettingsError
from kingside.engine.search import Difficulty
from kingside.game.result import EndReason, GameResult, Outcome
from kingside.game.settings import GameMode, GameSettings


class TestGameSettings:
    def test_defaults(self) -> None:
        settings = GameSettings()
        assert settings.time_per_player == 600
        assert settings.game_mode == GameMode.LOCAL
        assert settings.difficulty is None

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"time_per_player": 0},
            {"time_per_player": -60},
            {"time_per_player": 24 * 60 * 60 + 1},
            {"time_per_player": 60.5},
            {"time_per_player": True},
            {"increment": -1},
            {"increment": 61},
            {"game_mode": "correspondence"},
            {"game_mode": GameMode.COMPUTER},
            {"game_mode": GameMode.COMPUTER, "difficulty": "impossible"},
            {"computer_color": "black"},
        ],
    )
    def test_rejects_invalid(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(InvalidSettingsError):
            GameSettings(**kwargs)  # type: ignore[arg-type]

    def test_accepts_string_enums(self) -> None:
        settings = GameSettings(game_mode="computer", difficulty="hard")  # type: ignore[arg-type]
        assert settings.game_mode is GameMode.COMPUTER
        assert settings.difficulty is Difficulty.HARD

    def test_presets(self) -> None:
        assert GameSettings.blitz_3m2s().time_per_player == 180
        assert GameSettings.blitz_3m2s().increment == 2
        assert GameSettings.rapid_15m10s().increment == 10

    def test_against_computer(self) -> None:
        settings = GameSettings.blitz_5m().against_computer(Difficulty.EASY, Color.WHITE)
        assert settings.game_mode == GameMode.COMPUTER
        assert settings.computer_color == Color.WHITE
        assert settings.board_orientation == Color.BLACK
        assert settings.time_per_player == 300

    def test_online(self) -> None:
        settings = GameSettings().online(Color.BLACK)
        assert settings.game_mode == GameMode.ONLINE
        assert settings.local_color == Color.BLACK

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            GameSettings().increment = 5  # type: ignore[misc]


class TestGameResult:
    def test_win_for_black_is_loss_for_white(self) -> None:
        result = GameResult.win_for(Color.BLACK, EndReason.CHECKMATE)
        assert result.outcome == Outcome.LOSS
        assert result.winner == Color.BLACK
        assert result.loser == Color.WHITE
        assert not result.is_draw

    def test_draw(self) -> None:
        result = GameResult.draw(EndReason.STALEMATE)
        assert result.is_draw
        assert result.winner is None
        assert str(result) == "draw (stalemate)"

    @pytest.mark.parametrize(
        ("outcome", "reason", "winner"),
        [
            (Outcome.DRAW, EndReason.DRAW, Color.WHITE),
            (Outcome.DRAW, EndReason.CHECKMATE, None),
            (Outcome.WIN, EndReason.CHECKMATE, Color.BLACK),
            (Outcome.LOSS, EndReason.STALEMATE, Color.BLACK),
        ],
    )
    def test_inconsistent_results_rejected(
        self, outcome: Outcome, reason: EndReason, winner: Color | None
    ) -> None:
        with pytest.raises(ValueError):
            GameResult(outcome, reason, winner)
