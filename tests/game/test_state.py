"""Tests for GameState and MoveRecord."""

from kingside.core.enums import Color, PieceType
from kingside.core.notation import STARTING_FEN, parse_san, position_from_fen
from kingside.game.result import EndReason, Outcome
from kingside.game.state import GameState


def _play(state: GameState, *sans: str) -> None:
    for san in sans:
        state.apply_move(parse_san(state.position, san))


class TestGameState:
    def test_initial(self) -> None:
        state = GameState()
        assert state.fen == STARTING_FEN
        assert state.ply_count == 0
        assert state.last_move is None
        assert not state.is_game_over
        assert state.terminal_result() is None
        assert len(state.legal_moves()) == 20

    def test_record_fields(self) -> None:
        state = GameState()
        _play(state, "e4", "d5", "exd5")
        record = state.last_move
        assert record is not None
        assert record.san == "exd5"
        assert record.color == Color.WHITE
        assert record.is_capture
        assert record.captured is not None and record.captured.piece_type == PieceType.PAWN
        assert record.fen_after == state.fen
        assert state.san_history == ("e4", "d5", "exd5")
        assert state.captured.by(Color.WHITE) == [PieceType.PAWN]
        assert state.captured.by(Color.BLACK) == []
        assert state.stats.captures == 1
        assert state.stats.moves_played == 3

    def test_checkmate_flags(self) -> None:
        state = GameState()
        _play(state, "f3", "e5", "g4", "Qh4#")
        assert state.is_checkmate
        assert state.is_check
        assert not state.is_draw
        assert state.last_move is not None and state.last_move.is_checkmate
        result = state.terminal_result()
        assert result is not None
        assert result.winner == Color.BLACK
        assert result.outcome == Outcome.LOSS
        assert result.reason == EndReason.CHECKMATE

    def test_stalemate_from_position(self) -> None:
        state = GameState(position_from_fen("7k/8/5K2/8/8/8/8/6Q1 w - - 0 1"))
        _play(state, "Qg6")
        assert state.is_stalemate
        assert state.is_draw
        assert not state.is_checkmate
        result = state.terminal_result()
        assert result is not None and result.reason == EndReason.STALEMATE

    def test_threefold_repetition(self) -> None:
        state = GameState()
        shuffle = ("Nf3", "Nf6", "Ng1", "Ng8")
        _play(state, *shuffle)
        assert state.repetition_count() == 2
        assert not state.is_draw
        _play(state, *shuffle)
        assert state.is_threefold_repetition()
        assert state.is_draw
        result = state.terminal_result()
        assert result is not None and result.is_draw

    def test_repetition_counts_position_after_double_push(self) -> None:
        state = GameState()
        _play(state, "e4")
        shuffle = ("Nf6", "Nf3", "Ng8", "Ng1")
        _play(state, *shuffle)
        assert state.repetition_count() == 2
        _play(state, *shuffle)
        assert state.is_threefold_repetition()

    def test_insufficient_material_after_capture(self) -> None:
        state = GameState(position_from_fen("4k3/8/8/8/8/8/4q3/4K3 w - - 0 1"))
        _play(state, "Kxe2")
        assert state.is_draw
        assert state.last_move is not None and state.last_move.is_draw
