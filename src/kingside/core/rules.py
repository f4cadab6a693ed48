"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from kingside.core.enums import Color, PieceType
from kingside.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from kingside.core.position import Position

_MINORS: tuple[PieceType, ...] = (PieceType.KNIGHT, PieceType.BISHOP)


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Repetition needs game history and is tracked by
    :class:`~kingside.game.session.GameSession`, not here.
    """

    @staticmethod
    def is_in_check(position: Position, color: Color | None = None) -> bool:
        side = position.side_to_move if color is None else color
        return MoveGenerator(position).is_in_check(side)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move) and not gen.has_legal_move()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        gen = MoveGenerator(position)
        return not gen.is_in_check(position.side_to_move) and not gen.has_legal_move()

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+N vs K, K+B vs K."""
        board = position.board
        total = board.occupied_count()
        if total == 2:
            return True
        if total != 3:
            return False
        return any(board.has_piece(color, pt) for color in Color for pt in _MINORS)

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= 100  # 100 half-moves = 50 full moves

    @staticmethod
    def is_draw(position: Position) -> bool:
        """Draw by stalemate, the fifty-move rule or insufficient material."""
        return (
            Rules.is_stalemate(position)
            or Rules.is_fifty_move_rule(position)
            or Rules.is_insufficient_material(position)
        )

    @staticmethod
    def is_game_over(position: Position) -> bool:
        return Rules.is_checkmate(position) or Rules.is_draw(position)
