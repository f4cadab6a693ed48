"""Game state — position, move history, captures and derived flags."""

from __future__ import annotations

from dataclasses import dataclass, field

from kingside.core.enums import Color, PieceType
from kingside.core.move import Move
from kingside.core.move_generator import MoveGenerator
from kingside.core.notation import move_to_san, position_to_fen
from kingside.core.piece import Piece
from kingside.core.position import Position
from kingside.core.rules import Rules
from kingside.game.clock import TimerState
from kingside.game.interfaces import GamePhase
from kingside.game.result import EndReason, GameResult

REPETITION_LIMIT = 3


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    san: str
    piece: Piece
    color: Color
    captured: Piece | None
    is_check: bool
    is_checkmate: bool
    is_draw: bool
    fen_after: str

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_castle(self) -> bool:
        return self.move.is_castle

    @property
    def is_en_passant(self) -> bool:
        return self.move.is_en_passant

    @property
    def is_promotion(self) -> bool:
        return self.move.is_promotion


@dataclass(slots=True)
class CapturedPieces:
    """Piece types taken so far, keyed by the capturing colour."""

    white: list[PieceType] = field(default_factory=list)
    black: list[PieceType] = field(default_factory=list)

    def by(self, color: Color) -> list[PieceType]:
        return self.white if color == Color.WHITE else self.black

    def add(self, color: Color, piece_type: PieceType) -> None:
        self.by(color).append(piece_type)


@dataclass(slots=True)
class GameStats:
    moves_played: int = 0
    checks: int = 0
    captures: int = 0
    time_elapsed: int = 0


@dataclass
class GameState:
    """Position plus everything derived from the moves that led to it.

    The check / mate / draw flags are recomputed after every ply and are
    never set from outside.  Repetitions are counted by Zobrist key.
    """

    position: Position = field(default_factory=Position.initial)
    history: list[MoveRecord] = field(default_factory=list, init=False)
    captured: CapturedPieces = field(default_factory=CapturedPieces, init=False)
    stats: GameStats = field(default_factory=GameStats, init=False)
    repetitions: dict[int, int] = field(default_factory=dict, init=False)
    is_check: bool = field(default=False, init=False)
    is_checkmate: bool = field(default=False, init=False)
    is_stalemate: bool = field(default=False, init=False)
    is_draw: bool = field(default=False, init=False)
    is_game_over: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.repetitions[self.position.zobrist_hash] = 1
        self._refresh_flags()

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move) -> MoveRecord:
        """Apply a validated move and return the history record.

        Caller is responsible for the legality check.
        """
        position = self.position
        piece = position.board[move.from_sq]
        assert piece is not None, f"no piece on the origin square of {move}"
        captured = position.captured_by(move)

        san = move_to_san(position, move)
        position.make_move(move)
        key = position.zobrist_hash
        self.repetitions[key] = self.repetitions.get(key, 0) + 1
        self._refresh_flags()

        record = MoveRecord(
            move=move,
            san=san,
            piece=piece,
            color=piece.color,
            captured=captured,
            is_check=self.is_check,
            is_checkmate=self.is_checkmate,
            is_draw=self.is_draw,
            fen_after=position_to_fen(position),
        )
        self.history.append(record)

        self.stats.moves_played += 1
        if record.is_check:
            self.stats.checks += 1
        if captured is not None:
            self.stats.captures += 1
            self.captured.add(piece.color, captured.piece_type)
        return record

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def fen(self) -> str:
        return position_to_fen(self.position)

    @property
    def san_history(self) -> tuple[str, ...]:
        return tuple(record.san for record in self.history)

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.history)

    @property
    def last_move(self) -> MoveRecord | None:
        return self.history[-1] if self.history else None

    def repetition_count(self) -> int:
        """How often the current position has occurred in this game."""
        return self.repetitions.get(self.position.zobrist_hash, 0)

    def is_threefold_repetition(self) -> bool:
        return self.repetition_count() >= REPETITION_LIMIT

    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position."""
        return MoveGenerator(self.position).generate_legal_moves()

    def terminal_result(self) -> GameResult | None:
        """The result the board itself dictates, if any."""
        if self.is_checkmate:
            return GameResult.win_for(self.side_to_move.opposite, EndReason.CHECKMATE)
        if self.is_stalemate:
            return GameResult.draw(EndReason.STALEMATE)
        if self.is_draw:
            return GameResult.draw(EndReason.DRAW)
        return None

    # ── Internal ─────────────────────────────────────────────────────────

    def _refresh_flags(self) -> None:
        position = self.position
        gen = MoveGenerator(position)
        self.is_check = gen.is_in_check(position.side_to_move)
        has_move = gen.has_legal_move()
        self.is_checkmate = self.is_check and not has_move
        self.is_stalemate = not self.is_check and not has_move
        self.is_draw = not self.is_checkmate and (
            self.is_stalemate
            or Rules.is_fifty_move_rule(position)
            or Rules.is_insufficient_material(position)
            or self.is_threefold_repetition()
        )
        self.is_game_over = self.is_checkmate or self.is_draw


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """Immutable copy of a session for observers on other threads."""

    phase: GamePhase
    fen: str
    san_history: tuple[str, ...]
    side_to_move: Color
    is_check: bool
    is_checkmate: bool
    is_stalemate: bool
    is_draw: bool
    is_game_over: bool
    timer: TimerState | None
    result: GameResult | None
    captured_by_white: tuple[PieceType, ...] = ()
    captured_by_black: tuple[PieceType, ...] = ()
