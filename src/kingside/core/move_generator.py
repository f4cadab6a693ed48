"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from kingside.core.board import iter_bits
from kingside.core.enums import PROMOTION_TYPES, CastlingRights, Color, MoveFlag, PieceType
from kingside.core.errors import IllegalMoveError
from kingside.core.move import Move
from kingside.core.position import Position
from kingside.core.types import Square, make_square, square_name

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)
KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)
BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


# -- Precomputed lookup tables ---------------------------------------------


def _on_board(file_idx: int, rank_idx: int) -> bool:
    return 0 <= file_idx < 8 and 0 <= rank_idx < 8


def _leaper_masks(offsets: tuple[tuple[int, int], ...]) -> tuple[int, ...]:
    masks: list[int] = []
    for sq in range(64):
        mask = 0
        for df, dr in offsets:
            f, r = (sq & 7) + df, (sq >> 3) + dr
            if _on_board(f, r):
                mask |= 1 << make_square(f, r)
        masks.append(mask)
    return tuple(masks)


def _rays(dirs: tuple[tuple[int, int], ...]) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    table: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in dirs:
            ray: list[Square] = []
            f, r = (sq & 7) + df, (sq >> 3) + dr
            while _on_board(f, r):
                ray.append(make_square(f, r))
                f += df
                r += dr
            square_rays.append(tuple(ray))
        table.append(tuple(square_rays))
    return tuple(table)


def _pawn_attacker_masks(color: Color) -> tuple[int, ...]:
    """For each square, the squares a *color* pawn would attack it from."""
    back = -color.sign
    return _leaper_masks(((-1, back), (1, back)))


_KNIGHT_MASKS = _leaper_masks(KNIGHT_OFFSETS)
_KING_MASKS = _leaper_masks(KING_OFFSETS)
_PAWN_ATTACKERS = (_pawn_attacker_masks(Color.WHITE), _pawn_attacker_masks(Color.BLACK))
_BISHOP_RAYS = _rays(BISHOP_DIRS)
_ROOK_RAYS = _rays(ROOK_DIRS)

# Per color: (forward step, start rank, last rank before promotion)
_PAWN_GEOMETRY: dict[Color, tuple[int, int, int]] = {
    Color.WHITE: (8, 1, 6),
    Color.BLACK: (-8, 6, 1),
}

# Per color and wing: (right, flag, files that must be empty, files the king crosses)
_CastlingPath = tuple[CastlingRights, MoveFlag, tuple[int, ...], tuple[int, ...]]
_CASTLING_PATHS: dict[Color, tuple[_CastlingPath, ...]] = {
    color: (
        (CastlingRights.kingside(color), MoveFlag.CASTLE_KINGSIDE, (5, 6), (5, 6)),
        (CastlingRights.queenside(color), MoveFlag.CASTLE_QUEENSIDE, (1, 2, 3), (3, 2)),
    )
    for color in Color
}


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    The generator mutates the position via ``make_move`` / ``unmake_move``
    internally but always restores it before returning.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        pos = self._pos
        mover = pos.side_to_move
        legal: list[Move] = []
        for move in self.generate_pseudo_legal_moves():
            pos.make_move(move)
            if not self.is_in_check(mover):
                legal.append(move)
            pos.unmake_move(move)
        return legal

    def legal_moves_from(self, sq: Square) -> list[Move]:
        """Legal moves of the piece standing on *sq*."""
        piece = self._board[sq]
        if piece is None:
            raise IllegalMoveError(f"No piece on {square_name(sq)}")
        if piece.color != self._pos.side_to_move:
            raise IllegalMoveError(
                f"{square_name(sq)} holds a {piece.color} piece; {self._pos.side_to_move} to move"
            )
        return [m for m in self.generate_legal_moves() if m.from_sq == sq]

    def has_legal_move(self) -> bool:
        """Whether the side to move has at least one legal move."""
        pos = self._pos
        mover = pos.side_to_move
        for move in self.generate_pseudo_legal_moves():
            pos.make_move(move)
            safe = not self.is_in_check(mover)
            pos.unmake_move(move)
            if safe:
                return True
        return False

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        color = self._pos.side_to_move
        board = self._board
        moves: list[Move] = []

        for sq in iter_bits(board.pieces_bitboard(color, PieceType.PAWN)):
            self._gen_pawn(sq, color, moves)
        for sq in iter_bits(board.pieces_bitboard(color, PieceType.KNIGHT)):
            self._gen_leaper(sq, color, _KNIGHT_MASKS[sq], moves)
        for sq in iter_bits(board.pieces_bitboard(color, PieceType.BISHOP)):
            self._gen_slider(sq, color, _BISHOP_RAYS[sq], moves)
        for sq in iter_bits(board.pieces_bitboard(color, PieceType.ROOK)):
            self._gen_slider(sq, color, _ROOK_RAYS[sq], moves)
        for sq in iter_bits(board.pieces_bitboard(color, PieceType.QUEEN)):
            self._gen_slider(sq, color, _BISHOP_RAYS[sq], moves)
            self._gen_slider(sq, color, _ROOK_RAYS[sq], moves)
        for sq in iter_bits(board.pieces_bitboard(color, PieceType.KING)):
            self._gen_leaper(sq, color, _KING_MASKS[sq], moves)
            self._gen_castling(sq, color, moves)
        return moves

    # -- Attack detection ------------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return self.is_square_attacked(self._board.king_square(color), color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        board = self._board
        if board.pieces_bitboard(by_color, PieceType.PAWN) & _PAWN_ATTACKERS[by_color][sq]:
            return True
        if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_MASKS[sq]:
            return True
        if board.pieces_bitboard(by_color, PieceType.KING) & _KING_MASKS[sq]:
            return True

        queens = board.pieces_bitboard(by_color, PieceType.QUEEN)
        diagonal = board.pieces_bitboard(by_color, PieceType.BISHOP) | queens
        if diagonal and self._ray_hits(_BISHOP_RAYS[sq], diagonal):
            return True
        straight = board.pieces_bitboard(by_color, PieceType.ROOK) | queens
        return bool(straight) and self._ray_hits(_ROOK_RAYS[sq], straight)

    def _ray_hits(self, rays: tuple[tuple[Square, ...], ...], attackers: int) -> bool:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                if board[to_sq] is None:
                    continue
                if attackers >> to_sq & 1:
                    return True
                break
        return False

    # -- Piece-specific generators -------------------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        step, start_rank, pre_promo_rank = _PAWN_GEOMETRY[color]
        rank_idx = sq >> 3
        file_idx = sq & 7
        promotes = rank_idx == pre_promo_rank

        one_step = sq + step
        if board.is_empty(one_step):
            self._add_pawn_move(sq, one_step, promotes, moves)
            if rank_idx == start_rank and board.is_empty(one_step + step):
                moves.append(Move(sq, one_step + step, MoveFlag.DOUBLE_PAWN))

        for df in (-1, 1):
            if not 0 <= file_idx + df < 8:
                continue
            cap_sq = one_step + df
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    self._add_pawn_move(sq, cap_sq, promotes, moves)
            elif cap_sq == self._pos.en_passant:
                moves.append(Move(sq, cap_sq, MoveFlag.EN_PASSANT))

    @staticmethod
    def _add_pawn_move(from_sq: Square, to_sq: Square, promotes: bool, moves: list[Move]) -> None:
        if promotes:
            for pt in PROMOTION_TYPES:
                moves.append(Move(from_sq, to_sq, MoveFlag.PROMOTION, pt))
        else:
            moves.append(Move(from_sq, to_sq))

    def _gen_leaper(self, sq: Square, color: Color, targets: int, moves: list[Move]) -> None:
        board = self._board
        for to_sq in iter_bits(targets & ~board.all_pieces_bitboard(color)):
            moves.append(Move(sq, to_sq))

    def _gen_slider(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        castling = self._pos.castling
        if not castling:
            return
        board = self._board
        home = color.back_rank * 8
        if king_sq != home + 4:
            return
        opponent = color.opposite
        in_check: bool | None = None

        for right, flag, empty_files, crossed_files in _CASTLING_PATHS[color]:
            if not castling & right:
                continue
            if any(not board.is_empty(home + f) for f in empty_files):
                continue
            if in_check is None:
                in_check = self.is_square_attacked(king_sq, opponent)
            if in_check:
                return
            if any(self.is_square_attacked(home + f, opponent) for f in crossed_files):
                continue
            moves.append(Move(king_sq, home + crossed_files[-1], flag))


def apply_move(position: Position, move: Move) -> Position:
    """Return the position after *move*, leaving *position* untouched.

    Raises:
        IllegalMoveError: *move* is not legal in *position*.
    """
    if move not in MoveGenerator(position).generate_legal_moves():
        raise IllegalMoveError(f"Illegal move {move} in this position")
    after = position.copy()
    after.make_move(move)
    return after
