"""Tests for FEN and SAN notation."""

import pytest

from kingside.core.enums import CastlingRights, Color, MoveFlag, PieceType
from kingside.core.errors import IllegalMoveError, InvalidPositionEncodingError
from kingside.core.move import Move
from kingside.core.move_generator import MoveGenerator
from kingside.core.notation import (
    STARTING_FEN,
    move_to_san,
    parse_san,
    position_from_fen,
    position_to_fen,
)
from kingside.core.piece import Piece
from kingside.core.position import Position
from kingside.core.types import E1, E2, E3, E4, E8, G1, parse_square


class TestFenParsing:
    def test_starting_position(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert pos.side_to_move == Color.WHITE
        assert pos.castling == CastlingRights.ALL
        assert pos.en_passant is None
        assert (pos.halfmove_clock, pos.fullmove_number) == (0, 1)
        assert pos.board[E1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[E8] == Piece(Color.BLACK, PieceType.KING)
        assert pos == Position.initial()

    def test_en_passant_square(self) -> None:
        pos = position_from_fen("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1")
        assert pos.en_passant == E3

    def test_partial_castling(self) -> None:
        pos = position_from_fen("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w Kq - 0 1")
        assert pos.castling == CastlingRights.WHITE_KINGSIDE | CastlingRights.BLACK_QUEENSIDE

    @pytest.mark.parametrize(
        "fen",
        [
            "",
            "not a fen",
            # five fields
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/RNBQKBNR w KQkq - 0 1",
            "rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
            "rnbqkbnr/ppppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
            "rnbqkbnr/pppppppp/7/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNX w KQkq - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkx - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KK - 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e3 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq z9 0 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - -1 1",
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 0",
        ],
    )
    def test_malformed_records(self, fen: str) -> None:
        with pytest.raises(InvalidPositionEncodingError):
            position_from_fen(fen)

    @pytest.mark.parametrize(
        "fen",
        [
            # no black king
            "8/8/8/8/8/8/8/4K3 w - - 0 1",
            # two white kings
            "4k3/8/8/8/8/8/8/3KK3 w - - 0 1",
            # pawn on the first rank
            "4k3/8/8/8/8/8/8/P3K3 w - - 0 1",
            # side not to move is in check
            "4k3/8/8/8/8/8/8/4R1K1 w - - 0 1",
            # castling rights without the rook in the corner
            "4k3/8/8/8/8/8/8/4K3 w K - 0 1",
            "4k3/8/8/8/8/8/8/R3K3 w K - 0 1",
            "r3k3/8/8/8/8/8/8/4K3 w q - 0 1",
            # castling right with the king off its square
            "4k3/8/8/8/8/8/8/R2K3R w KQ - 0 1",
            "r2k3r/8/8/8/8/8/8/4K3 b k - 0 1",
        ],
    )
    def test_unplayable_positions(self, fen: str) -> None:
        with pytest.raises(InvalidPositionEncodingError):
            position_from_fen(fen)

    def test_encoding_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            position_from_fen("bad")


class TestFenSerialisation:
    @pytest.mark.parametrize(
        "fen",
        [
            STARTING_FEN,
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
            "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1",
            "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1",
            "4k3/8/8/8/8/8/8/4K3 b - - 37 120",
        ],
    )
    def test_round_trip(self, fen: str) -> None:
        assert position_to_fen(position_from_fen(fen)) == fen

    def test_after_moves(self) -> None:
        pos = Position.initial()
        pos.make_move(Move(E2, E4, MoveFlag.DOUBLE_PAWN))
        assert (
            position_to_fen(pos)
            == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        )


class TestSan:
    def test_pawn_push_and_knight(self) -> None:
        pos = Position.initial()
        assert move_to_san(pos, Move(E2, E4, MoveFlag.DOUBLE_PAWN)) == "e4"
        assert move_to_san(pos, Move(G1, parse_square("f3"))) == "Nf3"

    def test_move_to_san_leaves_position_untouched(self) -> None:
        pos = Position.initial()
        move_to_san(pos, Move(E2, E4, MoveFlag.DOUBLE_PAWN))
        assert position_to_fen(pos) == STARTING_FEN

    def test_castling(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        assert move_to_san(pos, Move(E1, G1, MoveFlag.CASTLE_KINGSIDE)) == "O-O"
        assert move_to_san(pos, Move(E1, parse_square("c1"), MoveFlag.CASTLE_QUEENSIDE)) == "O-O-O"

    def test_file_disambiguation(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/1N2KN2 w - - 0 1")
        move = Move(parse_square("b1"), parse_square("d2"))
        assert move_to_san(pos, move) == "Nbd2"

    def test_rank_disambiguation(self) -> None:
        pos = position_from_fen("4k3/8/8/R7/8/8/8/R3K3 w - - 0 1")
        move = Move(parse_square("a1"), parse_square("a3"))
        assert move_to_san(pos, move) == "R1a3"

    def test_capture_promotion_with_check(self) -> None:
        pos = position_from_fen("3nk3/2P5/8/8/8/8/8/4K3 w - - 0 1")
        move = Move(parse_square("c7"), parse_square("d8"), MoveFlag.PROMOTION, PieceType.QUEEN)
        assert move_to_san(pos, move) == "cxd8=Q+"

    def test_checkmate_suffix(self) -> None:
        pos = position_from_fen("rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq g3 0 2")
        move = Move(parse_square("d8"), parse_square("h4"))
        assert move_to_san(pos, move) == "Qh4#"

    def test_parse_simple(self) -> None:
        pos = Position.initial()
        assert parse_san(pos, "e4") == Move(E2, E4, MoveFlag.DOUBLE_PAWN)
        assert parse_san(pos, "Nf3") == Move(G1, parse_square("f3"))

    def test_parse_zero_castling(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        assert parse_san(pos, "0-0").flag == MoveFlag.CASTLE_KINGSIDE
        assert parse_san(pos, "O-O-O").flag == MoveFlag.CASTLE_QUEENSIDE

    def test_parse_promotion_with_suffix(self) -> None:
        pos = position_from_fen("3nk3/2P5/8/8/8/8/8/4K3 w - - 0 1")
        move = parse_san(pos, "cxd8=N+")
        assert move.promotion == PieceType.KNIGHT

    @pytest.mark.parametrize("san", ["e5", "Ke2", "O-O", "Zz9", "", "Nd2"])
    def test_parse_rejects(self, san: str) -> None:
        with pytest.raises(IllegalMoveError):
            parse_san(Position.initial(), san)

    def test_parse_ambiguous(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/1N2KN2 w - - 0 1")
        with pytest.raises(IllegalMoveError, match="Ambiguous"):
            parse_san(pos, "Nd2")
        assert parse_san(pos, "Nfd2").from_sq == parse_square("f1")

    def test_round_trip_over_legal_moves(self) -> None:
        pos = position_from_fen(
            "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
        )
        for move in MoveGenerator(pos).generate_legal_moves():
            assert parse_san(pos, move_to_san(pos, move)) == move
