"""Tests for the room-service message codec."""

from __future__ import annotations

from typing import Any

import pytest

from kingside.core.enums import Color
from kingside.core.errors import InvalidMessageError
from kingside.game.result import EndReason, GameResult
from kingside.online.messages import (
    CreateRoom,
    DrawOffered,
    GameEnded,
    JoinRoom,
    MakeMove,
    MoveMade,
    PlayerLeft,
    ReportResult,
    Resign,
    RoomCreated,
    RoomPlayer,
    generate_room_code,
    is_inbound,
    is_valid_room_code,
    message_from_dict,
    message_to_dict,
)


def _player_joined(**player: str) -> dict[str, Any]:
    return {"event": "player_joined", "data": {"player": player}}


def _game_ended(**result: str) -> dict[str, Any]:
    return {"event": "game_ended", "data": {"result": result}}


class TestRoomCodes:
    def test_generated_codes_are_valid(self) -> None:
        codes = {generate_room_code() for _ in range(50)}
        assert all(is_valid_room_code(code) for code in codes)
        assert len(codes) > 1

    @pytest.mark.parametrize("code", ["ABC123", "ZZZZZZ", "000000"])
    def test_valid(self, code: str) -> None:
        assert is_valid_room_code(code)

    @pytest.mark.parametrize("code", ["abc123", "ABC12", "ABC1234", "ABC-12", "", None, 123456])
    def test_invalid(self, code: object) -> None:
        assert not is_valid_room_code(code)

    def test_create_room_generates_code(self) -> None:
        assert is_valid_room_code(CreateRoom().room_code)

    def test_messages_reject_bad_codes(self) -> None:
        with pytest.raises(InvalidMessageError):
            JoinRoom("nope")
        with pytest.raises(InvalidMessageError):
            RoomCreated(room_id="r1", room_code="abc")


class TestMoveMessages:
    def test_valid_move(self) -> None:
        move = MakeMove(room_id="r1", player_id="p1", from_sq="e7", to_sq="e8", promotion="q")
        assert move.promotion == "q"

    @pytest.mark.parametrize(
        ("from_sq", "to_sq", "promotion"),
        [
            ("e9", "e4", None),
            ("e2", "i4", None),
            ("e2", "e2", None),
            ("e7", "e8", "k"),
            ("e7", "e8", "Q"),
        ],
    )
    def test_invalid_move(self, from_sq: str, to_sq: str, promotion: str | None) -> None:
        with pytest.raises(InvalidMessageError):
            MoveMade("r1", "p1", from_sq, to_sq, promotion)

    def test_inbound_classification(self) -> None:
        assert is_inbound(PlayerLeft("p2"))
        assert not is_inbound(Resign("r1"))


class TestRecordCodec:
    def test_move_record_shape(self) -> None:
        record = message_to_dict(MakeMove("r1", "p1", "e2", "e4"))
        assert record == {
            "event": "make_move",
            "data": {
                "room_id": "r1",
                "player_id": "p1",
                "from_sq": "e2",
                "to_sq": "e4",
                "promotion": None,
            },
        }

    def test_result_record_shape(self) -> None:
        result = GameResult.win_for(Color.BLACK, EndReason.TIMEOUT)
        record = message_to_dict(ReportResult("r1", result))
        assert record["data"]["result"] == {
            "result": "loss",
            "reason": "timeout",
            "winner": "black",
        }
        assert message_from_dict(record) == ReportResult("r1", result)

    def test_players_round_trip(self) -> None:
        message = RoomCreated(
            room_id="r1",
            room_code="ABC123",
            players=(RoomPlayer("p1", "Alice", Color.WHITE), RoomPlayer("p2", "Bob", Color.BLACK)),
        )
        record = message_to_dict(message)
        assert record["data"]["players"][0] == {"id": "p1", "name": "Alice", "color": "white"}
        assert message_from_dict(record) == message

    def test_draw_result_round_trip(self) -> None:
        message = GameEnded(GameResult.draw(EndReason.STALEMATE))
        decoded = message_from_dict(message_to_dict(message))
        assert isinstance(decoded, GameEnded)
        assert decoded.result.is_draw
        assert decoded.result.reason == EndReason.STALEMATE

    def test_optional_field_may_be_omitted(self) -> None:
        data = {"room_id": "r1", "player_id": "p2", "from_sq": "g8", "to_sq": "f6"}
        decoded = message_from_dict({"event": "move_made", "data": data})
        assert decoded == MoveMade("r1", "p2", "g8", "f6")

    def test_extra_fields_ignored(self) -> None:
        decoded = message_from_dict(
            {"event": "draw_offered", "data": {"from_player_id": "p2", "extra": 1}}
        )
        assert decoded == DrawOffered("p2")

    @pytest.mark.parametrize(
        "record",
        [
            None,
            [],
            {},
            {"event": "teleport", "data": {}},
            {"event": 3, "data": {}},
            {"event": "resign", "data": "r1"},
            {"event": "resign", "data": {}},
            {"event": "resign", "data": {"room_id": 5}},
            {"event": "join_room", "data": {"room_code": "short"}},
            {"event": "move_made", "data": {"room_id": "r1", "player_id": "p", "from_sq": "e2"}},
            _player_joined(id="p", name="X", color="red"),
            _player_joined(id="", name="X", color="white"),
            {"event": "player_joined", "data": {"player": "p"}},
            {"event": "room_joined", "data": {"room_id": "r", "room_code": "ABC123", "players": 1}},
            _game_ended(result="win", reason="stalemate", winner="white"),
            _game_ended(result="draw", reason="draw", winner="white"),
            _game_ended(result="best", reason="draw"),
            {"event": "game_ended", "data": {"result": "1-0"}},
        ],
    )
    def test_rejects_malformed_records(self, record: Any) -> None:
        with pytest.raises(InvalidMessageError):
            message_from_dict(record)
