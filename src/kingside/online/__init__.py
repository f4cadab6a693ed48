"""Online play: typed room-service messages and the session link."""

from kingside.online.link import MultiplayerLink
from kingside.online.messages import (
    CreateRoom,
    DrawDeclined,
    DrawOffered,
    Error,
    GameEnded,
    InboundMessage,
    JoinRoom,
    LeaveRoom,
    MakeMove,
    Message,
    MoveMade,
    OfferDraw,
    OutboundMessage,
    PlayerJoined,
    PlayerLeft,
    Rematch,
    ReportResult,
    Resign,
    RoomCreated,
    RoomJoined,
    RoomPlayer,
    generate_room_code,
    is_valid_room_code,
    message_from_dict,
    message_to_dict,
)

__all__ = [
    "MultiplayerLink",
    # Inbound
    "DrawDeclined",
    "DrawOffered",
    "Error",
    "GameEnded",
    "MoveMade",
    "PlayerJoined",
    "PlayerLeft",
    "RoomCreated",
    "RoomJoined",
    # Outbound
    "CreateRoom",
    "JoinRoom",
    "LeaveRoom",
    "MakeMove",
    "OfferDraw",
    "Rematch",
    "ReportResult",
    "Resign",
    # Shared
    "InboundMessage",
    "Message",
    "OutboundMessage",
    "RoomPlayer",
    "generate_room_code",
    "is_valid_room_code",
    "message_from_dict",
    "message_to_dict",
]
