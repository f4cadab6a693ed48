"""Exception hierarchy for recoverable chess errors.

Every error here is local and recoverable: the object that raised it is left
exactly as it was before the call.  Broken invariants (a missing king, a
corrupted undo stack) are programming defects and surface as ``AssertionError``
instead.
"""

from __future__ import annotations


class ChessError(Exception):
    """Base class for all recoverable errors raised by ``kingside``."""


class IllegalMoveError(ChessError, ValueError):
    """A move failed the legality check for the current position."""


class InvalidSquareError(ChessError, ValueError):
    """A square name or index is outside the 8x8 board."""


class InvalidPositionEncodingError(ChessError, ValueError):
    """A FEN record is malformed or describes an impossible position."""


class InvalidStateTransitionError(ChessError, RuntimeError):
    """The session cannot perform the requested operation in its current phase."""


class PendingPromotionError(InvalidStateTransitionError):
    """A promotion choice must be resolved before anything else is played."""


class InvalidSettingsError(ChessError, ValueError):
    """Game settings are incomplete or out of range."""


class InvalidMessageError(ChessError, ValueError):
    """A multiplayer message record could not be decoded."""
