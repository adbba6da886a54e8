"""
Error hierarchy for the vertex isolation search core.

Rule queries never raise (an illegal move is simply reported as ``False``
by ``is_valid_move``); the exceptions below cover the conditions that are
not part of normal play.

Usage:
    from vertex_isolation.errors import SearchExhaustedError

    try:
        move = engine.search(state, player)
    except SearchExhaustedError:
        move = fallback(state, player)
"""

from typing import Any, Dict, Optional

__all__ = [
    'VertexIsolationError',
    'InvalidCoordinateKeyError',
    'InvalidConfigError',
    'SearchExhaustedError',
    'NoLegalMoveError',
    'IllegalMoveError',
]


class VertexIsolationError(Exception):
    """Base exception for all errors raised by this package.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        context: Extra debugging context
    """
    code: str = 'VERTEX_ISOLATION_ERROR'

    def __init__(self, message: str, code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ', '.join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code,
            'message': self.message,
            'context': self.context,
        }


class InvalidCoordinateKeyError(VertexIsolationError, ValueError):
    """A coordinate key string could not be parsed.

    Indicates corrupted data upstream (for example a broken serializer),
    never a condition of normal play.
    """
    code: str = 'INVALID_COORDINATE_KEY'

    def __init__(self, key: str):
        super().__init__(f"Invalid triangular coordinate key: {key!r}", context={'key': key})
        self.key = key


class InvalidConfigError(VertexIsolationError, ValueError):
    """Game configuration that cannot produce a playable board."""
    code: str = 'INVALID_CONFIG'


class SearchExhaustedError(VertexIsolationError):
    """The search finished without a single expanded root child.

    Happens when the budget runs out before the first expansion or when the
    search was started from a position without legal actions.
    """
    code: str = 'SEARCH_EXHAUSTED'

    def __init__(self, message: str = 'No moves available - MCTS search failed',
                 iterations: int = 0, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context=context)
        self.iterations = iterations
        self.context['iterations'] = iterations


class NoLegalMoveError(VertexIsolationError):
    """The player asked to move has neither a move nor a cut.

    The caller asked for a move in an already decided position.
    """
    code: str = 'NO_LEGAL_MOVE'


class IllegalMoveError(VertexIsolationError):
    """A bot answered with a move the rules engine rejects."""
    code: str = 'ILLEGAL_MOVE'
