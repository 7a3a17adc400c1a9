"""Error taxonomy of the session engine.

None of these are retried by the engine; callers decide what to surface.
"""


class GameEngineError(Exception):
    """Base class for engine failures"""


class NotFound(GameEngineError):
    """A session or action id does not exist"""


class PreconditionFailed(GameEngineError):
    """Missing configuration: no reward table or no active rooms"""


class InvalidArgument(GameEngineError):
    """Unrecognized action type"""


class InvalidState(GameEngineError):
    """An action was submitted to a session that cannot continue"""
