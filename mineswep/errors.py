from __future__ import annotations


class GameError(ValueError):
    """Base for rejected game operations. ``str(err)`` is the error code."""

    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code


class InvalidTileIndex(GameError):
    def __init__(self, code: str = "out_of_bounds") -> None:
        super().__init__(code)


class IllegalOperation(GameError):
    pass


class MineFieldGenerationFailure(GameError):
    pass


class InvalidProfile(GameError):
    pass
