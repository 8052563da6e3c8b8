"""Exceptions raised by the game engine."""


class SnakeArcadeError(Exception):
    pass


class GridFullError(SnakeArcadeError):
    """No free cell is left on the board for a new food item."""
