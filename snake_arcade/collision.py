"""Wall and self collision checks."""

from .grid import Grid

# Segments closer to the head than this cannot overlap it.
SELF_COLLISION_START = 4


def hits_self(segments: list) -> bool:
    head = segments[0]
    for i in range(SELF_COLLISION_START, len(segments)):
        if segments[i] == head:
            return True
    return False


def hits_wall(segments: list, grid: Grid) -> bool:
    x, y = segments[0]
    return (
        x < 0
        or y < 0
        or x > grid.width - grid.cell_size
        or y > grid.height - grid.cell_size
    )


def check_collision(segments: list, grid: Grid, ignore_collisions: bool = False) -> bool:
    if ignore_collisions or not segments:
        return False
    return hits_self(segments) or hits_wall(segments, grid)
