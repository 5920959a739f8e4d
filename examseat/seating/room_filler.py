import logging
from typing import List, Sequence

from ..models import Room, RoomGroup, Student

LOG = logging.getLogger(__name__)


def effective_capacity(room: Room) -> int:
    """Seats that can actually be placed: capacity clamped to the grid."""
    return max(min(room.capacity, room.rows * room.columns), 0)


def total_capacity(rooms: Sequence[Room]) -> int:
    return sum(effective_capacity(r) for r in rooms)


def fill_rooms(students: Sequence[Student], rooms: Sequence[Room]) -> List[RoomGroup]:
    """Slice students into rooms in input order, each room filled once.

    Rooms after the point where students run out get no group. The caller
    checks total capacity first; students beyond it are simply not routed.
    """
    groups: List[RoomGroup] = []
    start = 0
    for room in rooms:
        if start >= len(students):
            break
        take = min(effective_capacity(room), len(students) - start)
        if take <= 0:
            continue
        groups.append(RoomGroup(room=room, students=list(students[start:start + take])))
        LOG.debug("Room %s takes students %d..%d", room.id, start, start + take - 1)
        start += take
    return groups
