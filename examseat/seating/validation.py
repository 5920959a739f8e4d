import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..errors import CapacityExceeded, DuplicateStudents, EmptyRoomSelection, NoStudentsFound, SeatPlanError
from ..models import Room, SeatPlan, Student
from .room_filler import effective_capacity, total_capacity

LOG = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    ok: bool = True
    reasons: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    # one error per failed reason, in the same order
    errors: List[SeatPlanError] = field(default_factory=list)

    def fail(self, reason: str, error: Optional[SeatPlanError] = None):
        self.ok = False
        self.reasons.append(reason)
        self.errors.append(error or SeatPlanError(reason))

    def warn(self, reason: str):
        self.warnings.append(reason)


def validate_room(room: Room) -> ValidationResult:
    """Shape errors fail; capacity above the grid only warns, it gets clamped."""
    res = ValidationResult()
    if room.rows < 1 or room.columns < 1:
        res.fail(f"room {room.id}: rows and columns must be positive")
    if room.capacity < 0:
        res.fail(f"room {room.id}: capacity must be non-negative")
    elif room.capacity > room.rows * room.columns:
        res.warn(f"room {room.id}: capacity {room.capacity} exceeds "
                 f"{room.rows}x{room.columns} grid; using {room.rows * room.columns}")
    return res


def validate_inputs(students: Sequence[Student], rooms: Sequence[Room]) -> ValidationResult:
    """Everything wrong with a request, without raising."""
    res = ValidationResult()
    if not rooms:
        res.fail("no rooms selected", EmptyRoomSelection("Room IDs are required"))
    if not students:
        res.fail("no students found", NoStudentsFound("No students found for this department"))
    ids = [s.id for s in students]
    if len(set(ids)) != len(ids):
        dupes = sorted({i for i in ids if ids.count(i) > 1})
        res.fail("duplicate student ids", DuplicateStudents("Duplicate students", {"student_ids": dupes}))
    if rooms and students:
        cap = total_capacity(rooms)
        if len(students) > cap:
            res.fail(f"{len(students)} students exceed total capacity {cap}",
                     CapacityExceeded("Not enough capacity in selected rooms",
                                      {"students_count": len(students), "total_capacity": cap}))
    return res


def check_preconditions(students: Sequence[Student], rooms: Sequence[Room]):
    """Raise the first SeatPlanError found before any plan is built."""
    res = validate_inputs(students, rooms)
    if not res.ok:
        LOG.warning("Seat plan rejected: %s", "; ".join(res.reasons))
        raise res.errors[0]


# ---------------------------------------------------------------------
# Plan checks
# ---------------------------------------------------------------------
def partition_ok(students: Sequence[Student], plan: SeatPlan) -> bool:
    placed = [s.student_id for s in plan.seats]
    return len(placed) == len(set(placed)) and set(placed) == {s.id for s in students}


def capacity_ok(plan: SeatPlan) -> bool:
    counts: Dict[int, int] = {}
    for s in plan.seats:
        counts[s.exam_room_id] = counts.get(s.exam_room_id, 0) + 1
    for er_id, (room, _) in plan.groups.items():
        if counts.get(er_id, 0) > effective_capacity(room):
            return False
    return True


def coordinates_ok(plan: SeatPlan) -> bool:
    """Seats stay inside the grid, never share a cell, numbered 1..k."""
    for er_id, (room, group) in plan.groups.items():
        seats = plan.seats_for(er_id)
        if len(seats) != len(group):
            return False
        cells: Set[Tuple[int, int]] = set()
        for s in seats:
            if not (1 <= s.row <= room.rows and 1 <= s.column <= room.columns):
                return False
            cells.add((s.row, s.column))
        if len(cells) != len(seats):
            return False
        if sorted(s.seat_number for s in seats) != list(range(1, len(seats) + 1)):
            return False
        if {s.student_id for s in seats} != {st.id for st in group}:
            return False
    return True


def roles_ok(plan: SeatPlan) -> bool:
    for er in plan.exam_rooms:
        roles = [r.role for r in plan.roles_for(er.id)]
        if len(roles) != len(set(roles)):
            return False
    return True
