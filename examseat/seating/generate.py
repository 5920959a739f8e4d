import logging
import random
from typing import Iterable, Optional, Sequence, Union

from ..models import ExamRoom, Invigilator, Room, SeatAssignment, SeatingPattern, SeatPlan, Student
from .invigilation import assign_roles
from .patterns import generate_coordinates
from .room_filler import fill_rooms

LOG = logging.getLogger(__name__)


def build_seat_plan(exam_id: int,
                    students: Sequence[Student],
                    rooms: Sequence[Room],
                    staff: Iterable[Invigilator] = (),
                    pattern: Union[SeatingPattern, str, None] = SeatingPattern.LINEAR,
                    seed: Optional[int] = None,
                    first_exam_room_id: int = 1) -> SeatPlan:
    """Route students to rooms, seat them, and staff every used room.

    Pure: no I/O, inputs are not mutated. Exam room ids are numbered from
    `first_exam_room_id` in room order; a persistence layer may renumber
    them. Only rooms that receive at least one student get an exam room.
    """
    p = SeatingPattern.parse(pattern)
    plan = SeatPlan(exam_id=exam_id, pattern=p)
    # one generator for the whole run so randomized rooms differ from each other
    rng = random.Random(seed)

    for offset, group in enumerate(fill_rooms(students, rooms)):
        er = ExamRoom(id=first_exam_room_id + offset, exam_id=exam_id,
                      room_id=group.room.id, seating_pattern=p)
        coords = generate_coordinates(group.room.rows, group.room.columns,
                                      len(group.students), p, rng=rng)
        for k, (student, seat) in enumerate(zip(group.students, coords)):
            plan.seats.append(SeatAssignment(exam_room_id=er.id, student_id=student.id,
                                             seat_number=k + 1, row=seat.row, column=seat.column))
        plan.exam_rooms.append(er)
        plan.groups[er.id] = (group.room, group.students)
        LOG.debug("Exam room %d (room %s): %d seats, pattern %s",
                  er.id, group.room.id, len(coords), p.value)

    plan.roles = assign_roles(plan.exam_rooms, staff)
    return plan
