import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence

from .errors import EmptyRoomSelection, ExamNotFound, UnknownRoom
from .models import ExamRoom, InvigilatorAssignment, Room, SeatAssignment, SeatingPattern, SeatPlan
from .repository import SeatPlanRepository
from .seating.generate import build_seat_plan
from .seating.validation import check_preconditions

LOG = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    exam_id: int
    pattern: SeatingPattern
    exam_rooms: List[ExamRoom] = field(default_factory=list)
    seat_assignments: List[SeatAssignment] = field(default_factory=list)
    invigilator_assignments: List[InvigilatorAssignment] = field(default_factory=list)

    @property
    def exam_rooms_count(self) -> int:
        return len(self.exam_rooms)

    @property
    def seat_assignments_count(self) -> int:
        return len(self.seat_assignments)

    @property
    def invigilator_assignments_count(self) -> int:
        return len(self.invigilator_assignments)

    def to_dict(self) -> Dict[str, int]:
        return {
            "success": True,
            "exam_rooms_count": self.exam_rooms_count,
            "seat_assignments_count": self.seat_assignments_count,
            "invigilator_assignments_count": self.invigilator_assignments_count,
        }


def resolve_rooms(repo: SeatPlanRepository, room_ids: Sequence[int]) -> List[Room]:
    """Rooms in the order the caller selected them."""
    if not room_ids:
        raise EmptyRoomSelection("Room IDs are required")
    by_id = {r.id: r for r in repo.get_rooms()}
    missing = [rid for rid in room_ids if rid not in by_id]
    if missing:
        raise UnknownRoom("Unknown room ids", {"room_ids": missing})
    seen = set()
    rooms = []
    for rid in room_ids:
        if rid not in seen:
            seen.add(rid)
            rooms.append(by_id[rid])
    return rooms


def persist_plan(repo: SeatPlanRepository, plan: SeatPlan) -> GenerationResult:
    """Store a plan, renumbering its exam rooms with repository ids."""
    result = GenerationResult(exam_id=plan.exam_id, pattern=plan.pattern)
    id_map: Dict[int, int] = {}
    for er in plan.exam_rooms:
        stored = repo.create_exam_room(plan.exam_id, er.room_id, plan.pattern)
        id_map[er.id] = stored.id
        result.exam_rooms.append(stored)
    result.seat_assignments = repo.create_seat_assignments(
        [replace(s, exam_room_id=id_map[s.exam_room_id]) for s in plan.seats])
    result.invigilator_assignments = repo.create_invigilator_assignments(
        [replace(r, exam_room_id=id_map[r.exam_room_id]) for r in plan.roles])
    return result


def generate_seat_plan(repo: SeatPlanRepository, exam_id: int, room_ids: Sequence[int],
                       pattern: Optional[str] = None, seed: Optional[int] = None) -> GenerationResult:
    """Seat an exam's department across the selected rooms and staff them.

    Every precondition is checked before the first write, so a failure
    leaves the repository untouched.
    """
    exam = repo.get_exam(exam_id)
    if exam is None:
        raise ExamNotFound("Exam not found", {"exam_id": exam_id})
    rooms = resolve_rooms(repo, room_ids)
    students = repo.get_students_by_department(exam.department_id)
    check_preconditions(students, rooms)

    staff = repo.get_invigilators()
    plan = build_seat_plan(exam.id, students, rooms, staff, pattern=pattern, seed=seed)
    result = persist_plan(repo, plan)
    LOG.info("Exam %s: %d rooms, %d seats, %d invigilator roles (%s)",
             exam.id, result.exam_rooms_count, result.seat_assignments_count,
             result.invigilator_assignments_count, plan.pattern.value)
    return result


def load_plan(repo: SeatPlanRepository, exam_id: int) -> SeatPlan:
    """Rebuild a stored plan, with the room and students of each exam room."""
    rooms = {r.id: r for r in repo.get_rooms()}
    students = {s.id: s for s in repo.get_students()}
    exam_rooms = repo.get_exam_rooms(exam_id)
    pattern = exam_rooms[0].seating_pattern if exam_rooms else SeatingPattern.LINEAR
    plan = SeatPlan(exam_id=exam_id, pattern=pattern, exam_rooms=exam_rooms)
    for er in exam_rooms:
        seats = repo.get_seat_assignments(er.id)
        plan.seats.extend(seats)
        plan.roles.extend(repo.get_invigilator_assignments(er.id))
        plan.groups[er.id] = (rooms[er.room_id], [students[s.student_id] for s in seats])
    return plan


def exam_room_details(repo: SeatPlanRepository, exam_id: int) -> List[dict]:
    """Each exam room of an exam with its seat and invigilator assignments."""
    rooms = {r.id: r for r in repo.get_rooms()}
    details = []
    for er in repo.get_exam_rooms(exam_id):
        details.append({
            "exam_room": er,
            "room": rooms.get(er.room_id),
            "seat_assignments": repo.get_seat_assignments(er.id),
            "invigilator_assignments": repo.get_invigilator_assignments(er.id),
        })
    return details
