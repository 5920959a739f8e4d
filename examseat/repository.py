"""Catalog and persistence for seat plans.

`SeatPlanRepository` is the interface the request handler depends on;
`InMemoryRepository` is the implementation used by the CLI, the UI and the
tests. The engine in `examseat.seating` never sees a repository.
"""
import logging
import random
from dataclasses import replace
from typing import Dict, List, Optional, Protocol, Sequence

from .config import SEED_DATA_SEED
from .seating.validation import validate_room
from .models import (
    Building, Department, Exam, ExamRoom, Invigilator, InvigilatorAssignment,
    Rank, Room, SeatAssignment, SeatingPattern, Student,
)

LOG = logging.getLogger(__name__)


class SeatPlanRepository(Protocol):
    # catalog
    def get_departments(self) -> List[Department]: ...
    def get_department_by_code(self, code: str) -> Optional[Department]: ...
    def get_buildings(self) -> List[Building]: ...
    def get_rooms(self) -> List[Room]: ...
    def get_rooms_by_building(self, building_id: int) -> List[Room]: ...
    def get_invigilators(self) -> List[Invigilator]: ...
    def get_students(self) -> List[Student]: ...
    def get_students_by_department(self, department_id: int) -> List[Student]: ...
    def get_exams(self) -> List[Exam]: ...
    def get_exam(self, exam_id: int) -> Optional[Exam]: ...

    # writes
    def create_exam(self, exam: Exam) -> Exam: ...
    def create_exam_room(self, exam_id: int, room_id: int, pattern: SeatingPattern) -> ExamRoom: ...
    def create_seat_assignments(self, seats: Sequence[SeatAssignment]) -> List[SeatAssignment]: ...
    def create_invigilator_assignments(self, roles: Sequence[InvigilatorAssignment]) -> List[InvigilatorAssignment]: ...

    # plan reads
    def get_exam_rooms(self, exam_id: int) -> List[ExamRoom]: ...
    def get_seat_assignments(self, exam_room_id: int) -> List[SeatAssignment]: ...
    def get_invigilator_assignments(self, exam_room_id: int) -> List[InvigilatorAssignment]: ...


class InMemoryRepository:
    def __init__(self):
        self.departments: Dict[int, Department] = {}
        self.buildings: Dict[int, Building] = {}
        self.rooms: Dict[int, Room] = {}
        self.invigilators: Dict[int, Invigilator] = {}
        self.students: Dict[int, Student] = {}
        self.exams: Dict[int, Exam] = {}
        self.exam_rooms: Dict[int, ExamRoom] = {}
        self.seat_assignments: List[SeatAssignment] = []
        self.invigilator_assignments: List[InvigilatorAssignment] = []

    @staticmethod
    def _next_id(table: Dict[int, object]) -> int:
        return max(table, default=0) + 1

    # -----------------------------------------------------------------
    # Catalog
    # -----------------------------------------------------------------
    def get_departments(self) -> List[Department]:
        return sorted(self.departments.values(), key=lambda d: d.code)

    def get_department_by_code(self, code: str) -> Optional[Department]:
        code = code.strip().upper()
        for d in self.departments.values():
            if d.code.upper() == code:
                return d
        return None

    def create_department(self, code: str, name: str, description: Optional[str] = None) -> Department:
        dept = Department(id=self._next_id(self.departments), code=code, name=name, description=description)
        self.departments[dept.id] = dept
        return dept

    def get_buildings(self) -> List[Building]:
        return sorted(self.buildings.values(), key=lambda b: b.name)

    def create_building(self, name: str, code: str) -> Building:
        b = Building(id=self._next_id(self.buildings), name=name, code=code)
        self.buildings[b.id] = b
        return b

    def _room_sort_key(self, room: Room):
        building = self.buildings.get(room.building_id)
        return (building.name if building else "", room.number)

    def get_rooms(self) -> List[Room]:
        return sorted(self.rooms.values(), key=self._room_sort_key)

    def get_rooms_by_building(self, building_id: int) -> List[Room]:
        return sorted((r for r in self.rooms.values() if r.building_id == building_id),
                      key=lambda r: r.number)

    def add_room(self, room: Room) -> Room:
        """Rooms with an impossible shape are rejected; oversized capacity only warns."""
        check = validate_room(room)
        if not check.ok:
            raise ValueError("; ".join(check.reasons))
        for w in check.warnings:
            LOG.warning("%s", w)
        if not room.id or room.id in self.rooms:
            room = replace(room, id=self._next_id(self.rooms))
        self.rooms[room.id] = room
        return room

    def get_invigilators(self) -> List[Invigilator]:
        """Active staff, ordered by designation then name."""
        active = [i for i in self.invigilators.values() if i.is_active]
        return sorted(active, key=lambda i: (Rank(i.rank).value, i.name))

    def add_invigilator(self, inv: Invigilator) -> Invigilator:
        if not inv.id or inv.id in self.invigilators:
            inv = replace(inv, id=self._next_id(self.invigilators))
        self.invigilators[inv.id] = inv
        return inv

    def get_students(self) -> List[Student]:
        active = [s for s in self.students.values() if s.is_active]
        return sorted(active, key=lambda s: s.roll_number)

    def get_students_by_department(self, department_id: int) -> List[Student]:
        return [s for s in self.get_students() if s.department_id == department_id]

    def create_students(self, students: Sequence[Student]) -> List[Student]:
        """Batch insert; roll numbers are unique across the catalog."""
        taken = {s.roll_number for s in self.students.values()}
        batch = [s.roll_number for s in students]
        dupes = (taken & set(batch)) | {r for r in batch if batch.count(r) > 1}
        if dupes:
            raise ValueError(f"Duplicate roll numbers: {sorted(dupes)}")
        out = []
        for s in students:
            if not s.id or s.id in self.students:
                s = replace(s, id=self._next_id(self.students))
            self.students[s.id] = s
            out.append(s)
        return out

    def get_exams(self) -> List[Exam]:
        return sorted(self.exams.values(), key=lambda e: e.id, reverse=True)

    def get_exam(self, exam_id: int) -> Optional[Exam]:
        return self.exams.get(exam_id)

    def create_exam(self, exam: Exam) -> Exam:
        if not exam.id or exam.id in self.exams:
            exam = replace(exam, id=self._next_id(self.exams))
        self.exams[exam.id] = exam
        return exam

    # -----------------------------------------------------------------
    # Plans
    # -----------------------------------------------------------------
    def create_exam_room(self, exam_id: int, room_id: int, pattern: SeatingPattern) -> ExamRoom:
        er = ExamRoom(id=self._next_id(self.exam_rooms), exam_id=exam_id,
                      room_id=room_id, seating_pattern=pattern)
        self.exam_rooms[er.id] = er
        return er

    def create_seat_assignments(self, seats: Sequence[SeatAssignment]) -> List[SeatAssignment]:
        self.seat_assignments.extend(seats)
        return list(seats)

    def create_invigilator_assignments(self, roles: Sequence[InvigilatorAssignment]) -> List[InvigilatorAssignment]:
        self.invigilator_assignments.extend(roles)
        return list(roles)

    def get_exam_rooms(self, exam_id: int) -> List[ExamRoom]:
        return [er for er in self.exam_rooms.values() if er.exam_id == exam_id]

    def get_seat_assignments(self, exam_room_id: int) -> List[SeatAssignment]:
        return [s for s in self.seat_assignments if s.exam_room_id == exam_room_id]

    def get_invigilator_assignments(self, exam_room_id: int) -> List[InvigilatorAssignment]:
        return [r for r in self.invigilator_assignments if r.exam_room_id == exam_room_id]

    # -----------------------------------------------------------------
    # Demo catalog
    # -----------------------------------------------------------------
    def initialize_data(self, seed: int = SEED_DATA_SEED):
        """Load the demo campus catalog once; a no-op if departments exist."""
        if self.departments:
            return
        rng = random.Random(seed)
        depts = [
            self.create_department("CST", "Computer Science & Technology", "Computer Science and Technology Department"),
            self.create_department("CT", "Civil Technology", "Civil Technology Department"),
            self.create_department("PT", "Power Technology", "Power Technology Department"),
            self.create_department("ET", "Electrical Technology", "Electrical Technology Department"),
            self.create_department("ENT", "Electronics Technology", "Electronics Technology Department"),
            self.create_department("EMT", "Electro Medical Technology", "Electro Medical Technology Department"),
        ]
        b1 = self.create_building("Building 1", "B1")
        b2 = self.create_building("Building 2", "B2")

        def standard(building, floor, number):
            # 8x8 grid holds at most 64
            self.add_room(Room(id=0, capacity=rng.randint(50, 64), rows=8, columns=8,
                               number=number, name=f"Room {number}",
                               building_id=building.id, floor=floor))

        for i in range(1, 36):
            standard(b1, 0, f"11{i:02d}")
        for i in range(2, 36):
            number = f"12{i:02d}"
            if number == "1219":
                self.add_room(Room(id=0, capacity=105, rows=12, columns=9, number=number,
                                   name=f"Room {number}", building_id=b1.id, floor=1,
                                   room_type="conference"))
            else:
                standard(b1, 1, number)
        for suffix in ("A", "B"):
            self.add_room(Room(id=0, capacity=50, rows=7, columns=8, number=f"1201-{suffix}",
                               name=f"Class 1201-{suffix}", building_id=b1.id, floor=1))
        for i in range(1, 35):
            standard(b1, 2, f"13{i:02d}")
        for suffix in ("A", "B"):
            self.add_room(Room(id=0, capacity=70, rows=9, columns=8, number=f"1335-{suffix}",
                               name=f"Hall 1335-{suffix}", building_id=b1.id, floor=2,
                               room_type="hall"))
        for floor, count in ((0, 20), (1, 19), (2, 19)):
            for i in range(1, count + 1):
                standard(b2, floor, f"2{floor + 1}{i:02d}")

        staff = [
            ("Sarah Ahmed", "Michael Johnson", "Lisa Chen"),
            ("David Wilson", "Emma Davis", "James Brown"),
            ("Maria Rodriguez", "Robert Taylor", "Jennifer Wilson"),
            ("Ahmed Khan", "Fatima Ali", "Hassan Mahmood"),
            ("Ayesha Rehman", "Omar Farooq", "Zara Sheikh"),
            ("Ali Raza", "Nadia Iqbal", "Usman Ahmed"),
        ]
        for dept, names in zip(depts, staff):
            for rank, name in zip((Rank.CHIEF, Rank.MAIN, Rank.JUNIOR), names):
                self.add_invigilator(Invigilator(id=0, rank=rank, name=name, department_id=dept.id))
        LOG.info("Seeded %d departments, %d rooms, %d invigilators",
                 len(self.departments), len(self.rooms), len(self.invigilators))
