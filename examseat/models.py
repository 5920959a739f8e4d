import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

LOG = logging.getLogger(__name__)


class SeatingPattern(str, Enum):
    LINEAR = "linear"
    SERPENTINE = "serpentine"
    BLOCK = "block"
    RANDOMIZED = "randomized"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SeatingPattern":
        """Resolve a pattern name; missing or unknown names mean LINEAR."""
        if isinstance(value, cls):
            return value
        if value:
            name = str(value).strip().lower()
            for p in cls:
                if p.value == name:
                    return p
            LOG.warning("Unknown seating pattern %r; using linear", value)
        return cls.LINEAR


class Rank(str, Enum):
    CHIEF = "Chief Instructor"
    MAIN = "Instructor"
    JUNIOR = "Junior Instructor"


class Role(str, Enum):
    CHIEF = "chief"
    MAIN = "main"
    JUNIOR = "junior"


# role slot filled from each rank's pool, in assignment order
ROLE_FOR_RANK: Dict[Rank, Role] = {
    Rank.CHIEF: Role.CHIEF,
    Rank.MAIN: Role.MAIN,
    Rank.JUNIOR: Role.JUNIOR,
}


@dataclass
class Department:
    id: int
    code: str
    name: str
    description: Optional[str] = None


@dataclass
class Building:
    id: int
    name: str
    code: str


@dataclass
class Room:
    id: int
    capacity: int
    rows: int
    columns: int
    number: str = ""
    name: str = ""
    building_id: Optional[int] = None
    floor: int = 0
    room_type: str = "standard"  # standard, hall, conference
    is_active: bool = True

    @property
    def cells(self) -> int:
        return self.rows * self.columns


@dataclass
class Student:
    id: int
    roll_number: str
    department_id: int
    name: str = ""
    is_active: bool = True


@dataclass
class Invigilator:
    id: int
    rank: Rank
    name: str = ""
    department_id: Optional[int] = None
    is_active: bool = True


@dataclass
class Exam:
    id: int
    name: str
    department_id: int
    date: Optional[str] = None  # ISO-like string for display
    shift: str = "1st"
    course: str = ""


@dataclass
class ExamRoom:
    """One room booked for one exam; seats and roles attach to it."""
    id: int
    exam_id: int
    room_id: int
    seating_pattern: SeatingPattern = SeatingPattern.LINEAR


@dataclass(frozen=True)
class SeatCoordinate:
    row: int  # 1-indexed
    column: int


@dataclass
class SeatAssignment:
    exam_room_id: int
    student_id: int
    seat_number: int
    row: int
    column: int


@dataclass
class InvigilatorAssignment:
    exam_room_id: int
    invigilator_id: int
    role: Role


@dataclass
class RoomGroup:
    room: Room
    students: List[Student] = field(default_factory=list)


@dataclass
class SeatPlan:
    exam_id: int
    pattern: SeatingPattern
    exam_rooms: List[ExamRoom] = field(default_factory=list)
    seats: List[SeatAssignment] = field(default_factory=list)
    roles: List[InvigilatorAssignment] = field(default_factory=list)
    # exam_room_id -> (room, students routed there)
    groups: Dict[int, Tuple[Room, List[Student]]] = field(default_factory=dict)

    def seats_for(self, exam_room_id: int) -> List[SeatAssignment]:
        return [s for s in self.seats if s.exam_room_id == exam_room_id]

    def roles_for(self, exam_room_id: int) -> List[InvigilatorAssignment]:
        return [r for r in self.roles if r.exam_room_id == exam_room_id]
