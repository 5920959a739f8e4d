import csv
import io
import os
from typing import IO, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from .config import rank_of
from .models import Invigilator, InvigilatorAssignment, Room, SeatAssignment, Student
from .repository import InMemoryRepository

TextOrPath = Union[str, os.PathLike, IO]


def _open_text(src: TextOrPath):
    """Return a text-mode file handle and a flag indicating whether to close it.

    Accepts a filesystem path, a text IO object, or a BytesIO buffer.
    Ensures CSV readers get strings, not bytes.
    """
    if isinstance(src, (str, os.PathLike)):
        f = open(src, 'r', newline='', encoding='utf-8-sig')
        return f, True
    if isinstance(src, io.BytesIO):
        src.seek(0)
        f = io.TextIOWrapper(src, encoding='utf-8-sig', newline='')
        return f, True
    if hasattr(src, 'read'):
        if hasattr(src, 'seek'):
            src.seek(0)
        return src, False
    raise TypeError("Unsupported input type; expected path or file-like object")


def _norm(key: str) -> str:
    return str(key).strip().lower().replace(' ', '_')


def _rows(src: TextOrPath) -> List[Dict[str, str]]:
    """CSV rows with headers normalised ("Roll Number" -> roll_number)."""
    f, should_close = _open_text(src)
    try:
        r = csv.DictReader(f)
        return [{_norm(k): (v or '').strip() for k, v in row.items() if k is not None}
                for row in r if any((v or '').strip() for v in row.values() if isinstance(v, str))]
    finally:
        if should_close:
            f.close()


def load_rooms(src: TextOrPath) -> List[Room]:
    """rooms.csv with id,capacity,rows,columns and optional number,name."""
    rooms: List[Room] = []
    for row in _rows(src):
        rid = int(row['id'])
        rooms.append(Room(
            id=rid,
            capacity=int(row['capacity']),
            rows=int(row['rows']),
            columns=int(row['columns']),
            number=row.get('number') or str(rid),
            name=row.get('name', ''),
        ))
    return rooms


def load_student_rows(src: TextOrPath) -> List[Dict[str, str]]:
    """Student roster: Roll Number, Name, Department Code."""
    out = []
    for row in _rows(src):
        out.append({
            'roll_number': row['roll_number'],
            'name': row.get('name', ''),
            'department_code': row['department_code'].upper(),
        })
    return out


def students_from_rows(rows: Iterable[Mapping[str, str]], department_ids: Mapping[str, int]) -> List[Student]:
    students: List[Student] = []
    for i, row in enumerate(rows, start=1):
        code = row['department_code']
        if code not in department_ids:
            raise ValueError(f"Unknown department code {code!r} for roll {row['roll_number']}")
        students.append(Student(id=i, roll_number=row['roll_number'], name=row.get('name', ''),
                                department_id=department_ids[code]))
    return students


def load_invigilators(src: TextOrPath, department_ids: Optional[Mapping[str, int]] = None) -> List[Invigilator]:
    """Staff roster: name, designation and optional id, department_code."""
    staff: List[Invigilator] = []
    for i, row in enumerate(_rows(src), start=1):
        code = row.get('department_code', '').upper()
        staff.append(Invigilator(
            id=int(row['id']) if row.get('id') else i,
            rank=rank_of(row['designation']),
            name=row.get('name', ''),
            department_id=(department_ids or {}).get(code),
        ))
    return staff


def save_seating_csv(path: TextOrPath, seats: Sequence[SeatAssignment],
                     rooms_by_exam_room: Mapping[int, Room], students: Mapping[int, Student]):
    def write(f):
        w = csv.writer(f)
        w.writerow(['room', 'seat_number', 'row', 'column', 'roll_number', 'name'])
        for s in seats:
            room = rooms_by_exam_room[s.exam_room_id]
            st = students[s.student_id]
            w.writerow([room.number or room.id, s.seat_number, s.row, s.column, st.roll_number, st.name])

    if hasattr(path, 'write'):
        write(path)
    else:
        with open(path, 'w', newline='') as f:
            write(f)


def save_invigilation_csv(path: TextOrPath, roles: Sequence[InvigilatorAssignment],
                          rooms_by_exam_room: Mapping[int, Room], staff: Mapping[int, Invigilator]):
    def write(f):
        w = csv.writer(f)
        w.writerow(['room', 'role', 'invigilator_id', 'name', 'designation'])
        for r in roles:
            room = rooms_by_exam_room[r.exam_room_id]
            inv = staff[r.invigilator_id]
            w.writerow([room.number or room.id, r.role.value, inv.id, inv.name, inv.rank.value])

    if hasattr(path, 'write'):
        write(path)
    else:
        with open(path, 'w', newline='') as f:
            write(f)


def seating_grid(room: Room, seats: Sequence[SeatAssignment], students: Mapping[int, Student]) -> pd.DataFrame:
    """rows x columns frame of roll numbers; empty cells hold "--"."""
    grid = pd.DataFrame('--', index=range(1, room.rows + 1), columns=range(1, room.columns + 1))
    for s in seats:
        grid.at[s.row, s.column] = students[s.student_id].roll_number
    grid.index.name = 'row'
    grid.columns.name = 'column'
    return grid


def build_repository(rooms: Optional[TextOrPath] = None, students: Optional[TextOrPath] = None,
                     staff: Optional[TextOrPath] = None, demo: bool = False) -> InMemoryRepository:
    """Catalog from rosters; the demo campus is only loaded when no rooms file is given."""
    repo = InMemoryRepository()
    if rooms is not None:
        for room in load_rooms(rooms):
            repo.add_room(room)
    elif demo:
        repo.initialize_data()
    if students is not None:
        rows = load_student_rows(students)
        for code in dict.fromkeys(r['department_code'] for r in rows):
            if repo.get_department_by_code(code) is None:
                repo.create_department(code, code)
        dept_ids = {d.code.upper(): d.id for d in repo.get_departments()}
        repo.create_students(students_from_rows(rows, dept_ids))
    if staff is not None:
        dept_ids = {d.code.upper(): d.id for d in repo.get_departments()}
        for inv in load_invigilators(staff, dept_ids):
            repo.add_invigilator(inv)
    return repo
