import io

import pytest

from examseat.io_utils import (
    build_repository, load_invigilators, load_rooms, load_student_rows, save_invigilation_csv,
    save_seating_csv, seating_grid, students_from_rows,
)
from examseat.models import Invigilator, InvigilatorAssignment, Rank, Role, Room, SeatAssignment, Student


def test_load_rooms_from_bytes():
    data = b"id,capacity,rows,columns,number\n1,50,7,8,1201-A\n2,6,2,3,\n"
    rooms = load_rooms(io.BytesIO(data))
    assert rooms[0] == Room(id=1, capacity=50, rows=7, columns=8, number="1201-A", name="")
    assert rooms[1].number == "2"


def test_load_students_normalises_headers():
    data = "Roll Number,Name,Department Code\nCST-001,Asha,cst\n\nCT-001,Bilal,CT\n"
    rows = load_student_rows(io.StringIO(data))
    assert rows == [
        {"roll_number": "CST-001", "name": "Asha", "department_code": "CST"},
        {"roll_number": "CT-001", "name": "Bilal", "department_code": "CT"},
    ]
    students = students_from_rows(rows, {"CST": 1, "CT": 2})
    assert [(s.id, s.department_id) for s in students] == [(1, 1), (2, 2)]


def test_unknown_department_code():
    with pytest.raises(ValueError):
        students_from_rows([{"roll_number": "X", "department_code": "ZZ"}], {"CST": 1})


def test_missing_column_raises():
    with pytest.raises(KeyError):
        load_student_rows(io.StringIO("Name\nAsha\n"))


def test_load_invigilators_maps_designations(tmp_path):
    path = tmp_path / "staff.csv"
    path.write_text("name,designation,department_code\n"
                    "Sarah Ahmed,Chief Instructor,CST\n"
                    "Lisa Chen,Junior Instructor,\n"
                    "Emma Davis,instructor,CT\n")
    staff = load_invigilators(path, {"CST": 1, "CT": 2})
    assert [(i.id, i.rank, i.department_id) for i in staff] == [
        (1, Rank.CHIEF, 1), (2, Rank.JUNIOR, None), (3, Rank.MAIN, 2)]


def test_unknown_designation():
    with pytest.raises(ValueError):
        load_invigilators(io.StringIO("name,designation\nX,Janitor\n"))


def test_save_csvs_to_buffers():
    room = Room(id=3, capacity=4, rows=2, columns=2, number="B-12")
    student = Student(id=9, roll_number="CST-009", department_id=1, name="Asha")
    inv = Invigilator(id=5, rank=Rank.MAIN, name="Emma Davis")

    seats = io.StringIO()
    save_seating_csv(seats, [SeatAssignment(1, 9, 1, 2, 1)], {1: room}, {9: student})
    assert seats.getvalue().splitlines() == [
        "room,seat_number,row,column,roll_number,name",
        "B-12,1,2,1,CST-009,Asha",
    ]

    roles = io.StringIO()
    save_invigilation_csv(roles, [InvigilatorAssignment(1, 5, Role.MAIN)], {1: room}, {5: inv})
    assert roles.getvalue().splitlines()[1] == "B-12,main,5,Emma Davis,Instructor"


def test_seating_grid():
    room = Room(id=1, capacity=3, rows=2, columns=2)
    students = {i: Student(id=i, roll_number=f"R{i}", department_id=1) for i in (1, 2, 3)}
    seats = [SeatAssignment(1, 1, 1, 1, 1), SeatAssignment(1, 2, 2, 1, 2), SeatAssignment(1, 3, 3, 2, 2)]
    grid = seating_grid(room, seats, students)
    assert grid.shape == (2, 2)
    assert grid.loc[1].tolist() == ["R1", "R2"]
    assert grid.loc[2].tolist() == ["--", "R3"]


ROOMS_CSV = b"id,capacity,rows,columns,number\n1,4,2,2,A1\n2,6,2,3,A2\n"
STUDENTS_CSV = b"Roll Number,Name,Department Code\nCST-001,Asha,cst\nCT-001,Ravi,CT\n"


def test_uploaded_rooms_replace_demo_campus():
    repo = build_repository(io.BytesIO(ROOMS_CSV), io.BytesIO(STUDENTS_CSV), demo=True)
    assert [r.number for r in repo.get_rooms()] == ["A1", "A2"]
    assert repo.get_invigilators() == []


def test_demo_campus_when_no_rooms_uploaded():
    repo = build_repository(students=io.BytesIO(STUDENTS_CSV), demo=True)
    assert len(repo.get_rooms()) == 165
    cst = repo.get_department_by_code("CST")
    assert [s.roll_number for s in repo.get_students_by_department(cst.id)] == ["CST-001"]


def test_build_repository_creates_unknown_departments():
    repo = build_repository(io.BytesIO(ROOMS_CSV), io.BytesIO(STUDENTS_CSV),
                            io.BytesIO(b"name,designation,department_code\nEmma,Instructor,CT\n"))
    assert [d.code for d in repo.get_departments()] == ["CST", "CT"]
    (inv,) = repo.get_invigilators()
    assert inv.department_id == repo.get_department_by_code("CT").id
