import logging

import pytest

from examseat.errors import CapacityExceeded, DuplicateStudents, EmptyRoomSelection, NoStudentsFound
from examseat.models import Room, Student
from examseat.seating.room_filler import effective_capacity, fill_rooms, total_capacity
from examseat.seating.validation import check_preconditions, validate_inputs, validate_room


def make_students(n, dept=1):
    return [Student(id=i, roll_number=f"R{i:04d}", department_id=dept) for i in range(1, n + 1)]


def make_room(rid, capacity, rows=8, columns=8):
    return Room(id=rid, capacity=capacity, rows=rows, columns=columns)


def test_fill_in_input_order():
    students = make_students(7)
    rooms = [make_room(1, 3), make_room(2, 3), make_room(3, 3)]
    groups = fill_rooms(students, rooms)
    assert [g.room.id for g in groups] == [1, 2, 3]
    assert [[s.id for s in g.students] for g in groups] == [[1, 2, 3], [4, 5, 6], [7]]


def test_stops_when_students_run_out():
    groups = fill_rooms(make_students(4), [make_room(1, 5), make_room(2, 5)])
    assert len(groups) == 1
    assert len(groups[0].students) == 4


@pytest.mark.parametrize("n,caps", [(10, [4, 4, 4]), (12, [12]), (30, [7, 9, 11, 3]), (1, [1, 1])])
def test_partition_and_capacity(n, caps):
    students = make_students(n)
    rooms = [make_room(i, c) for i, c in enumerate(caps, start=1)]
    groups = fill_rooms(students, rooms)
    placed = [s.id for g in groups for s in g.students]
    assert placed == [s.id for s in students]
    for g in groups:
        assert len(g.students) <= g.room.capacity


def test_capacity_clamped_to_grid():
    room = make_room(1, 65, rows=8, columns=8)
    assert effective_capacity(room) == 64
    groups = fill_rooms(make_students(70), [room, make_room(2, 10)])
    assert [len(g.students) for g in groups] == [64, 6]


def test_total_capacity_uses_effective_capacity():
    assert total_capacity([make_room(1, 65), make_room(2, 10)]) == 74


def test_capacity_exceeded_reports_counts():
    rooms = [make_room(i, 50) for i in range(1, 11)]
    with pytest.raises(CapacityExceeded) as exc:
        check_preconditions(make_students(501), rooms)
    assert exc.value.details == {"students_count": 501, "total_capacity": 500}
    assert exc.value.to_dict()["error"] == "capacity_exceeded"


def test_exact_capacity_is_accepted():
    rooms = [make_room(i, 50) for i in range(1, 11)]
    check_preconditions(make_students(500), rooms)


def test_no_students():
    with pytest.raises(NoStudentsFound):
        check_preconditions([], [make_room(1, 5)])


def test_no_rooms():
    with pytest.raises(EmptyRoomSelection):
        check_preconditions(make_students(3), [])


def test_validate_inputs_collects_reasons():
    res = validate_inputs([], [])
    assert not res.ok
    assert res.reasons == ["no rooms selected", "no students found"]
    res = validate_inputs(make_students(5), [make_room(1, 4)])
    assert not res.ok
    assert "exceed total capacity 4" in res.reasons[0]
    assert validate_inputs(make_students(4), [make_room(1, 4)]).ok


def test_validate_room_flags_degenerate_grid():
    assert validate_room(make_room(1, 64)).ok
    res = validate_room(make_room(1, 65))
    assert res.ok
    assert "exceeds 8x8 grid; using 64" in res.warnings[0]
    res = validate_room(make_room(2, 4, rows=0, columns=3))
    assert not res.ok
    assert "rows and columns must be positive" in res.reasons[0]


def test_preconditions_raise_first_failed_check(caplog):
    with caplog.at_level(logging.WARNING):
        with pytest.raises(EmptyRoomSelection):
            check_preconditions([], [])
    assert "no rooms selected; no students found" in caplog.text


def test_duplicate_students_rejected():
    students = make_students(3) + make_students(1)
    res = validate_inputs(students, [make_room(1, 10)])
    assert res.reasons == ["duplicate student ids"]
    with pytest.raises(DuplicateStudents) as exc:
        check_preconditions(students, [make_room(1, 10)])
    assert exc.value.details == {"student_ids": [1]}


def test_oversized_room_does_not_warn_during_a_run(caplog):
    rooms = [make_room(1, 65), make_room(2, 10)]
    with caplog.at_level(logging.WARNING):
        check_preconditions(make_students(70), rooms)
        fill_rooms(make_students(70), rooms)
        total_capacity(rooms)
    assert "exceeds" not in caplog.text
