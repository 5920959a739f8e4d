import csv

import pytest

import main


def write(path, text):
    path.write_text(text)
    return str(path)


@pytest.fixture
def inputs(tmp_path):
    rooms = write(tmp_path / "rooms.csv", "id,capacity,rows,columns,number\n1,4,2,2,A1\n2,4,2,2,A2\n")
    students = write(tmp_path / "students.csv",
                     "Roll Number,Name,Department Code\n"
                     + "".join(f"CST-{i:02d},S{i},CST\n" for i in range(1, 7))
                     + "CT-01,X,CT\n")
    staff = write(tmp_path / "inv.csv", "name,designation\nA,Chief Instructor\nB,Instructor\n")
    return tmp_path, rooms, students, staff


def test_cli_writes_outputs(inputs, capsys):
    tmp_path, rooms, students, staff = inputs
    out_s, out_i = tmp_path / "seating.csv", tmp_path / "inv_out.csv"
    result = main.main(["--rooms", rooms, "--students", students, "--invigilators", staff,
                        "--department", "CST", "--pattern", "block",
                        "--out_seating", str(out_s), "--out_invigilation", str(out_i)])
    assert result.seat_assignments_count == 6
    assert result.invigilator_assignments_count == 4
    with open(out_s, newline="") as f:
        rows = list(csv.DictReader(f))
    assert [r["room"] for r in rows] == ["A1"] * 4 + ["A2"] * 2
    assert all(r["roll_number"].startswith("CST-") for r in rows)
    assert "Pattern: block" in capsys.readouterr().out


def test_cli_capacity_failure(inputs):
    tmp_path, rooms, students, _ = inputs
    with pytest.raises(SystemExit) as exc:
        main.main(["--rooms", rooms, "--students", students, "--department", "CST", "--room-ids", "1",
                   "--out_seating", str(tmp_path / "s.csv"), "--out_invigilation", str(tmp_path / "i.csv")])
    assert "Not enough capacity" in str(exc.value)
    assert not (tmp_path / "s.csv").exists()


def test_cli_requires_rooms(inputs):
    _, _, students, _ = inputs
    with pytest.raises(SystemExit):
        main.main(["--students", students])


def test_parse_room_ids():
    assert main.parse_room_ids("3, 1,2") == [3, 1, 2]
    assert main.parse_room_ids(None) == []
