import argparse
import logging
from typing import List, Optional

from examseat import config
from examseat.errors import SeatPlanError
from examseat.io_utils import build_repository, save_invigilation_csv, save_seating_csv
from examseat.models import Exam, SeatingPattern
from examseat.repository import InMemoryRepository
from examseat.seating.evaluation import summary
from examseat.service import generate_seat_plan, load_plan

LOG = logging.getLogger("examseat.cli")


def parse_room_ids(value: Optional[str]) -> List[int]:
    if not value:
        return []
    return [int(v) for v in value.split(',') if v.strip()]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="ExamSeat – Exam Seat Plan & Invigilation Generator")
    # Catalog
    p.add_argument('--demo', action='store_true', help='Use the built-in demo campus (rooms + invigilators)')
    p.add_argument('--rooms', type=str, help='rooms.csv with id,capacity,rows,columns[,number,name]')
    p.add_argument('--students', type=str, help='students.csv with Roll Number,Name,Department Code')
    p.add_argument('--invigilators', type=str, help='invigilators.csv with name,designation[,department_code]')

    # Exam
    p.add_argument('--department', type=str, default=None,
                   help='Department code to seat (default: first department in the roster)')
    p.add_argument('--exam-name', type=str, default='Exam')
    p.add_argument('--room-ids', type=str, default=None,
                   help='Comma-separated room ids in fill order (default: all rooms)')
    p.add_argument('--pattern', type=str, default=config.DEFAULT_PATTERN,
                   help=' | '.join(x.value for x in SeatingPattern))
    p.add_argument('--seed', type=int, default=None, help='Seed for the randomized pattern')

    # Output
    p.add_argument('--out_seating', type=str, default=config.DEFAULT_OUT_SEATING)
    p.add_argument('--out_invigilation', type=str, default=config.DEFAULT_OUT_INVIGILATION)
    p.add_argument('--log-level', type=str, default=config.DEFAULT_LOG_LEVEL)
    return p


def load_repository(args) -> InMemoryRepository:
    if not (args.demo or args.rooms):
        raise SystemExit("Provide --rooms or --demo")
    if not args.students:
        raise SystemExit("Provide --students")
    return build_repository(rooms=args.rooms, students=args.students,
                            staff=args.invigilators or None, demo=args.demo)


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format=config.LOG_FORMAT)

    repo = load_repository(args)
    students_all = repo.get_students()
    if args.department:
        dept = repo.get_department_by_code(args.department)
        if dept is None:
            raise SystemExit(f"Unknown department: {args.department}")
    elif students_all:
        dept = next(d for d in repo.get_departments() if d.id == students_all[0].department_id)
    else:
        raise SystemExit("Student roster is empty")

    exam = repo.create_exam(Exam(id=0, name=args.exam_name, department_id=dept.id))
    room_ids = parse_room_ids(args.room_ids) or [r.id for r in repo.get_rooms()]

    try:
        result = generate_seat_plan(repo, exam.id, room_ids, pattern=args.pattern, seed=args.seed)
    except SeatPlanError as e:
        LOG.error("%s: %s %s", e.kind, e.message, e.details)
        raise SystemExit(f"{e.message} {e.details}" if e.details else e.message)

    plan = load_plan(repo, exam.id)
    rooms_by_id = {r.id: r for r in repo.get_rooms()}
    students = {s.id: s for s in students_all}
    selected = [rooms_by_id[rid] for rid in dict.fromkeys(room_ids)]
    print(summary(plan, repo.get_students_by_department(dept.id), selected))

    rooms_by_exam_room = {er.id: rooms_by_id[er.room_id] for er in result.exam_rooms}
    save_seating_csv(args.out_seating, result.seat_assignments, rooms_by_exam_room, students)
    staff = {i.id: i for i in repo.get_invigilators()}
    save_invigilation_csv(args.out_invigilation, result.invigilator_assignments, rooms_by_exam_room, staff)
    print(f"Saved: {args.out_seating}, {args.out_invigilation}")
    return result


if __name__ == '__main__':
    main()
