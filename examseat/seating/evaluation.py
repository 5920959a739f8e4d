from typing import Dict, Sequence

from ..models import Room, SeatPlan, Student
from .room_filler import total_capacity
from .validation import capacity_ok, coordinates_ok, partition_ok, roles_ok


def plan_stats(plan: SeatPlan, rooms: Sequence[Room]) -> Dict[str, int]:
    """Headline numbers shown next to a plan."""
    return {
        "total_students": len(plan.seats),
        "total_rooms": len(plan.exam_rooms),
        "total_invigilators": len({r.invigilator_id for r in plan.roles}),
        "total_capacity": total_capacity(rooms),
    }


def summary(plan: SeatPlan, students: Sequence[Student], rooms: Sequence[Room]) -> str:
    stats = plan_stats(plan, rooms)
    ok_part = partition_ok(students, plan)
    ok_cap = capacity_ok(plan)
    ok_coord = coordinates_ok(plan)
    ok_roles = roles_ok(plan)
    unused = len(rooms) - stats["total_rooms"]
    lines = [
        f"Exam: {plan.exam_id}  Pattern: {plan.pattern.value}",
        f"Students placed: {stats['total_students']} / {len(students)}  "
        f"Capacity: {stats['total_capacity']}",
        f"Rooms used: {stats['total_rooms']}  Unused: {unused}",
        f"Invigilators: {stats['total_invigilators']}  Role slots: {len(plan.roles)}",
        f"Valid (partition): {ok_part}  Valid (capacity): {ok_cap}  "
        f"Valid (seats): {ok_coord}  Valid (roles): {ok_roles}",
    ]
    for er in plan.exam_rooms:
        room, group = plan.groups[er.id]
        label = room.number or str(room.id)
        roles = ", ".join(f"{r.role.value}={r.invigilator_id}" for r in plan.roles_for(er.id))
        lines.append(f"  Room {label}: {len(group)}/{room.capacity} seated"
                     + (f"  [{roles}]" if roles else ""))
    return "\n".join(lines) + "\n"
