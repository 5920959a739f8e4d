"""Invigilator role assignment.

Each rank (Chief Instructor, Instructor, Junior Instructor) fills one role
(chief, main, junior) per exam room. Pools are cycled: room i gets
pool[i % len(pool)]. When a pool is smaller than the number of rooms the
same person covers several rooms at once; this is accepted operating
policy (one invigilator nominally covering parallel rooms) and there is no
cap on how many rooms one person can receive. An empty pool leaves that
role unfilled in every room.
"""
import logging
from typing import Dict, Iterable, List, Sequence

from ..models import ROLE_FOR_RANK, ExamRoom, Invigilator, InvigilatorAssignment, Rank

LOG = logging.getLogger(__name__)


def pools_by_rank(staff: Iterable[Invigilator]) -> Dict[Rank, List[Invigilator]]:
    pools: Dict[Rank, List[Invigilator]] = {rank: [] for rank in ROLE_FOR_RANK}
    for inv in staff:
        pools[Rank(inv.rank)].append(inv)
    return pools


def assign_roles(exam_rooms: Sequence[ExamRoom],
                 staff: Iterable[Invigilator]) -> List[InvigilatorAssignment]:
    pools = pools_by_rank(staff)
    for rank, pool in pools.items():
        if not pool and exam_rooms:
            LOG.warning("No %s available; role %r left unassigned",
                        rank.value, ROLE_FOR_RANK[rank].value)
    out: List[InvigilatorAssignment] = []
    for i, er in enumerate(exam_rooms):
        for rank, role in ROLE_FOR_RANK.items():
            pool = pools[rank]
            if pool:
                out.append(InvigilatorAssignment(exam_room_id=er.id,
                                                 invigilator_id=pool[i % len(pool)].id,
                                                 role=role))
    return out
