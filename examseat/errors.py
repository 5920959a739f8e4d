from typing import Any, Dict, Optional


class SeatPlanError(Exception):
    """A seat plan request that cannot be served.

    `kind` is a stable machine-readable tag, `details` carries the numbers
    the caller needs to explain the failure (counts, ids).
    """

    kind = "seat_plan_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": self.message, **self.details}


class CapacityExceeded(SeatPlanError):
    kind = "capacity_exceeded"


class NoStudentsFound(SeatPlanError):
    kind = "no_students_found"


class EmptyRoomSelection(SeatPlanError):
    kind = "empty_room_selection"


class ExamNotFound(SeatPlanError):
    kind = "exam_not_found"


class UnknownRoom(SeatPlanError):
    kind = "unknown_room"


class DuplicateStudents(SeatPlanError):
    kind = "duplicate_students"
