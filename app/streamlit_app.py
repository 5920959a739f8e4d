import sys, os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import io
import time

import pandas as pd
import streamlit as st

from examseat import config
from examseat.errors import SeatPlanError
from examseat.io_utils import build_repository, save_invigilation_csv, save_seating_csv, seating_grid
from examseat.models import Exam, SeatingPattern
from examseat.seating.evaluation import plan_stats, summary
from examseat.service import generate_seat_plan, load_plan

# ---------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------
st.set_page_config(page_title="ExamSeat – Seat Planner", layout="wide")
st.title("ExamSeat – Seat Plan & Invigilation Generator")


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def _buffer(upload):
    if upload is None:
        return None
    return io.BytesIO(upload.getvalue())


# ---------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------
st.subheader("Inputs")
c1, c2, c3 = st.columns(3)
rooms_file = c1.file_uploader("Rooms CSV (id,capacity,rows,columns)", type=["csv"])
students_file = c2.file_uploader("Students CSV (Roll Number,Name,Department Code)", type=["csv"])
staff_file = c3.file_uploader("(Optional) Invigilators CSV (name,designation)", type=["csv"])
# an uploaded rooms file replaces the demo campus
demo = st.checkbox("Use demo campus (rooms + invigilators)", value=rooms_file is None,
                   disabled=rooms_file is not None) and rooms_file is None

if students_file is None:
    st.info("Upload a student roster to continue.")
    st.stop()

try:
    repo = build_repository(_buffer(rooms_file), _buffer(students_file), _buffer(staff_file), demo=demo)
except (KeyError, ValueError) as e:
    st.error(f"Could not read the uploaded files: {e}")
    st.stop()

departments = [d for d in repo.get_departments() if repo.get_students_by_department(d.id)]
all_rooms = repo.get_rooms()
if not departments or not all_rooms:
    st.error("Need at least one department with students and one room.")
    st.stop()

# ---------------------------------------------------------------------
# Form Inputs
# ---------------------------------------------------------------------
with st.form("controls"):
    dept = st.selectbox("Department", departments, format_func=lambda d: f"{d.code} – {d.name}")
    room_labels = {f"{r.number or r.id} (cap {r.capacity}, {r.rows}x{r.columns})": r.id for r in all_rooms}
    chosen = st.multiselect("Rooms (filled in this order)", list(room_labels))
    pattern = st.selectbox("Seating pattern", [p.value for p in SeatingPattern],
                           index=[p.value for p in SeatingPattern].index(config.DEFAULT_PATTERN))
    seed_text = st.text_input("Seed (randomized only, optional)", "")
    submitted = st.form_submit_button("Generate Seat Plan")

# ---------------------------------------------------------------------
# Run on Submit
# ---------------------------------------------------------------------
if submitted:
    t0 = time.perf_counter()
    exam = repo.create_exam(Exam(id=0, name="Exam", department_id=dept.id))
    room_ids = [room_labels[label] for label in chosen]
    seed = int(seed_text) if seed_text.strip().isdigit() else None
    try:
        generate_seat_plan(repo, exam.id, room_ids, pattern=pattern, seed=seed)
    except SeatPlanError as e:
        st.error(f"{e.message} {e.details or ''}")
        st.stop()

    plan = load_plan(repo, exam.id)
    rooms_by_id = {r.id: r for r in all_rooms}
    selected = [rooms_by_id[rid] for rid in room_ids]
    dept_students = repo.get_students_by_department(dept.id)
    students = {s.id: s for s in repo.get_students()}
    staff = {i.id: i for i in repo.get_invigilators()}
    rooms_by_exam_room = {er.id: rooms_by_id[er.room_id] for er in plan.exam_rooms}

    # -----------------------------------------------------------------
    # UI Output
    # -----------------------------------------------------------------
    st.subheader("Summary")
    stats = plan_stats(plan, selected)
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Students", stats["total_students"])
    m2.metric("Rooms", stats["total_rooms"])
    m3.metric("Invigilators", stats["total_invigilators"])
    m4.metric("Capacity", stats["total_capacity"])
    st.text(summary(plan, dept_students, selected))
    st.caption(f"Total time: {time.perf_counter() - t0:.3f}s")

    for er in plan.exam_rooms:
        room = rooms_by_id[er.room_id]
        with st.expander(f"Room {room.number or room.id}", expanded=False):
            st.dataframe(seating_grid(room, plan.seats_for(er.id), students))
            roles = pd.DataFrame([
                {"role": r.role.value, "name": staff[r.invigilator_id].name,
                 "designation": staff[r.invigilator_id].rank.value}
                for r in plan.roles_for(er.id)
            ])
            if not roles.empty:
                st.table(roles)

    seat_buf = io.StringIO()
    save_seating_csv(seat_buf, plan.seats, rooms_by_exam_room, students)
    st.download_button("Download seating.csv", seat_buf.getvalue(), file_name="seating.csv", mime="text/csv")

    if plan.roles:
        inv_buf = io.StringIO()
        save_invigilation_csv(inv_buf, plan.roles, rooms_by_exam_room, staff)
        st.download_button("Download invigilation.csv", inv_buf.getvalue(),
                           file_name="invigilation.csv", mime="text/csv")

    st.success("Seat plan complete.")
