from models.students import Student

GOOD = {"tamil": 85, "english": 78, "maths": 92, "science": 88, "social": 80}
POOR = {"tamil": 30, "english": 35, "maths": 20, "science": 25, "social": 10}


def add_student(client, code, class_name="10B"):
    response = client.post("/api/students", json={"id": code, "name": f"Student {code}", "class": class_name})
    assert response.status_code == 201
    return response.json()


# ===========================
#        STUDENTS
# ===========================

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_new_student_is_unmarked(client):
    body = add_student(client, "N001")

    assert body["id"] == "N001"
    assert body["rollNo"] == "N001"
    assert body["class"] == "10B"
    assert body["isMarked"] is False
    assert body["marks"] is None
    assert body["rank"] is None


def test_duplicate_student_rejected(client):
    add_student(client, "N001")
    response = client.post("/api/students", json={"id": "N001", "name": "Again", "class": "10B"})
    assert response.status_code == 409


def test_list_students_filters_by_class(seeded_client):
    add_student(seeded_client, "N001", "9A")

    assert len(seeded_client.get("/api/students").json()) == 11
    only_9a = seeded_client.get("/api/students", params={"class_name": "9A"}).json()
    assert [s["id"] for s in only_9a] == ["N001"]


def test_get_student_not_found(client):
    response = client.get("/api/student/NOPE")
    assert response.status_code == 404
    assert response.json()["detail"] == "Student not found"


def test_update_profile_does_not_touch_marks(seeded_client):
    response = seeded_client.put("/api/student/S001", json={"name": "Rahul K.", "section": "B"})
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Rahul K."
    assert body["section"] == "B"
    assert body["totalMarks"] == 423


def test_moving_class_reranks_both_classes(seeded_client):
    seeded_client.put("/api/student/S002", json={"class": "10B"})

    moved = seeded_client.get("/api/student/S002").json()
    assert moved["rank"] == 1
    ranks_10a = [r["rank"] for r in seeded_client.get("/api/rankings", params={"class_name": "10A"}).json()["rankings"]]
    assert ranks_10a == [1, 2, 3, 4]


def test_update_profile_rejects_clearing_required_fields(seeded_client):
    for body in ({"name": None}, {"class": None}, {"rollNo": None}, {"name": ""}):
        response = seeded_client.put("/api/student/S001", json=body)
        assert response.status_code == 400

    student = seeded_client.get("/api/student/S001").json()
    assert student["name"] == "Rahul Kumar"
    assert student["class"] == "10A"
    assert seeded_client.get("/api/students").status_code == 200
    assert seeded_client.get("/api/rankings").status_code == 200
    assert seeded_client.get("/api/statistics").status_code == 200


# ===========================
#        MARKS ENTRY
# ===========================

def test_submit_marks_grades_and_ranks(client):
    add_student(client, "A")
    add_student(client, "B")
    add_student(client, "C")

    response = client.post("/api/student/B/marks", json={"marks": POOR})
    assert response.status_code == 200
    student = response.json()["student"]
    assert student["totalMarks"] == 120
    assert student["percentage"] == 24.0
    assert student["grade"] == "F"
    assert student["status"] == "Fail"
    assert student["rank"] == 1

    response = client.post("/api/student/A/marks", json={"marks": GOOD})
    assert response.json()["message"] == "Marks updated successfully"
    assert response.json()["student"]["rank"] == 1

    # The earlier student was re-ranked by A's submission
    assert client.get("/api/student/B").json()["rank"] == 2
    assert client.get("/api/student/C").json()["rank"] is None


def test_resubmission_replaces_marks(client):
    add_student(client, "A")
    client.post("/api/student/A/marks", json={"marks": GOOD})
    body = client.post("/api/student/A/marks", json={"marks": POOR}).json()["student"]

    assert body["marks"] == POOR
    assert body["totalMarks"] == 120
    assert body["status"] == "Fail"


def test_invalid_marks_rejected_without_changes(seeded_client, db):
    response = seeded_client.post("/api/student/S001/marks", json={"marks": dict(GOOD, maths=101)})
    assert response.status_code == 400
    assert "maths" in response.json()["detail"]

    response = seeded_client.post("/api/student/S001/marks", json={"marks": {"tamil": 50}})
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing marks for english"

    student = db.query(Student).filter(Student.student_code == "S001").first()
    db.refresh(student)
    assert student.marks == GOOD
    assert student.total_marks == 423


def test_marks_for_unknown_student(client):
    response = client.post("/api/student/NOPE/marks", json={"marks": GOOD})
    assert response.status_code == 404


# ===========================
#     RESULTS & RANKINGS
# ===========================

def test_result_sheet(seeded_client):
    body = seeded_client.get("/api/result/S001").json()

    assert body["student"]["name"] == "Rahul Kumar"
    assert [s["name"] for s in body["subjects"]] == ["Tamil", "English", "Mathematics", "Science", "Social Science"]
    assert body["subjects"][2] == {"name": "Mathematics", "marks": 92, "grade": "A+"}
    assert body["subjects"][1]["grade"] == "B+"
    assert body["summary"] == {"totalMarks": 423, "percentage": 84.6, "grade": "A", "status": "Pass", "rank": 3}


def test_result_sheet_for_unmarked_student(seeded_client):
    body = seeded_client.get("/api/result/S003").json()

    assert body["subjects"] == []
    assert body["summary"]["status"] == "Unmarked"
    assert body["summary"]["grade"] == "N/A"


def test_result_not_found(client):
    assert client.get("/api/result/NOPE").status_code == 404


def test_rankings_of_seeded_class(seeded_client):
    body = seeded_client.get("/api/rankings").json()

    assert [(r["id"], r["rank"]) for r in body["rankings"]] == [
        ("S002", 1), ("S007", 2), ("S001", 3), ("S009", 4), ("S005", 5),
    ]
    assert body["stats"]["totalStudents"] == 10
    assert body["academicYear"] == "2024-2025"


def test_failing_student_ranked_after_passing(seeded_client):
    seeded_client.post("/api/student/S003/marks", json={"marks": POOR})
    seeded_client.post("/api/student/S004/marks", json={"marks": {"tamil": 40, "english": 40, "maths": 40, "science": 40, "social": 40}})

    rankings = seeded_client.get("/api/rankings").json()["rankings"]
    assert [r["id"] for r in rankings][-2:] == ["S004", "S003"]
    assert rankings[-1]["status"] == "Fail"
    assert [r["rank"] for r in rankings] == list(range(1, 8))


def test_statistics(seeded_client):
    body = seeded_client.get("/api/statistics").json()

    assert body["totalStudents"] == 10
    assert body["studentsWithMarks"] == 5
    assert body["pendingEvaluations"] == 5
    assert body["classAverage"] == 84.4
    assert body["topScore"] == 450
    assert body["passPercentage"] == 100
    assert body["passedStudents"] == 5
    assert body["failedStudents"] == 0


def test_statistics_average_by_total(seeded_client):
    body = seeded_client.get("/api/statistics", params={"average_by": "total"}).json()
    # (423 + 450 + 400 + 432 + 404) / 5 = 421.8
    assert body["classAverage"] == 422


def test_statistics_bad_average_mode(client):
    assert client.get("/api/statistics", params={"average_by": "median"}).status_code == 400


def test_statistics_empty_roster(client):
    body = client.get("/api/statistics").json()
    assert body["totalStudents"] == 0
    assert body["classAverage"] == 0
    assert body["topScore"] == 0
    assert body["passPercentage"] == 0


# ===========================
#          TEACHERS
# ===========================

def test_get_teacher(seeded_client):
    body = seeded_client.get("/api/teacher/TCH-7284").json()
    assert body["name"] == "Prof. Sarah Johnson"
    assert body["class"] == "10A"


def test_update_teacher_merges_fields(seeded_client):
    response = seeded_client.put("/api/teacher/TCH-7284", json={"phone": "9876543210"})
    assert response.status_code == 200
    teacher = response.json()["teacher"]
    assert teacher["phone"] == "9876543210"
    assert teacher["subject"] == "Mathematics"
    assert teacher["id"] == "TCH-7284"


def test_update_teacher_rejects_null_name(seeded_client):
    response = seeded_client.put("/api/teacher/TCH-7284", json={"name": None})
    assert response.status_code == 400

    teacher = seeded_client.get("/api/teacher/TCH-7284")
    assert teacher.status_code == 200
    assert teacher.json()["name"] == "Prof. Sarah Johnson"


def test_teacher_not_found(client):
    assert client.get("/api/teacher/NOPE").status_code == 404
    assert client.put("/api/teacher/NOPE", json={"name": "X"}).status_code == 404
