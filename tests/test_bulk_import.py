import io

import pandas as pd


def excel_upload(rows, filename="students.xlsx"):
    buffer = io.BytesIO()
    pd.DataFrame(rows).to_excel(buffer, index=False)
    buffer.seek(0)
    return {"file": (filename, buffer, "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")}


def test_import_students_with_and_without_marks(client):
    rows = [
        {"student_id": "B001", "name": "Kavya", "class": "9B", "tamil": 90, "english": 90, "maths": 90, "science": 90, "social": 90},
        {"student_id": "B002", "name": "Arjun", "class": "9B", "tamil": None, "english": None, "maths": None, "science": None, "social": None},
        {"student_id": "B003", "name": "Meena", "class": "9B", "tamil": 20, "english": 20, "maths": 20, "science": 20, "social": 20},
    ]
    response = client.post("/bulk-import/students", files=excel_upload(rows))

    assert response.status_code == 200
    body = response.json()
    assert body["imported"] == 3
    assert body["failed"] == 0
    assert body["classes"] == ["9B"]

    students = {s["id"]: s for s in client.get("/api/students", params={"class_name": "9B"}).json()}
    assert students["B001"]["rank"] == 1
    assert students["B001"]["grade"] == "A+"
    assert students["B002"]["isMarked"] is False
    assert students["B002"]["rank"] is None
    assert students["B003"]["status"] == "Fail"
    assert students["B003"]["rank"] == 2


def test_import_reports_bad_rows(client):
    client.post("/api/students", json={"id": "B001", "name": "Existing", "class": "9B"})
    rows = [
        {"student_id": "B001", "name": "Duplicate", "class": "9B", "tamil": None},
        {"student_id": "B002", "name": None, "class": "9B", "tamil": None},
        {"student_id": "B003", "name": "Over", "class": "9B", "tamil": 120},
        {"student_id": "B004", "name": "Fine", "class": "9B", "tamil": None},
    ]
    body = client.post("/bulk-import/students", files=excel_upload(rows)).json()

    assert body["imported"] == 1
    assert body["failed"] == 3
    assert [e["row"] for e in body["errors"]] == [2, 3, 4]
    assert "already exists" in body["errors"][0]["error"]
    # Subjects are checked in order, tamil fails before the blank ones
    assert body["errors"][2]["error"] == "Invalid marks for tamil. Must be between 0-100"


def test_import_rejects_non_excel(client):
    files = {"file": ("students.csv", io.BytesIO(b"student_id,name,class\n"), "text/csv")}
    response = client.post("/bulk-import/students", files=files)
    assert response.status_code == 400


def test_import_requires_columns(client):
    response = client.post("/bulk-import/students", files=excel_upload([{"student_id": "B001", "name": "Kavya"}]))
    assert response.status_code == 400
    assert "class" in response.json()["detail"]
