from decimal import Decimal

import pytest

from jobly.errors import BadRequestError, NotFoundError
from jobly.services import job_service


class TestCreate:
    def test_works(self, db) -> None:
        job = job_service.create(
            db,
            {"title": "new job", "salary": 15000, "equity": Decimal("0.25"), "companyHandle": "c3"},
        )
        assert job == {
            "id": job["id"],
            "title": "new job",
            "salary": 15000,
            "equity": "0.25",
            "companyHandle": "c3",
        }
        assert job_service.get(db, job["id"])["company"]["handle"] == "c3"

    def test_without_salary_or_equity(self, db) -> None:
        job = job_service.create(db, {"title": "intern", "companyHandle": "c1"})
        assert job["salary"] is None
        assert job["equity"] is None

    def test_unknown_company(self, db) -> None:
        with pytest.raises(BadRequestError, match="No company: nope"):
            job_service.create(db, {"title": "x", "companyHandle": "nope"})


def test_find_all(db, job_ids) -> None:
    jobs = job_service.find_all(db)
    assert jobs == [
        {"id": job_ids["j1"], "title": "j1", "salary": 5000, "equity": "0", "companyHandle": "c1"},
        {"id": job_ids["j2"], "title": "j2", "salary": 10000, "equity": "0.15", "companyHandle": "c2"},
        {"id": job_ids["j3"], "title": "j3", "salary": 20000, "equity": "0.3", "companyHandle": "c2"},
        {"id": job_ids["j4"], "title": "j4", "salary": None, "equity": None, "companyHandle": "c3"},
    ]


class TestSearch:
    def test_min_salary_and_equity(self, db) -> None:
        jobs = job_service.search(db, {"minSalary": "5000", "hasEquity": "true"})
        assert [j["title"] for j in jobs] == ["j2", "j3"]

    def test_without_equity(self, db) -> None:
        jobs = job_service.search(db, {"hasEquity": "false"})
        assert [j["title"] for j in jobs] == ["j1", "j4"]

    def test_without_equity_and_salary(self, db) -> None:
        # j4 has no equity but also no salary
        jobs = job_service.search(db, {"hasEquity": "false", "minSalary": "1"})
        assert [j["title"] for j in jobs] == ["j1"]

    def test_min_salary(self, db) -> None:
        jobs = job_service.search(db, {"minSalary": 15000})
        assert [j["title"] for j in jobs] == ["j3"]

    def test_title_sql(self, recording_session) -> None:
        job_service.search(recording_session, {"title": "dev", "minSalary": "100"})
        sql, params = recording_session.calls[0]
        assert "WHERE title ILIKE :p1 AND salary>=:p2 ORDER BY title, id" in sql
        assert params == {"p1": "%dev%", "p2": 100}

    def test_no_usable_filter(self, db) -> None:
        with pytest.raises(BadRequestError) as exc_info:
            job_service.search(db, {})
        assert exc_info.value.message == "Must use at least one filter: title, minSalary, hasEquity"
        assert exc_info.value.status == 400


class TestGet:
    def test_works(self, db, job_ids) -> None:
        job = job_service.get(db, job_ids["j2"])
        assert job == {
            "id": job_ids["j2"],
            "title": "j2",
            "salary": 10000,
            "equity": "0.15",
            "company": {
                "handle": "c2",
                "name": "C2",
                "description": "Desc2",
                "numEmployees": 2,
                "logoUrl": "http://c2.img",
            },
        }

    def test_not_found(self, db) -> None:
        with pytest.raises(NotFoundError, match="No job: 0"):
            job_service.get(db, 0)


class TestUpdate:
    update_data = {"title": "New Job Title", "salary": 100000, "equity": Decimal("0.9")}

    def test_works(self, db, job_ids) -> None:
        job = job_service.update(db, job_ids["j1"], dict(self.update_data))
        assert job == {
            "id": job_ids["j1"],
            "title": "New Job Title",
            "salary": 100000,
            "equity": "0.9",
            "companyHandle": "c1",
        }

    def test_null_fields(self, db, job_ids) -> None:
        job = job_service.update(db, job_ids["j2"], {"title": "New Job", "salary": 10000, "equity": None})
        assert job["equity"] is None
        assert job_service.get(db, job_ids["j2"])["equity"] is None

    def test_not_found(self, db) -> None:
        with pytest.raises(NotFoundError):
            job_service.update(db, 0, dict(self.update_data))

    def test_no_data(self, db, job_ids) -> None:
        with pytest.raises(BadRequestError, match="No data"):
            job_service.update(db, job_ids["j1"], {})

    def test_keeps_caller_data(self, db, job_ids) -> None:
        data = {"equity": Decimal("0.5")}
        job_service.update(db, job_ids["j1"], data)
        assert data == {"equity": Decimal("0.5")}


class TestRemove:
    def test_works(self, db, job_ids) -> None:
        assert job_service.remove(db, job_ids["j1"]) == {"id": job_ids["j1"], "title": "j1"}
        with pytest.raises(NotFoundError):
            job_service.get(db, job_ids["j1"])

    def test_not_found(self, db) -> None:
        with pytest.raises(NotFoundError):
            job_service.remove(db, 0)
