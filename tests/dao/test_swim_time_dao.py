"""Tests for SwimTimeDAO against the in-memory store."""

from datetime import date

from swimcoach.models import Course, Stroke, SwimTime


def _swim_time(**overrides) -> SwimTime:
    fields = {
        "swimmer_id": "S1",
        "stroke": Stroke.FREESTYLE,
        "distance": 100,
        "course": Course.SHORT,
        "time_ms": 65230,
        "swim_date": date(2024, 3, 1),
    }
    fields.update(overrides)
    return SwimTime(**fields)


async def test_insert_reports_new_row(swim_time_dao, fake_client):
    assert await swim_time_dao.insert(_swim_time()) is True
    assert fake_client.rows("swimmer_times")[0]["stroke"] == "FREESTYLE"


async def test_duplicate_key_ignored(swim_time_dao, fake_client):
    await swim_time_dao.insert(_swim_time())

    inserted = await swim_time_dao.insert(_swim_time(swim_date=date(2024, 5, 5)))

    assert inserted is False
    (row,) = fake_client.rows("swimmer_times")
    assert row["swim_date"] == "2024-03-01"


async def test_distinct_course_is_new_row(swim_time_dao, fake_client):
    await swim_time_dao.insert(_swim_time())
    await swim_time_dao.insert(_swim_time(course=Course.LONG))

    assert len(fake_client.rows("swimmer_times")) == 2


async def test_find_by_swimmer_fastest_first(swim_time_dao):
    await swim_time_dao.insert(_swim_time(time_ms=70000))
    await swim_time_dao.insert(_swim_time(time_ms=65000, swim_date=None))
    await swim_time_dao.insert(_swim_time(swimmer_id="S2"))

    times = await swim_time_dao.find_by_swimmer("S1")

    assert [t.time_ms for t in times] == [65000, 70000]
    assert times[0].swim_date is None
