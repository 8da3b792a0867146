from datetime import date

import pytest

from medrem.reminder_system import ReminderStore, expand_reminders
from medrem.views import (
    COMPLETED,
    medicine_summaries,
    reminders_to_dataframe,
    shift_week,
    start_of_week,
    today_reminders,
    upcoming_reminders,
    week_view,
)

TODAY = date(2024, 5, 15)  # a Wednesday


@pytest.fixture
def store():
    store = ReminderStore()
    store.append(expand_reminders("Aspirin", "500mg", "twice", "2024-05-14", 3))
    return store


def test_today_only_returns_todays_doses(store):
    result = today_reminders(store.all(), today=TODAY)

    assert [r.id for r in result] == ["Aspirin-2024-05-15-09-00", "Aspirin-2024-05-15-21-00"]


def test_today_empty_when_nothing_due(store):
    assert today_reminders(store.all(), today=date(2024, 6, 1)) == []


def test_start_of_week_is_sunday():
    assert start_of_week(TODAY) == date(2024, 5, 12)
    assert start_of_week(date(2024, 5, 12)) == date(2024, 5, 12)
    assert start_of_week(date(2024, 5, 18)) == date(2024, 5, 12)


def test_week_view_groups_by_day(store):
    week = week_view(store.all(), TODAY)

    assert [day for day, _ in week] == [date(2024, 5, d) for d in range(12, 19)]
    counts = {day.day: len(items) for day, items in week}
    assert counts == {12: 0, 13: 0, 14: 2, 15: 2, 16: 2, 17: 0, 18: 0}


def test_week_paging(store):
    next_week = week_view(store.all(), shift_week(TODAY, 1))
    previous_week = week_view(store.all(), shift_week(TODAY, -1))

    assert next_week[0][0] == date(2024, 5, 19)
    assert previous_week[0][0] == date(2024, 5, 5)
    assert all(not items for _, items in next_week)


def test_upcoming_from_today_sorted_by_date():
    reminders = (
        expand_reminders("B", "1", "custom", "2024-05-17", 1, ["20:00", "07:00"])
        + expand_reminders("A", "1", "once", "2024-05-15", 1)
        + expand_reminders("C", "1", "once", "2024-05-10", 1)
    )

    result = upcoming_reminders(reminders, today=TODAY)

    assert [r.id for r in result] == [
        "A-2024-05-15-09-00",
        "B-2024-05-17-20-00",
        "B-2024-05-17-07-00",
    ]


def test_medicine_summary_progress(store):
    store.mark_taken("Aspirin-2024-05-14-09-00")
    store.mark_taken("Aspirin-2024-05-14-21-00")

    [summary] = medicine_summaries(store.all())

    assert summary.name == "Aspirin"
    assert summary.dosage == "500mg"
    assert summary.total == 6
    assert summary.taken == 2
    assert summary.remaining == 4
    assert summary.progress == pytest.approx(100 * 2 / 6)
    assert summary.progress + summary.remaining / summary.total * 100 == pytest.approx(100)
    assert summary.next_dose == "9:00 AM"
    assert summary.next_dose_id == "Aspirin-2024-05-15-09-00"


def test_medicine_summary_completed():
    store = ReminderStore()
    store.append(expand_reminders("Zinc", "10mg", "once", "2024-05-14", 2))
    for r in store.all():
        store.mark_taken(r.id)

    [summary] = medicine_summaries(store.all())

    assert summary.remaining == 0
    assert summary.progress == 100
    assert summary.next_dose == COMPLETED
    assert summary.next_dose_id is None


def test_medicine_names_are_not_normalized():
    reminders = (
        expand_reminders("Aspirin", "500mg", "once", "2024-05-14", 1)
        + expand_reminders("aspirin", "81mg", "once", "2024-05-14", 1)
    )

    summaries = medicine_summaries(reminders)

    assert [s.name for s in summaries] == ["Aspirin", "aspirin"]
    assert [s.dosage for s in summaries] == ["500mg", "81mg"]


def test_no_reminders_no_summaries():
    assert medicine_summaries([]) == []


def test_dataframe_export(store):
    df = reminders_to_dataframe(store.all())

    assert len(df) == 6
    assert list(df.columns) == ["id", "medicine", "dosage", "date", "time", "type", "taken", "contact_number"]
    assert reminders_to_dataframe([]).empty
