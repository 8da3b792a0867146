from dataclasses import replace
from datetime import date, datetime

import pytest

from medrem.exceptions import ReminderValidationError
from medrem.reminder_system import Reminder, ReminderStore, expand_reminders


def test_twice_daily_for_two_days():
    reminders = expand_reminders("Aspirin", "500mg", "twice", "2024-01-01", "2", None, "+1555")

    assert [r.date for r in reminders] == ["2024-01-01", "2024-01-01", "2024-01-02", "2024-01-02"]
    assert [r.time for r in reminders] == ["9:00 AM", "9:00 PM", "9:00 AM", "9:00 PM"]
    assert [r.id for r in reminders] == [
        "Aspirin-2024-01-01-09-00",
        "Aspirin-2024-01-01-21-00",
        "Aspirin-2024-01-02-09-00",
        "Aspirin-2024-01-02-21-00",
    ]
    for r in reminders:
        assert r.medicine == "Aspirin"
        assert r.dosage == "500mg"
        assert r.type == "Regular"
        assert r.taken is False
        assert r.contact_number == "+1555"


@pytest.mark.parametrize("frequency,per_day", [("once", 1), ("twice", 2), ("thrice", 3), ("four", 4)])
@pytest.mark.parametrize("days", [1, 3, 7])
def test_count_is_days_times_doses(frequency, per_day, days):
    reminders = expand_reminders("Med", "1 tab", frequency, date(2024, 3, 1), days)
    assert len(reminders) == days * per_day


def test_day_major_order():
    reminders = expand_reminders("Med", "1 tab", "thrice", "2024-03-30", 3)
    stamps = [r.scheduled_at() for r in reminders]

    assert stamps == sorted(stamps)
    assert [r.date for r in reminders[:3]] == ["2024-03-30"] * 3
    assert reminders[3].date == "2024-03-31"
    assert reminders[-1].date == "2024-04-01"


def test_custom_times_override_any_label():
    reminders = expand_reminders("Med", "1 tab", "once", "2024-01-01", 2, ["07:00", "12:30", "18:45"])

    assert len(reminders) == 6
    assert [r.time for r in reminders[:3]] == ["7:00 AM", "12:30 PM", "6:45 PM"]


def test_custom_time_order_is_kept():
    reminders = expand_reminders("Med", "1 tab", "custom", "2024-01-01", 1, ["20:00", "08:00"])
    assert [r.time for r in reminders] == ["8:00 PM", "8:00 AM"]


def test_same_minute_ids_collide():
    reminders = expand_reminders("X", "1mg", "custom", "2024-01-01", "1", ["08:15", "08:15"])

    assert len(reminders) == 2
    assert reminders[0].id == reminders[1].id == "X-2024-01-01-08-15"


def test_expansion_is_deterministic():
    first = expand_reminders("Med", "5ml", "four", "2024-02-28", 3)
    second = expand_reminders("Med", "5ml", "four", "2024-02-28", 3)

    assert [r.id for r in first] == [r.id for r in second]
    assert first == second


def test_midnight_and_noon_display():
    reminders = expand_reminders("Med", "5ml", "custom", "2024-01-01", 1, ["00:05", "12:00"])
    assert [r.time for r in reminders] == ["12:05 AM", "12:00 PM"]
    assert reminders[0].scheduled_at() == datetime(2024, 1, 1, 0, 5)


@pytest.mark.parametrize("duration", ["0", "-3", "abc", "", None, 0])
def test_invalid_duration_rejected(duration):
    with pytest.raises(ReminderValidationError):
        expand_reminders("Med", "5ml", "once", "2024-01-01", duration)


def test_unknown_frequency_without_times_rejected():
    with pytest.raises(ReminderValidationError):
        expand_reminders("Med", "5ml", "hourly", "2024-01-01", 1)
    with pytest.raises(ReminderValidationError):
        expand_reminders("Med", "5ml", "custom", "2024-01-01", 1, [])


def test_bad_start_date_rejected():
    with pytest.raises(ReminderValidationError):
        expand_reminders("Med", "5ml", "once", "01/02/2024", 1)


def test_blank_medicine_rejected():
    with pytest.raises(ReminderValidationError):
        expand_reminders("  ", "5ml", "once", "2024-01-01", 1)


@pytest.fixture
def store():
    store = ReminderStore()
    store.append(expand_reminders("Aspirin", "500mg", "twice", "2024-01-01", 1))
    return store


def test_append_keeps_insertion_order(store):
    store.append(expand_reminders("Zinc", "10mg", "once", "2023-12-31", 1))

    assert [r.medicine for r in store] == ["Aspirin", "Aspirin", "Zinc"]
    assert len(store) == 3


def test_mark_taken_replaces_record(store):
    before = store.get("Aspirin-2024-01-01-09-00")

    assert store.mark_taken("Aspirin-2024-01-01-09-00") is True

    after = store.get("Aspirin-2024-01-01-09-00")
    assert after.taken is True
    assert before.taken is False
    assert after.id == before.id
    assert store.get("Aspirin-2024-01-01-21-00").taken is False


def test_unknown_id_is_noop(store):
    snapshot = store.all()

    assert store.mark_taken("Nope-2024-01-01-09-00") is False
    assert store.all() == snapshot


def test_mark_taken_is_idempotent(store):
    store.mark_taken("Aspirin-2024-01-01-21-00")
    snapshot = store.all()

    store.mark_taken("Aspirin-2024-01-01-21-00")

    assert store.all() == snapshot


def test_all_returns_a_copy(store):
    records = store.all()
    records.clear()
    assert len(store) == 2


def test_duplicate_ids_are_kept():
    store = ReminderStore()
    store.append(expand_reminders("X", "1mg", "once", "2024-01-01", 1))
    store.append(expand_reminders("X", "1mg", "once", "2024-01-01", 1))

    assert len(store) == 2
    store.mark_taken("X-2024-01-01-09-00")
    assert all(r.taken for r in store)


def test_reminder_is_immutable():
    reminder = Reminder(id="a", medicine="A", dosage="1", time="9:00 AM", date="2024-01-01")
    with pytest.raises(AttributeError):
        reminder.taken = True


def test_update_cannot_change_id(store):
    snapshot = store.all()

    with pytest.raises(ReminderValidationError):
        store.update_by_identity("Aspirin-2024-01-01-09-00", lambda r: replace(r, id="other"))

    assert store.all() == snapshot


def test_update_cannot_untake(store):
    store.mark_taken("Aspirin-2024-01-01-09-00")
    snapshot = store.all()

    with pytest.raises(ReminderValidationError):
        store.update_by_identity("Aspirin-2024-01-01-09-00", lambda r: replace(r, taken=False))

    assert store.all() == snapshot
