from medrem.validation import validate_prescription_form

VALID = {
    "medicine_name": "Aspirin",
    "dosage": "500mg",
    "frequency": "twice",
    "duration": "5",
    "start_date": "2024-01-01",
    "phone_number": "+15551234567",
}


def test_valid_form_has_no_errors():
    assert validate_prescription_form(VALID) == {}


def test_every_missing_field_is_reported():
    errors = validate_prescription_form({})
    assert set(errors) == {"medicine_name", "dosage", "frequency", "duration", "start_date", "phone_number"}


def test_whitespace_only_counts_as_missing():
    errors = validate_prescription_form(dict(VALID, medicine_name="   ", dosage="\t"))
    assert set(errors) == {"medicine_name", "dosage"}


def test_duration_must_be_positive_number():
    assert validate_prescription_form(dict(VALID, duration="ten"))["duration"] == "Duration must be a number"
    assert "duration" in validate_prescription_form(dict(VALID, duration="0"))
    assert "duration" in validate_prescription_form(dict(VALID, duration="2.5"))


def test_custom_frequency_needs_times():
    form = dict(VALID, frequency="custom")

    assert validate_prescription_form(form, [])["frequency"] == "At least one time must be set"
    assert "frequency" in validate_prescription_form(form, ["25:00"])
    assert validate_prescription_form(form, ["08:00", "20:00"]) == {}


def test_unknown_frequency():
    assert "frequency" in validate_prescription_form(dict(VALID, frequency="hourly"))


def test_bad_start_date():
    assert "start_date" in validate_prescription_form(dict(VALID, start_date="2024-13-01"))


def test_non_ascii_digits_are_a_duration_error():
    errors = validate_prescription_form(dict(VALID, duration="²"))
    assert errors == {"duration": "Duration must be a number"}
