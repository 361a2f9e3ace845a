from __future__ import annotations

from models.person import Person
from services.record_parser import parse_record
from services.validation import is_valid_dob, validate_person


def test_invalid_month_is_rejected():
    person = parse_record("ID;13/01/2000;Jane Roe;1 St;City;ST;00000;;;")
    errors = validate_person(person)
    assert any("mm/dd/yyyy" in e for e in errors)


def test_age_bounds():
    assert validate_person(Person(dob="01/01/2000", age=0))
    assert validate_person(Person(dob="01/01/2000", age=150))
    assert validate_person(Person(dob="01/01/2000", age=1)) == []
    assert validate_person(Person(dob="01/01/2000", age=120)) == []


def test_missing_name_phone_email_is_allowed():
    person = Person(dob="05/05/1985", age=40)
    assert validate_person(person) == []


def test_empty_dob_and_null_age_pass():
    assert validate_person(Person()) == []


def test_dob_format():
    assert is_valid_dob("12/31/1999")
    assert not is_valid_dob("1/5/1999")
    assert not is_valid_dob("12/31/1899")
    assert not is_valid_dob("02/32/2001")
