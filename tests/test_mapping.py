from __future__ import annotations

from conftest import SAMPLE_LINE, SAMPLE_RESPONSE
from models.enrichment import EnrichmentResponse, ResponsePerson
from services.mapping import format_phone_number, map_person, merge_enriched
from services.record_parser import parse_record


def test_format_phone_number():
    assert format_phone_number("2175550101") == "217-555-0101"
    assert format_phone_number("(217) 555 0101") == "217-555-0101"
    assert format_phone_number("12345") is None
    assert format_phone_number(None) is None


def test_map_person_builds_api_payload():
    person = parse_record(SAMPLE_LINE)
    payload = map_person(person).to_payload()
    assert payload["firstName"] == "John"
    assert payload["middleName"] == "Middle"
    assert payload["lastName"] == "Doe"
    assert payload["dob"] == "01/15/1980"
    assert payload["address"] == {"addressLine1": "123 Main St", "addressLine2": "Springfield, IL 62704"}
    assert payload["phone"] == "217-555-0101"
    assert payload["email"] == "john@doe.com"
    assert isinstance(payload["age"], int)


def test_merge_prefers_response_and_keeps_originals_as_fallback():
    person = parse_record(SAMPLE_LINE)
    response = EnrichmentResponse.model_validate(SAMPLE_RESPONSE).person
    record = merge_enriched(response, person)
    assert record.street == "9 Elm St"
    assert record.city == "Chicago"
    assert record.phones == ["(217) 555-0199", "2175550101"]
    assert record.emails == ["jdoe@gmail.com", "john@doe.com"]
    assert record.to_line() == (
        "ID1;01/15/1980;John Middle Doe;9 Elm St;Chicago;IL;60601;"
        "(217) 555-0199|2175550101;jdoe@gmail.com|john@doe.com"
    )


def test_merge_falls_back_to_original_address():
    person = parse_record(SAMPLE_LINE)
    record = merge_enriched(ResponsePerson(), person)
    assert (record.street, record.city, record.state, record.zip) == ("123 Main St", "Springfield", "IL", "62704")
    assert record.phones == ["2175550101"]
    assert record.emails == ["john@doe.com"]
    assert record.to_line().count(";") == 8


def test_duplicate_contacts_are_listed_once():
    person = parse_record(SAMPLE_LINE)
    response = ResponsePerson.model_validate({"emails": [{"email": "john@doe.com"}], "phones": []})
    record = merge_enriched(response, person)
    assert record.emails == ["john@doe.com"]
