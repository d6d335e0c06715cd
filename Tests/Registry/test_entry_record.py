# test_entry_record.py
#
# Imports
import pytest
#
# Third-party imports
from pydantic import ValidationError
#
# Local imports
from freemind_cli.Registry.Entry_Record import (
    UNIDENTIFIED, Identified, Record, format_due,
)
#
############################################################################################################################
#
# Functions:

class TestRecordIdentity:
    def test_identified_records_with_same_id_are_equal(self):
        a = Record(id=7, title="A", description="first")
        b = Record(id=7, title="B", description="second", due=10)
        assert a == b
        assert not (a != b)

    def test_different_ids_are_not_equal(self):
        assert Record(id=7, title="A") != Record(id=8, title="A")

    def test_unidentified_record_is_not_equal_to_itself(self):
        record = Record(title="Draft")
        assert record.identity is UNIDENTIFIED
        assert record != record
        assert not (record == Record(title="Draft"))

    def test_unidentified_never_equals_identified(self):
        assert Record(title="X") != Record(id=1, title="X")
        assert Record(id=1, title="X") != Record(title="X")

    def test_identity_reports_identified(self):
        assert Record(id=42, title="X").identity == Identified(42)

    def test_comparison_with_other_types(self):
        assert Record(id=1, title="X") != 1


class TestRecordValidation:
    @pytest.mark.parametrize("bad_id", [0, -1, 65536])
    def test_id_must_fit_sixteen_bits_and_be_non_zero(self, bad_id):
        with pytest.raises(ValidationError):
            Record(id=bad_id, title="X")

    def test_due_must_fit_thirty_two_bits(self):
        with pytest.raises(ValidationError):
            Record(title="X", due=2 ** 32)
        with pytest.raises(ValidationError):
            Record(title="X", due=-5)

    def test_assignment_is_validated(self):
        record = Record(title="X")
        with pytest.raises(ValidationError):
            record.id = 70000

    def test_local_fields_are_excluded_from_dump(self):
        record = Record(id=3, title="X", removed=True, tags=["work"])
        dumped = record.model_dump()
        assert "removed" not in dumped
        assert "tags" not in dumped
        assert dumped["id"] == 3


class TestRecordText:
    def test_get_text_and_timestamp(self):
        record = Record(id=1, title="Dentist", description="Check-up", due=1700000000)
        assert record.get_text() == "Dentist Check-up"
        assert record.get_timestamp() == 1700000000

    def test_matches_is_case_insensitive_and_looks_at_tags(self):
        record = Record(id=1, title="Dentist", description="Check-up", tags=["Health"])
        assert record.matches("dent")
        assert record.matches("CHECK")
        assert record.matches("health")
        assert not record.matches("groceries")
        assert record.matches("   ")

    def test_str_lists_all_fields(self):
        text = str(Record(id=5, title="T", description="D", due=0))
        assert text == "ID: 5\nTitle: T\nDescription: D\nDue: Thu, 01 Jan 1970 00:00:00 +0000\n"

    def test_str_without_id_or_due(self):
        assert str(Record(title="T")) == "ID: None\nTitle: T\nDescription: \nDue: None\n"


def test_format_due_none():
    assert format_due(None) == "None"


def test_format_due_utc():
    assert format_due(1700000000) == "Tue, 14 Nov 2023 22:13:20 +0000"

#
# End of test_entry_record.py
############################################################################################################################
