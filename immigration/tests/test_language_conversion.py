"""
Tests for language test -> CLB conversion.
"""

import pytest

from immigration.logic import InputValidationError, convert_to_clb


def test_ielts_to_clb():
    levels = convert_to_clb("ielts", {"listening": 8.5, "reading": 8.0, "speaking": 7.5, "writing": 7.5})
    assert levels.as_tuple() == (10, 10, 10, 10)

    levels = convert_to_clb("IELTS", {"listening": 6.0, "reading": 6.5, "speaking": 5.5, "writing": 3.5})
    assert levels.listening == 7
    assert levels.reading == 8
    assert levels.speaking == 6
    assert levels.writing == 0


def test_celpip_levels_round_and_cap():
    levels = convert_to_clb("celpip", {"listening": 9.4, "reading": 9.5, "speaking": 12, "writing": 7})
    assert levels.listening == 9
    assert levels.reading == 10
    assert levels.speaking == 10
    assert levels.writing == 7


def test_french_tests():
    tef = convert_to_clb("tef", {"listening": 300, "reading": 250, "speaking": 400, "writing": 100})
    assert (tef.listening, tef.reading, tef.speaking, tef.writing) == (9, 9, 10, 0)

    tcf = convert_to_clb("tcf", {"listening": 549, "reading": 400, "speaking": 4, "writing": 3})
    assert (tcf.listening, tcf.reading, tcf.speaking, tcf.writing) == (10, 5, 4, 0)


def test_unsupported_test_rejected():
    with pytest.raises(InputValidationError) as exc_info:
        convert_to_clb("toeic", {"listening": 400})
    assert exc_info.value.errors[0]["field"] == "test_type"


def test_missing_and_negative_scores_rejected():
    with pytest.raises(InputValidationError) as exc_info:
        convert_to_clb("ielts", {"listening": 7.0, "reading": -1, "speaking": 7.0})

    fields = {e["field"]: e["type"] for e in exc_info.value.errors}
    assert fields == {"reading": "greater_than_equal", "writing": "missing"}


def test_scores_above_test_scale_rejected():
    with pytest.raises(InputValidationError) as exc_info:
        convert_to_clb("ielts", {"listening": 7.0, "reading": 7.0, "speaking": 15, "writing": 9.0})
    assert [(e["field"], e["type"]) for e in exc_info.value.errors] == [("speaking", "less_than_equal")]

    with pytest.raises(InputValidationError) as exc_info:
        convert_to_clb("celpip", {"listening": 13, "reading": 12, "speaking": 10, "writing": 10})
    assert [e["field"] for e in exc_info.value.errors] == ["listening"]

    with pytest.raises(InputValidationError) as exc_info:
        convert_to_clb("tcf", {"listening": 700, "reading": 699, "speaking": 21, "writing": 20})
    assert [e["field"] for e in exc_info.value.errors] == ["listening", "speaking"]
