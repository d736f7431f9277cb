from lensmatch.config import parse_email_list


def test_parse_mixed_separators_and_duplicates():
    raw = "a@example.com, B@example.com;\nb@example.com\n\nnot-an-email; c@example.org"
    assert parse_email_list(raw) == ["a@example.com", "B@example.com", "c@example.org"]


def test_parse_empty():
    assert parse_email_list(None) == []
    assert parse_email_list("   ") == []
