import pytest

from collegegpt.nlp.domain_filter import is_in_domain
from collegegpt.nlp.extractors import (
    extract_college_fact,
    extract_company,
    extract_department,
    extract_person_name,
    extract_requested_field,
    extract_semester,
    extract_year,
    parse_year,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2024", "2024-25"),
        ("1999", "1999-00"),
        ("placements in 2009", "2009-10"),
        ("placements 2024-25", "2024-25"),
        ("2024 - 25 stats", "2024-25"),
        ("2024-2025", "2024-25"),
        ("no year here", None),
        ("", None),
    ],
)
def test_parse_year(text, expected):
    assert parse_year(text) == expected


def test_parse_year_always_five_char_span():
    for start in range(1990, 2031):
        year = parse_year(str(start))
        assert year == f"{start}-{(start + 1) % 100:02d}"
        assert len(year) == 7


def test_relative_year_defers_to_latest():
    assert extract_year("placements last year") is None
    assert extract_year("previous year placements 2023") is None
    assert extract_year("placements 2023") == "2023-24"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("faculty of Computer Science", "cs"),
        ("CSE faculty list", "cs"),
        ("computer department staff", "cs"),
        ("electronics faculty", "ece"),
        ("mechanical engineering staff", "mech"),
        ("Civil Engineering professors", "civil"),
        ("faculty list", None),
    ],
)
def test_extract_department(text, expected):
    assert extract_department(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("email of Ramesh", "Ramesh"),
        ("Who is Ramesh Kumar", "Ramesh Kumar"),
        ("phone number for Dr. Anil", "Anil"),
        ("Anita Patil phone", "Anita Patil"),
        ("email of ramesh", "ramesh"),
        ("Show faculty of CSE", None),
        ("list all faculty in cse", None),
        ("faculty list", None),
        ("computer science faculty", None),
        ("faculty of mechanical engineering", None),
        ("electronics and communication faculty", None),
        ("applied sciences staff", None),
    ],
)
def test_extract_person_name(text, expected):
    assert extract_person_name(text) == expected


def test_anchored_pattern_wins_over_capitalized_heuristic():
    assert extract_person_name("Professor details of Suresh") == "Suresh"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("email of ramesh", "email"),
        ("mobile number of anita", "phone"),
        ("how to contact suresh", "phone"),
        ("which dept is kavya in", "department"),
        ("faculty list", None),
    ],
)
def test_extract_requested_field(text, expected):
    assert extract_requested_field(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("how many offers from infosys in 2023", "infosys"),
        ("offers by tcs", "tcs"),
        ("offers at tata consultancy services?", "tata consultancy services"),
        ("offers from google 2024-25", "google"),
        ("placements from infosys", None),
        ("total offers", None),
    ],
)
def test_extract_company(text, expected):
    assert extract_company(text) == expected


def test_extract_semester():
    assert extract_semester("cse sem 3 subjects") == 3
    assert extract_semester("semester 5 syllabus") == 5
    assert extract_semester("syllabus") is None


def test_extract_college_fact():
    assert extract_college_fact("where is the college located") == "address"
    assert extract_college_fact("when was it established") == "established"
    assert extract_college_fact("is it aicte approved") == "affiliation"
    assert extract_college_fact("tell me about the college") is None


def test_domain_filter():
    assert is_in_domain("placements 2024-25")
    assert is_in_domain("EMAIL of Ramesh")
    assert not is_in_domain("what's the weather today")
    assert not is_in_domain("")
