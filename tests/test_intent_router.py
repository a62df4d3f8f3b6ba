import pytest

from collegegpt.core.routing_types import ExtractedParams, Intent
from collegegpt.nlp.intent_router import INTENT_RULES, classify


@pytest.mark.parametrize(
    "question",
    ["what's the weather today", "tell me a joke", "", "   "],
)
def test_out_of_domain_or_blank_is_none(question):
    intent, params = classify(question)
    assert intent is Intent.NONE
    assert params == ExtractedParams()


def test_faculty_field_request():
    intent, params = classify("email of Ramesh")
    assert intent is Intent.FACULTY
    assert params.person_name == "Ramesh"
    assert params.requested_field == "email"
    assert params.department is None


def test_faculty_department_listing():
    intent, params = classify("show CSE faculty")
    assert intent is Intent.FACULTY
    assert params.department == "cs"
    assert params.person_name is None
    assert params.requested_field is None


def test_placements_summary_with_year():
    intent, params = classify("placements 2024-25")
    assert intent is Intent.PLACEMENTS
    assert params.year == "2024-25"


def test_highest_package():
    intent, params = classify("What was the highest package in 2023?")
    assert intent is Intent.HIGHEST_PACKAGE
    assert params.year == "2023-24"


def test_company_offers():
    intent, params = classify("how many offers from Infosys in 2024")
    assert intent is Intent.COMPANY_OFFERS
    assert params.company == "infosys"
    assert params.year == "2024-25"


def test_offers_without_company_is_summary():
    intent, params = classify("total placement offers")
    assert intent is Intent.PLACEMENTS
    assert params.company is None
    assert params.year is None


def test_college_info():
    intent, params = classify("Where is the college located?")
    assert intent is Intent.COLLEGE_INFO
    assert params.college_fact == "address"


def test_curriculum():
    intent, params = classify("CSE semester 3 subjects")
    assert intent is Intent.CURRICULUM
    assert params.department == "cs"
    assert params.semester == 3


def test_in_domain_without_sub_intent_is_faq():
    intent, params = classify("is hostel facility available")
    assert intent is Intent.FAQ
    assert params.normalized_question == "is hostel facility available"


def test_priority_faculty_before_placements():
    intent, _ = classify("placement cell staff email")
    assert intent is Intent.FACULTY


def test_priority_placements_before_college_info():
    intent, _ = classify("placements of the aicte approved college")
    assert intent is Intent.PLACEMENTS


def test_rule_order_is_fixed():
    assert [intent for _, intent in INTENT_RULES] == [
        Intent.FACULTY,
        Intent.PLACEMENTS,
        Intent.COLLEGE_INFO,
        Intent.CURRICULUM,
    ]


def test_contact_words_without_a_person_are_not_faculty():
    intent, params = classify("What is the phone number of the college?")
    assert intent is Intent.FAQ
    assert params.person_name is None
    assert params.requested_field is None


def test_contact_words_with_department_stay_faculty():
    intent, params = classify("CSE phone number")
    assert intent is Intent.FACULTY
    assert params.department == "cs"
    assert params.requested_field == "phone"


@pytest.mark.parametrize(
    "question, department",
    [
        ("computer science faculty", "cs"),
        ("faculty of mechanical engineering", "mech"),
        ("electronics and communication faculty", "ece"),
        ("Faculty of Computer Science", "cs"),
    ],
)
def test_spelled_out_department_listing(question, department):
    intent, params = classify(question)
    assert intent is Intent.FACULTY
    assert params.department == department
    assert params.person_name is None
    assert params.requested_field is None


def test_department_word_in_listing_is_not_a_field_request():
    intent, params = classify("List faculty of CSE department")
    assert intent is Intent.FACULTY
    assert params.department == "cs"
    assert params.person_name is None
    assert params.requested_field is None


def test_department_field_for_named_person():
    intent, params = classify("which department is Professor Kavya in")
    assert intent is Intent.FACULTY
    assert params.person_name == "Kavya"
    assert params.requested_field == "department"
