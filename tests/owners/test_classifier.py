from src.strata_checkin.strata_checkin.core.enums import OwnerKind
from src.strata_checkin.strata_checkin.owners.classifier import classify, is_initials_only, strip_salutation
from src.strata_checkin.strata_checkin.owners.model import OwnerContactInfo


def _contact(main, title=None):
    return OwnerContactInfo(lot_id="1", main_contact_raw=main, title_name_raw=title, unit_number="1")


def test_company_keyword_wins_over_individual_title_name():
    result = classify(_contact("ACME PTY LTD", "J Smith"))

    assert result.kind == OwnerKind.COMPANY
    assert result.name == "ACME PTY LTD"


def test_company_prefers_longer_name_when_both_fields_match():
    result = classify(_contact("ACME P/L", "ACME INVESTMENTS PTY LTD"))

    assert result.kind == OwnerKind.COMPANY
    assert result.name == "ACME INVESTMENTS PTY LTD"


def test_company_detected_from_title_name_only():
    result = classify(_contact("Mr J Smith", "Smith Family Superannuation Fund"))

    assert result.kind == OwnerKind.COMPANY
    assert result.name == "Smith Family Superannuation Fund"


def test_multiple_owners_split_on_ampersand():
    result = classify(_contact("John Smith & Jane Doe"))

    assert result.kind == OwnerKind.INDIVIDUALS
    assert result.names == {"John Smith", "Jane Doe"}


def test_multiple_owners_split_on_and_with_salutations_stripped():
    result = classify(_contact("Mr John Smith and Mrs. Jane Doe"))

    assert result.names == {"John Smith", "Jane Doe"}


def test_initials_only_main_contact_defers_to_title_name():
    result = classify(_contact("Mr J S Mackenzie", "John Stewart Mackenzie"))

    assert result.kind == OwnerKind.INDIVIDUALS
    assert result.names == {"John Stewart Mackenzie"}


def test_initials_kept_when_no_title_name_available():
    result = classify(_contact("Mr J S Mackenzie", None))

    assert result.names == {"J S Mackenzie"}


def test_uppercase_full_name_is_not_treated_as_initials():
    result = classify(_contact("JOHN SMITH", "Jonathan Smith"))

    assert result.names == {"JOHN SMITH"}


def test_falls_back_to_title_name_when_main_contact_empty():
    result = classify(_contact("", "Jane Doe & John Doe"))

    assert result.names == {"Jane Doe", "John Doe"}


def test_bare_salutation_fragment_is_dropped():
    result = classify(_contact("Mr & Mrs Smith"))

    assert result.names == {"Smith"}


def test_duplicate_names_collapse():
    result = classify(_contact("Jane Doe & Jane Doe"))

    assert result.names == {"Jane Doe"}


def test_missing_contact_is_unknown():
    assert classify(None).kind == OwnerKind.UNKNOWN


def test_contact_without_names_is_empty_individuals_not_unknown():
    result = classify(_contact(None, None))

    assert result.kind == OwnerKind.INDIVIDUALS
    assert result.names == frozenset()


def test_malformed_values_do_not_raise():
    result = classify(OwnerContactInfo(lot_id="3", main_contact_raw=12345, title_name_raw=None))

    assert result.kind == OwnerKind.INDIVIDUALS
    assert result.names == {"12345"}


def test_classification_is_deterministic():
    contact = _contact("Mr J S Mackenzie & Mrs A Mackenzie", "John Mackenzie & Anne Mackenzie")

    assert classify(contact) == classify(contact)


def test_initials_helpers():
    assert strip_salutation("Dr. Who") == "Who"
    assert strip_salutation("Drew Barry") == "Drew Barry"
    assert is_initials_only("Mr J.S.")
    assert is_initials_only("J. Smith")
    assert not is_initials_only("John Smith")
    assert not is_initials_only("Mr")
