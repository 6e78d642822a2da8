"""Tests for display-name helpers."""

import pytest

from ig_summary.domain.services.elements.naming import humanize_element_name, join_with_or


class TestJoinWithOr:
    @pytest.mark.parametrize(
        ("items", "expected"),
        [
            ([], ""),
            (["string"], "string"),
            (["string", "boolean"], "string or boolean"),
            (["Quantity", "string", "boolean"], "Quantity, string, or boolean"),
        ],
    )
    def test_join(self, items, expected):
        assert join_with_or(items) == expected


class TestHumanizeElementName:
    def test_small_words_stay_lowercase_inside(self):
        """Articles and prepositions are lowercase unless first or last."""
        assert humanize_element_name("reasonForTheVisit") == "Reason for the Visit"

    def test_inner_capitals_are_preserved(self):
        assert humanize_element_name("genomic DNAChange") == "Genomic DNAChange"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("us-core-race", "Us-Core-Race"),
            (
                "extension.ethnicity.detailed-identity-code",
                "Extension > Ethnicity > Detailed-Identity-Code",
            ),
        ],
    )
    def test_hyphenated_names(self, name, expected):
        assert humanize_element_name(name) == expected

    def test_camel_case_path(self):
        assert humanize_element_name("birthDate") == "Birth Date"

    def test_dots_become_separators(self):
        assert (
            humanize_element_name("component.valueCodeableConcept")
            == "Component > Value Codeable Concept"
        )

    def test_polymorphic_marker_is_removed(self):
        assert humanize_element_name("value[x]") == "Value"

    def test_touch_ups_are_applied(self):
        touch_ups = {"Codeable Concept": "CodeableConcept"}

        assert (
            humanize_element_name("valueCodeableConcept", touch_ups)
            == "Value CodeableConcept"
        )
