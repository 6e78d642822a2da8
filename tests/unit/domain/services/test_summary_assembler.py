"""Tests for assembling a whole data dictionary document."""

import pytest

from fhir_fixtures import (
    EXAMPLE_BASE,
    InMemoryDefinitions,
    element,
    patient_profile,
    race_extension,
    structure_definition,
    value_set,
)
from ig_summary.domain.entities.data_dictionary import DataDictionaryMetadata
from ig_summary.domain.entities.data_element import element_key
from ig_summary.domain.entities.settings import DataDictionaryMode, DataDictionarySettings
from ig_summary.domain.services.elements import ElementResolver
from ig_summary.domain.services.summary_assembler import SummaryAssembler
from ig_summary.domain.services.value_set_expander import ValueSetExpander

RACE_VS = "http://example.org/fhir/ValueSet/race"


def abstract_profile():
    return structure_definition(
        "abstract-patient",
        "Patient",
        [element("Patient"), element("Patient.name", type="HumanName", mustSupport=True)],
        abstract=True,
        title="Abstract Patient",
    )


@pytest.fixture
def catalog():
    return InMemoryDefinitions(
        patient_profile(),
        race_extension(),
        abstract_profile(),
        value_set(
            RACE_VS,
            "Race",
            [{"system": "urn:oid:2.16.840.1.113883.6.238", "concept": [{"code": "1"}]}],
            description="Race codes.",
        ),
        {
            "resourceType": "CodeSystem",
            "url": "http://example.org/fhir/CodeSystem/local",
            "name": "LocalCodes",
            "title": "Local Codes",
        },
    )


def assemble(catalog, diagnostics, groups=None, **settings):
    settings = DataDictionarySettings(**settings)
    assembler = SummaryAssembler(
        resolver=ElementResolver(catalog, settings, diagnostics),
        expander=ValueSetExpander(settings, diagnostics),
    )
    return assembler.assemble(
        catalog, DataDictionaryMetadata(title="My IG", version="1.0.0"), groups
    )


class TestSummaryAssembler:
    """Tests for SummaryAssembler."""

    def test_must_support_elements_only(self, catalog, diagnostics):
        document = assemble(catalog, diagnostics)

        assert [r.fhir_element for r in document.profile_elements] == [
            "Patient.extension:race",
            "Patient.identifier",
            "Patient.gender",
            "Patient.birthDate",
        ]

    def test_all_elements(self, catalog, diagnostics):
        document = assemble(catalog, diagnostics, mode=DataDictionaryMode.ALL)

        elements = [r.fhir_element for r in document.profile_elements]
        assert "Patient.telecom" in elements
        assert "Patient.contact.name" in elements
        assert "Patient" not in elements

    def test_abstract_profiles_have_no_elements(self, catalog, diagnostics):
        document = assemble(catalog, diagnostics)

        assert {r.profile_title for r in document.profile_elements} == {"My Patient"}
        assert "Abstract Patient" in [p.title for p in document.profiles]

    def test_excluded_elements_are_reported(self, catalog, diagnostics):
        document = assemble(catalog, diagnostics, exclude_element=("Patient.gender",))

        assert "Patient.gender" not in [r.fhir_element for r in document.profile_elements]
        assert (
            "Patient.gender wasn't included in the output summary report"
            in diagnostics.of("warning")
        )

    def test_used_by_measure_flag(self, catalog, diagnostics):
        document = assemble(catalog, diagnostics)

        flagged = {
            r.fhir_element: r.used_by_measure for r in document.profile_elements
        }
        assert flagged["Patient.birthDate"] == "true"
        assert flagged["Patient.gender"] == ""

    def test_profile_groups(self, catalog, diagnostics):
        document = assemble(catalog, diagnostics, groups={"my-patient": "Core"})

        groups = {p.title: p.group for p in document.profiles}
        assert groups == {"My Patient": "Core", "Abstract Patient": "Default"}
        assert {r.group for r in document.profile_elements} == {"Core"}

    def test_profiles_sorted_by_group_then_title(self, catalog, diagnostics):
        document = assemble(catalog, diagnostics)

        assert [p.title for p in document.profiles] == ["Abstract Patient", "My Patient"]

    def test_listings(self, catalog, diagnostics):
        document = assemble(catalog, diagnostics)

        assert [(e.title, e.url) for e in document.extensions] == [
            ("Race", f"{EXAMPLE_BASE}/race")
        ]
        assert [(v.title, v.description) for v in document.value_sets] == [
            ("Race", "Race codes.")
        ]
        assert [c.title for c in document.code_systems] == ["Local Codes"]
        assert [r.code for r in document.value_set_elements] == ["1"]
        assert document.metadata.title == "My IG"

    def test_rows_are_not_repeated(self, diagnostics):
        """Elements reached twice (e.g. a lone value slice) appear once."""
        profile = structure_definition(
            "my-observation",
            "Observation",
            [
                element("Observation"),
                element("Observation.value[x]", type="Quantity", mustSupport=True),
                element(
                    "Observation.value[x]:valueQuantity",
                    sliceName="valueQuantity",
                    type="Quantity",
                    mustSupport=True,
                ),
            ],
        )
        document = assemble(InMemoryDefinitions(profile), diagnostics)

        assert [r.fhir_element for r in document.profile_elements] == [
            "Observation.value[x]"
        ]

    def test_assembling_twice_gives_identical_rows(self, catalog, diagnostics):
        first = assemble(catalog, diagnostics, mode=DataDictionaryMode.ALL)
        second = assemble(catalog, diagnostics, mode=DataDictionaryMode.ALL)

        assert first.profile_elements == second.profile_elements
        assert first.to_json_dict() == second.to_json_dict()

    def test_element_keys_are_unique(self, catalog, diagnostics):
        document = assemble(catalog, diagnostics, mode=DataDictionaryMode.ALL)

        keys = [
            element_key(
                row.source_profile_uri,
                row.element_structure_definition_uri,
                row.fhir_element,
            )
            for row in document.profile_elements
        ]
        assert len(keys) > 4
        assert len(keys) == len(set(keys))
