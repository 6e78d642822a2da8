from typing import ClassVar


class Defaults:
    GROUP = "Default"
    LEFT_NAME = "Left"
    RIGHT_NAME = "Right"
    MODE = "ms"
    SUMMARY_FILENAME_PREFIX = "ig-summary-"
    DIFF_FILENAME = "diff"
    TRUNCATE_LENGTH = 30
    PACKAGE_CACHE_DIR = "~/.fhir/packages"
    JSON_INDENT = 2


class ColumnNames:
    GROUP = "Group"
    PROFILE_TITLE = "Profile Title"
    DATA_ELEMENT_NAME = "Data Element Name"
    DEFINITION = "Definition"
    REQUIRED = "Required?"
    OCCURRENCES = "Occurrences Allowed"
    DATA_TYPE = "Data Type"
    VALUE_SET_URI = "Value Set URI"
    VALUE_SET_BINDING = "Value Set Binding"
    FHIR_ELEMENT = "FHIR Element (R4)"
    SOURCE_PROFILE_URI = "Source Profile URI"
    ELEMENT_SD_URI = "Element StructureDefinition URI"
    USED_BY_MEASURE = "Used By Measure"
    NOTE = "Note"
    FILE = "File"

    ORDERED: ClassVar[tuple[str, ...]] = (
        GROUP,
        PROFILE_TITLE,
        DATA_ELEMENT_NAME,
        DEFINITION,
        REQUIRED,
        OCCURRENCES,
        DATA_TYPE,
        VALUE_SET_URI,
        VALUE_SET_BINDING,
        FHIR_ELEMENT,
        SOURCE_PROFILE_URI,
        ELEMENT_SD_URI,
        USED_BY_MEASURE,
    )


class ValueSetColumns:
    NAME = "Value set name"
    URI = "Value set URI"
    CODE_SYSTEM = "Code system"
    LOGICAL_DEFINITION = "Logical definition"
    CODE = "Code"
    CODE_DESCRIPTION = "Code description"

    ORDERED: ClassVar[tuple[str, ...]] = (
        NAME,
        URI,
        CODE_SYSTEM,
        LOGICAL_DEFINITION,
        CODE,
        CODE_DESCRIPTION,
    )


class DocumentKeys:
    PROFILES = "profiles"
    PROFILE_ELEMENTS = "profileElements"
    VALUE_SETS = "valueSets"
    VALUE_SET_ELEMENTS = "valueSetElements"
    EXTENSIONS = "extensions"
    CODE_SYSTEMS = "codeSystems"
    METADATA = "metadata"


class FHIRTypes:
    EXTENSION = "Extension"
    BACKBONE_ELEMENT = "BackboneElement"
    REFERENCE = "Reference"

    CODED: ClassVar[frozenset[str]] = frozenset({"codeableconcept", "code", "coding"})

    # A value[x] allowing all of these is shown as "Any"
    ANY_VALUE: ClassVar[frozenset[str]] = frozenset(
        {
            "Quantity",
            "CodeableConcept",
            "string",
            "boolean",
            "integer",
            "Range",
            "Ratio",
            "SampledData",
            "time",
            "dateTime",
            "Period",
        }
    )

    SIMPLE_EXTENSION_VALUE_SUFFIXES: ClassVar[tuple[str, ...]] = (
        "valueCoding",
        "valueCode",
        "valueCodeableConcept",
    )


class CodeSystems:
    ICD10CM: ClassVar[frozenset[str]] = frozenset(
        {"ICD-10 CM", "http://hl7.org/fhir/sid/icd-10-cm"}
    )


class FilterOperators:
    PHRASES: ClassVar[dict[str, str]] = {
        "=": " = ",
        "is-a": " is ",
        "descendent-of": " is a descendent of ",
        "is-not-a": " is not ",
        "regex": " matches pattern ",
        "in": " in ",
        "not-in": " not in ",
        "generalizes": " generalizes ",
        "exists": " exists ",
    }
    DEFAULT_PHRASE = " "


class Extensions:
    USED_BY_MEASURE = "/StructureDefinition/used-by-measure"


class CorePackages:
    BY_FHIR_VERSION: ClassVar[dict[str, tuple[str, str]]] = {
        "4.0.1": ("hl7.fhir.r4.core", "4.0.1"),
        "4.3.0": ("hl7.fhir.r4b.core", "4.3.0"),
        "5.0.0": ("hl7.fhir.r5.core", "5.0.0"),
    }


class InputFiles:
    SUSHI_CONFIG = "sushi-config.yaml"
    PACKAGE_JSON = "package.json"
    SUSHI_OUTPUT_DIR = "output"
    CONFIG_FILE = "ig_summary.toml"


class LogLevels:
    NORMAL = 0
    VERBOSE = 1
    DEBUG = 2


class SummaryColumns:
    """Headers of the profile, value set, extension and code system listings."""

    LABELS: ClassVar[dict[str, str]] = {
        "group": "Group",
        "title": "Title",
        "url": "URL",
        "description": "Description",
    }


class SheetNames:
    INFORMATION = "IG information"
    PROFILES = "Profiles"
    DATA_ELEMENTS = "Data elements"
    VALUE_SETS = "Value sets"
    VALUE_SET_CODES = "Value set codes"
    EXTENSIONS = "Extensions"

    ADDED_PROFILES = "Added profiles"
    REMOVED_PROFILES = "Removed profiles"
    ADDED_ELEMENTS = "Added elements"
    REMOVED_ELEMENTS = "Removed elements"
    CHANGED_ELEMENTS = "Changed elements"
    ADDED_VALUE_SETS = "Added value sets"
    REMOVED_VALUE_SETS = "Removed value sets"
    ADDED_CODES = "Value sets - added codes"
    REMOVED_CODES = "Value sets - removed codes"
    CHANGED_CODES = "Value sets - changed codes"
