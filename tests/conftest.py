import pytest

from fhir_fixtures import (
    InMemoryDefinitions,
    RecordingDiagnostics,
    patient_profile,
    race_extension,
)


@pytest.fixture(autouse=True)
def _isolated_package_cache(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> None:
    """Point the FHIR package cache at an empty folder.

    Tests must never read the developer's ``~/.fhir/packages``.
    """
    monkeypatch.setenv(
        "IG_SUMMARY_PACKAGE_CACHE", str(tmp_path_factory.mktemp("fhir-packages"))
    )
    monkeypatch.delenv("IG_SUMMARY_MODE", raising=False)
    monkeypatch.delenv("IG_SUMMARY_TRUNCATE", raising=False)


@pytest.fixture
def diagnostics() -> RecordingDiagnostics:
    return RecordingDiagnostics()


@pytest.fixture
def definitions() -> InMemoryDefinitions:
    return InMemoryDefinitions(patient_profile(), race_extension())
