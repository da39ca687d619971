from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from appengine_kit.config import (
    CloudSdkConfig,
    GcloudRunOptions,
    VersionsSelectionConfiguration,
    load_env_files,
)


_ENV_KEYS = [
    "GCLOUD_METRICS_ENVIRONMENT",
    "GCLOUD_METRICS_ENVIRONMENT_VERSION",
    "GCLOUD_CREDENTIAL_FILE",
    "GCLOUD_FLAGS_FILES",
    "GCLOUD_OUTPUT_FORMAT",
    "GCLOUD_SHOW_STRUCTURED_LOGS",
    "GCLOUD_VERBOSITY",
    "CLOUDSDK_ROOT",
    "GCLOUD_SDK_ROOT",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_from_env_without_variables_is_empty() -> None:
    assert GcloudRunOptions.from_env() == GcloudRunOptions()


def test_from_env_reads_all_options(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GCLOUD_METRICS_ENVIRONMENT", "ci")
    monkeypatch.setenv("GCLOUD_METRICS_ENVIRONMENT_VERSION", "2.0")
    monkeypatch.setenv("GCLOUD_CREDENTIAL_FILE", "/keys/sa.json")
    monkeypatch.setenv("GCLOUD_FLAGS_FILES", "/a.yaml,/b.yaml")
    monkeypatch.setenv("GCLOUD_OUTPUT_FORMAT", "json")
    monkeypatch.setenv("GCLOUD_SHOW_STRUCTURED_LOGS", "always")
    monkeypatch.setenv("GCLOUD_VERBOSITY", "DEBUG")

    opts = GcloudRunOptions.from_env()

    assert opts.metrics_environment == "ci"
    assert opts.metrics_environment_version == "2.0"
    assert opts.credential_file == Path("/keys/sa.json")
    assert opts.flags_files == (Path("/a.yaml"), Path("/b.yaml"))
    assert opts.output_format == "json"
    assert opts.show_structured_logs == "always"
    assert opts.verbosity == "debug"


def test_empty_values_count_as_absent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GCLOUD_OUTPUT_FORMAT", "  ")
    monkeypatch.setenv("GCLOUD_FLAGS_FILES", "")

    opts = GcloudRunOptions.from_env()

    assert opts.output_format is None
    assert opts.flags_files is None


def test_invalid_verbosity_raises_value_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GCLOUD_VERBOSITY", "loud")

    with pytest.raises(ValueError) as excinfo:
        GcloudRunOptions.from_env()

    assert "verbosity" in str(excinfo.value)


def test_with_overrides_only_replaces_given_values() -> None:
    base = GcloudRunOptions(output_format="json", verbosity="info")

    merged = base.with_overrides(output_format=None, verbosity="error", flags_files=["/c.yaml"])

    assert merged.output_format == "json"
    assert merged.verbosity == "error"
    assert merged.flags_files == (Path("/c.yaml"),)
    assert base.verbosity == "info"


def test_with_overrides_rejects_unknown_option() -> None:
    with pytest.raises(TypeError):
        GcloudRunOptions().with_overrides(colour="red")


def test_load_env_files_later_file_wins(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # load_dotenv 가 os.environ 을 직접 바꾸므로 monkeypatch 로 복원 대상에 올려둔다.
    monkeypatch.setenv("GCLOUD_OUTPUT_FORMAT", "unset")
    monkeypatch.setenv("GCLOUD_VERBOSITY", "none")
    (tmp_path / ".env").write_text("GCLOUD_OUTPUT_FORMAT=yaml\nGCLOUD_VERBOSITY=info\n")
    (tmp_path / ".env.gcloud").write_text("GCLOUD_OUTPUT_FORMAT=json\n")

    load_env_files(str(tmp_path))
    opts = GcloudRunOptions.from_env()

    assert opts.output_format == "json"
    assert opts.verbosity == "info"


def test_cloud_sdk_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    assert CloudSdkConfig.from_env().sdk_root is None

    monkeypatch.setenv("GCLOUD_SDK_ROOT", "/opt/sdk")
    assert CloudSdkConfig.from_env().sdk_root == Path("/opt/sdk")

    monkeypatch.setenv("CLOUDSDK_ROOT", "/usr/lib/google-cloud-sdk")
    assert CloudSdkConfig.from_env().sdk_root == Path("/usr/lib/google-cloud-sdk")


def test_selection_configuration_is_immutable() -> None:
    cfg = VersionsSelectionConfiguration(versions=["v1"])

    with pytest.raises(FrozenInstanceError):
        cfg.service = "api"  # type: ignore[misc]


def test_selection_configuration_rejects_bare_string() -> None:
    with pytest.raises(ValueError):
        VersionsSelectionConfiguration(versions="v12")  # type: ignore[arg-type]


def test_selection_configuration_copies_versions() -> None:
    versions = ["v1", "v2"]
    cfg = VersionsSelectionConfiguration(versions=versions)

    versions.clear()

    assert cfg.versions == ("v1", "v2")
