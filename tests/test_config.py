import pytest

from buildwatch.core.config import DEFAULT_API_VERSION, load_settings
from buildwatch.core.errors import ConfigError


def test_load_settings_from_env():
    settings = load_settings(
        env={
            "BUILDWATCH_SERVER_URL": "https://tfs.example.com/tfs/Coll/?x=1",
            "BUILDWATCH_PROJECT": "Radiator",
            "BUILDWATCH_TOKEN": "secret",
            "BUILDWATCH_TIMEOUT": "5",
        }
    )

    assert settings.server_url == "https://tfs.example.com/tfs/Coll"
    assert settings.project == "Radiator"
    assert settings.token == "secret"
    assert settings.timeout == 5.0
    assert settings.api_version == DEFAULT_API_VERSION


def test_explicit_values_win_over_env():
    settings = load_settings(
        "https://other/tfs",
        "Other",
        env={"BUILDWATCH_SERVER_URL": "https://tfs", "BUILDWATCH_PROJECT": "P"},
    )

    assert settings.server_url == "https://other/tfs"
    assert settings.project == "Other"
    assert settings.token is None


@pytest.mark.parametrize(
    "env",
    [
        {},
        {"BUILDWATCH_SERVER_URL": "https://tfs"},
        {"BUILDWATCH_SERVER_URL": "https://tfs", "BUILDWATCH_PROJECT": "P", "BUILDWATCH_TIMEOUT": "soon"},
        {"BUILDWATCH_SERVER_URL": "https://tfs", "BUILDWATCH_PROJECT": "P", "BUILDWATCH_TIMEOUT": "-1"},
    ],
)
def test_load_settings_rejects_incomplete_or_invalid_env(env):
    with pytest.raises(ConfigError):
        load_settings(env=env)


def test_get_client_uses_settings():
    from buildwatch.core.client import get_client
    from buildwatch.core.config import ServerSettings

    client = get_client(
        ServerSettings(server_url="https://tfs/Coll", project="P", token="pat", timeout=3)
    )

    assert str(client.base_url) == "https://tfs/Coll/"
    assert client.timeout.read == 3
    assert client.auth is not None
    client.close()
