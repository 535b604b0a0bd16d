import pytest
from pydantic import ValidationError

from rerouter import config as config_module
from rerouter.config import MIDDLEWARE_NAME, VERSION, ReRouterConfig, create_config


def test_defaults():
    config = ReRouterConfig()

    assert config.version == VERSION == "v0.0.6"
    assert config.github_aliases == ["g", "gh"]
    assert config.own_domain == "alexheld.io"
    assert config.own_owner == "alex-held"
    assert MIDDLEWARE_NAME == "ReRouter-Middleware"


def test_diagnostic_header_names_are_distinct():
    config = ReRouterConfig()

    names = {
        config.header_version.lower(),
        config.header_default_url.lower(),
        config.header_rerouted_url.lower(),
    }
    assert len(names) == 3


def test_create_config_reads_settings(monkeypatch):
    monkeypatch.setattr(config_module.settings, "REROUTER_VERSION", "v9.9.9")
    monkeypatch.setattr(config_module.settings, "REROUTER_GITHUB_ALIASES", ["hub"])
    monkeypatch.setattr(config_module.settings, "REROUTER_OWN_DOMAIN", "example.org")
    monkeypatch.setattr(config_module.settings, "REROUTER_OWN_OWNER", "octocat")
    monkeypatch.setattr(
        config_module.settings, "REROUTER_HEADER_VERSION", "X-Custom-Version"
    )

    config = create_config()

    assert config.version == "v9.9.9"
    assert config.github_aliases == ["hub"]
    assert config.own_domain == "example.org"
    assert config.own_owner == "octocat"
    assert config.header_version == "X-Custom-Version"


@pytest.mark.parametrize(
    "field", ["version", "header_version", "header_default_url", "header_rerouted_url"]
)
def test_values_outside_latin1_are_rejected(field):
    with pytest.raises(ValidationError) as exc_info:
        ReRouterConfig(**{field: "v1 ✓"})

    assert "latin-1" in str(exc_info.value)


def test_empty_header_name_is_rejected():
    with pytest.raises(ValidationError):
        ReRouterConfig(header_version="")


def test_create_config_rejects_unencodable_version(monkeypatch):
    monkeypatch.setattr(config_module.settings, "REROUTER_VERSION", "v1 ✓")

    with pytest.raises(ValidationError):
        create_config()
