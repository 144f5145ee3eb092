from dataclasses import replace

import pytest

from jitsi_bridge.enums import NamingScheme
from jitsi_bridge.errors import ConfigurationError
from jitsi_bridge.services.configuration import (
    ConfigurationHolder,
    IntegrationSettings,
    PluginConfiguration,
    RouteConfig,
    parse_team_ids,
)


class TestRouteForTeam:
    def test_primary_team_uses_primary_route(self, config):
        assert config.route_for_team("team-primary") is config.primary

    @pytest.mark.parametrize("team_id", ["team-other", "", "team-primary-2", "team"])
    def test_everything_else_uses_secondary_route(self, config, team_id):
        assert config.route_for_team(team_id) is config.secondary


class TestParseTeamIds:
    def test_commas_and_whitespace_separate_ids(self):
        assert parse_team_ids("a, b ,c\nd") == frozenset({"a", "b", "c", "d"})

    def test_empty_value(self):
        assert parse_team_ids("") == frozenset()


class TestValidate:
    def test_route_host(self, config):
        assert config.primary.host == "meet.primary.example"

    def test_relative_url_is_rejected(self):
        with pytest.raises(ConfigurationError):
            RouteConfig(base_url="meet.example").validate("primary route")

    def test_jwt_requires_app_credentials(self):
        with pytest.raises(ConfigurationError):
            RouteConfig(base_url="https://meet.example", jwt_enabled=True).validate("r")

    def test_jwt_requires_positive_validity(self):
        route = RouteConfig(
            base_url="https://meet.example",
            jwt_enabled=True,
            link_valid_minutes=-1,
            app_id="app",
            app_secret="secret",
        )
        with pytest.raises(ConfigurationError):
            route.validate("r")

    def test_route_without_jwt_needs_only_url(self):
        RouteConfig(base_url="https://meet.jit.si").validate("r")

    def test_timeout_must_be_positive(self, config):
        with pytest.raises(ConfigurationError):
            replace(config, request_timeout_seconds=0).validate()

    def test_button_url_is_built_from_service_url(self, config):
        assert config.integration.meetings_url == "https://bridge.example.com/api/v1/meetings"

    @pytest.mark.parametrize("service_url", ["bridge.example.com", "ftp://bridge.example.com", ""])
    def test_service_url_must_be_absolute(self, config, service_url):
        broken = replace(config, integration=IntegrationSettings(service_url=service_url))
        with pytest.raises(ConfigurationError):
            broken.validate()


class TestConfigurationHolder:
    def test_current_loads_lazily(self, config):
        calls = []

        def loader():
            calls.append(1)
            return config

        holder = ConfigurationHolder(loader=loader)
        assert calls == []
        assert holder.current() is config
        assert holder.current() is config
        assert len(calls) == 1

    def test_reload_swaps_snapshot(self, config):
        updated = replace(config, primary_team_ids=frozenset({"team-other"}))
        holder = ConfigurationHolder(loader=lambda: updated, initial=config)
        assert holder.reload() is updated
        assert holder.current().route_for_team("team-other") is updated.primary

    def test_failed_reload_keeps_previous_snapshot(self, config):
        broken = replace(config, primary=RouteConfig(base_url="not a url"))
        holder = ConfigurationHolder(loader=lambda: broken, initial=config)
        with pytest.raises(ConfigurationError):
            holder.reload()
        assert holder.current() is config


class TestFromEnv:
    def test_reads_both_routes_and_team_ids(self, monkeypatch):
        from jitsi_bridge import constants

        monkeypatch.setattr(constants, "JITSI_URL", "https://meet.primary.example")
        monkeypatch.setattr(constants, "JITSI_JWT", True)
        monkeypatch.setattr(constants, "JITSI_APP_ID", "primary-app")
        monkeypatch.setattr(constants, "JITSI_APP_SECRET", "primary-secret")
        monkeypatch.setattr(constants, "JITSI_URL_2", "https://meet.jit.si")
        monkeypatch.setattr(constants, "JITSI_JWT_2", False)
        monkeypatch.setattr(constants, "JITSI_TEAM_IDS", "team-a,team-b")
        monkeypatch.setattr(constants, "JITSI_NAMING_SCHEME", "words")

        config = PluginConfiguration.from_env()

        assert config.primary_team_ids == frozenset({"team-a", "team-b"})
        assert config.route_for_team("team-b").app_id == "primary-app"
        assert config.route_for_team("team-c").host == "meet.jit.si"
        assert config.default_naming_scheme == NamingScheme.ENGLISH

    def test_unknown_default_scheme_is_rejected(self, monkeypatch):
        from jitsi_bridge import constants

        monkeypatch.setattr(constants, "JITSI_NAMING_SCHEME", "klingon")
        with pytest.raises(ConfigurationError):
            PluginConfiguration.from_env()
