"""
Tests for configuration helpers and environment overrides.
"""

import pytest

from actorfeatures.core import config
from actorfeatures.core.config import EnvOverrides


@pytest.fixture
def env():
    return EnvOverrides(environ={"PRESET": "from-process"})


class TestEnvOverrides:

    def test_falls_back_to_process_environment(self, env):
        assert env.get("PRESET") == "from-process"

    def test_missing_is_empty(self, env):
        assert env.get("NOT_SET") == ""

    def test_override_wins(self, env):
        env.set("PRESET", "overridden")
        assert env.get("PRESET") == "overridden"


class TestActorTypeConfig:

    def test_default_actor_type(self, env):
        assert config.get_actor_type(env) == "testactorfeatures"

    def test_actor_type_override(self, env):
        env.set(config.ACTOR_TYPE_ENV_NAME, "otheractor")
        assert config.get_actor_type(env) == "otheractor"

    @pytest.mark.parametrize("value,expected", [
        ("", 0), ("7", 7), ("+4", 4), ("-2", -2), ("seven", 0), (" 3 ", 0), ("3_0", 0), ("3.0", 0),
    ])
    def test_reminder_partitions(self, env, value, expected):
        env.set(config.ACTOR_REMINDERS_PARTITIONS_ENV_NAME, value)
        assert config.get_actor_reminders_partitions(env) == expected

    def test_dapr_config(self, env):
        assert config.dapr_config(env) == {
            "entities": ["testactorfeatures"],
            "actorIdleTimeout": "1h",
            "actorScanInterval": "30s",
            "drainOngoingCallTimeout": "30s",
            "drainRebalancedActors": True,
            "remindersStoragePartitions": 0,
        }


class TestSidecarUrls:

    def test_state_urls(self):
        assert config.actor_save_state_url("t", "1") == f"{config.DAPR_V1_URL}/actors/t/1/state/"
        assert config.actor_get_state_url("t", "1", "key1") == f"{config.DAPR_V1_URL}/actors/t/1/state/key1/"

    def test_method_url(self):
        assert config.actor_method_url("t", "1", "reminders", "r1") == \
            f"{config.DAPR_V1_URL}/actors/t/1/reminders/r1"
