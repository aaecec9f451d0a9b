"""Test config resolution and validation with Pydantic."""

import pytest
from pydantic import ValidationError

from dnatri.schemas import ParamConfig, UserConfig, CLIConfig, InternalConfig
from dnatri.schemas.resolve import resolve_config, deep_merge

pytestmark = pytest.mark.unit


class TestConfigResolution:
    """Test resolve_config() precedence and merging."""

    def test_resolve_config_all_defaults(self):
        """Resolving with no user/CLI overrides uses all ParamConfig defaults."""
        config = resolve_config(ParamConfig(), None, None)

        assert isinstance(config, InternalConfig)
        assert config.thresholds.minimum_size_cm == 7.0
        assert config.thresholds.minimum_matches == 3
        assert config.thresholds.overlap_threshold == 0.5
        assert config.features.enable_confidence_scoring is True
        assert config.features.enable_relationship_prediction is False
        assert config.features.enable_cross_verification is False
        assert config.tree_path is None

    def test_user_config_overrides_param_config(self):
        user = UserConfig(MIN_SIZE_CM=10, MIN_MATCHES=4)
        config = resolve_config(ParamConfig(), user, None)

        assert config.thresholds.minimum_size_cm == 10.0
        assert config.thresholds.minimum_matches == 4

    def test_nested_user_sections_win_over_flat_aliases(self):
        user = UserConfig.model_validate({
            "MIN_MATCHES": 4,
            "thresholds": {"minimum_matches": 5},
        })
        config = resolve_config(ParamConfig(), user, None)
        assert config.thresholds.minimum_matches == 5

    def test_cli_beats_user(self):
        user = UserConfig(BASE_DIR="/data/user", PREDICT_RELATIONSHIPS=False)
        cli = CLIConfig(base_dir="/data/cli", predict_relationships=True)
        config = resolve_config(ParamConfig(), user, cli)

        assert config.base_dir == "/data/cli"
        assert config.features.enable_relationship_prediction is True

    def test_dict_inputs_accepted(self):
        config = resolve_config({}, {"MIN_MATCHES": 2}, {"log_level": "DEBUG"})
        assert config.thresholds.minimum_matches == 2
        assert config.logging.level == "DEBUG"

    def test_user_aliases_extend_defaults(self):
        user = UserConfig.model_validate({"loader": {"column_aliases": {"match_name": ["Relative"]}}})
        config = resolve_config(ParamConfig(), user, None)

        aliases = config.loader.column_aliases["match_name"]
        assert aliases[0] == "Match Name"
        assert aliases[-1] == "Relative"

    def test_internal_config_is_frozen(self):
        config = resolve_config(ParamConfig(), None, None)
        with pytest.raises(ValidationError):
            config.base_dir = "/elsewhere"

    def test_minimum_matches_below_two_rejected(self):
        with pytest.raises(ValidationError):
            resolve_config(ParamConfig(), UserConfig(MIN_MATCHES=1), None)

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValidationError, match="sum to 1.0"):
            ParamConfig.model_validate({"scoring": {"weights": {"size": 0.9}}})


def test_deep_merge():
    base = {"a": 1, "b": {"c": 2, "d": 3}}
    override = {"b": {"d": 4, "e": 5}, "f": 6}
    assert deep_merge(base, override) == {"a": 1, "b": {"c": 2, "d": 4, "e": 5}, "f": 6}
    assert base == {"a": 1, "b": {"c": 2, "d": 3}}
