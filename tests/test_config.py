"""Tests for simulation configuration."""

import logging

import numpy as np
import pytest

from anchormd.config import (
    DEFAULT_TRAJECTORY_MEMORY,
    DEFAULT_WORKSPACE_MEMORY,
    MIB,
    RegionPolicy,
    SimulationConfig,
    configure_logging,
)
from anchormd.errors import AnchorMDError, ValidationError


class TestRegionPolicy:
    """Tests for the selective stiffness rule."""

    def test_defaults(self):
        """Test default region and spring constants."""
        policy = RegionPolicy()

        assert policy.low == 380
        assert policy.high == 400
        assert policy.soft_k == pytest.approx(1e-4)
        assert policy.rest_k == pytest.approx(1.0)

    def test_contains_is_inclusive(self):
        """Test both region bounds are inside."""
        policy = RegionPolicy()
        residue_ids = np.array([379, 380, 390, 400, 401])

        mask = policy.contains(residue_ids)

        np.testing.assert_array_equal(mask, [False, True, True, True, False])

    def test_stiffness(self):
        """Test per-atom spring constants."""
        policy = RegionPolicy(low=10, high=12, soft_k=0.01, rest_k=2.0)

        k = policy.stiffness([9, 10, 12, 13])

        np.testing.assert_allclose(k, [2.0, 0.01, 0.01, 2.0])

    def test_single_residue_region(self):
        """Test a region with low == high."""
        policy = RegionPolicy(low=5, high=5)

        np.testing.assert_array_equal(policy.contains([4, 5, 6]), [False, True, False])

    def test_inverted_bounds_rejected(self):
        """Test low > high is rejected."""
        with pytest.raises(ValidationError, match="must not exceed"):
            RegionPolicy(low=400, high=380)

    @pytest.mark.parametrize("bounds", [{"low": 380.5}, {"high": True}, {"low": "380"}])
    def test_non_integer_bounds_rejected(self, bounds):
        """Test region bounds must be integers, not floats, bools or strings."""
        with pytest.raises(ValidationError, match="must be an integer"):
            RegionPolicy(**bounds)

    @pytest.mark.parametrize("field_name", ["soft_k", "rest_k"])
    def test_invalid_stiffness_rejected(self, field_name):
        """Test negative and non-finite spring constants are rejected."""
        with pytest.raises(ValidationError):
            RegionPolicy(**{field_name: -1.0})
        with pytest.raises(ValidationError):
            RegionPolicy(**{field_name: float("nan")})


class TestSimulationConfig:
    """Tests for SimulationConfig."""

    def test_defaults(self):
        """Test default configuration values."""
        config = SimulationConfig()

        assert config.max_steps == 10_000
        assert config.temperature == pytest.approx(300.15)
        assert config.dt == pytest.approx(2.0)
        assert config.gradient_threshold == pytest.approx(0.001)
        assert config.use_accelerated_path is False
        assert config.stop_on_convergence is False
        assert config.timeout is None
        assert config.region_policy == RegionPolicy()

    def test_memory_budgets(self):
        """Test default admission budgets."""
        config = SimulationConfig()

        assert config.trajectory_memory_budget == 512 * MIB
        assert config.workspace_memory_budget == 256 * MIB
        assert DEFAULT_TRAJECTORY_MEMORY + DEFAULT_WORKSPACE_MEMORY == 768 * MIB

    def test_immutable(self):
        """Test configuration cannot be mutated."""
        config = SimulationConfig()

        with pytest.raises(AttributeError):
            config.max_steps = 5

    @pytest.mark.parametrize(
        "changes",
        [
            {"max_steps": 0},
            {"max_steps": -10},
            {"max_steps": 1.5},
            {"max_steps": True},
            {"dt": 0.0},
            {"dt": -1.0},
            {"temperature": float("inf")},
            {"gradient_threshold": 0.0},
            {"timeout": 0.0},
            {"progress_interval": 0},
            {"trajectory_memory_budget": 0},
            {"region_policy": (380, 400)},
            {"stop_on_convergence": "no"},
            {"use_accelerated_path": 1},
        ],
    )
    def test_invalid_values_rejected(self, changes):
        """Test invalid parameters raise ValidationError."""
        with pytest.raises(ValidationError):
            SimulationConfig(**changes)

    def test_validation_error_is_value_error(self):
        """Test ValidationError can be caught as ValueError."""
        with pytest.raises(ValueError):
            SimulationConfig(max_steps=0)
        assert issubclass(ValidationError, AnchorMDError)

    def test_replace(self):
        """Test replace returns a modified copy."""
        config = SimulationConfig()

        new = config.replace(max_steps=50, stop_on_convergence=True)

        assert new.max_steps == 50
        assert new.stop_on_convergence is True
        assert config.max_steps == 10_000

    def test_replace_revalidates(self):
        """Test replace runs validation."""
        with pytest.raises(ValidationError):
            SimulationConfig().replace(dt=-2.0)

    def test_json_round_trip(self):
        """Test JSON serialization preserves all fields."""
        config = SimulationConfig(
            max_steps=123,
            region_policy=RegionPolicy(low=1, high=9, soft_k=0.5, rest_k=3.0),
            timeout=12.5,
        )

        restored = SimulationConfig.from_json(config.to_json())

        assert restored == config

    def test_from_dict_unknown_key(self):
        """Test unknown keys are rejected."""
        with pytest.raises(ValidationError, match="Unknown configuration keys"):
            SimulationConfig.from_dict({"max_step": 10})

    def test_from_dict_bad_region(self):
        """Test malformed region_policy mapping is rejected."""
        with pytest.raises(ValidationError, match="region_policy"):
            SimulationConfig.from_dict({"region_policy": {"lo": 1}})

    def test_from_json_invalid(self):
        """Test invalid JSON text is rejected."""
        with pytest.raises(ValidationError):
            SimulationConfig.from_json("{not json")
        with pytest.raises(ValidationError):
            SimulationConfig.from_json("[1, 2]")


class TestConfigureLogging:
    """Tests for logging setup."""

    def test_sets_root_level(self):
        """Test root logger level is applied."""
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging(logging.DEBUG)
            assert root.level == logging.DEBUG
        finally:
            root.setLevel(previous)
            logging.captureWarnings(False)
