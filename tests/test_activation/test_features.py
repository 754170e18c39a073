"""Tests for feature synthesis and activation seeding."""

import math

import pytest

from neuralcore.activation.features import (
    SeededFeatureGenerator,
    l2_normalize,
    normalized_popularity,
    refresh_features,
    seed_activation,
    state_activation,
)


class TestSeededFeatureGenerator:
    def test_lcg_sequence_from_zero(self):
        gen = SeededFeatureGenerator(seed=0)
        assert gen.next_value() == 49297 / 233280
        assert gen.seed == 49297
        assert gen.next_value() == 165494 / 233280
        assert gen.seed == 165494

    def test_exact_vector_for_fixed_seed(self):
        gen = SeededFeatureGenerator(seed=0)
        a, b = 49297 / 233280, 165494 / 233280
        norm = math.sqrt(a * a + b * b)
        assert gen.generate(2) == pytest.approx([a / norm, b / norm], abs=1e-15)

    def test_reproducible(self):
        first = SeededFeatureGenerator(seed=1234)
        second = SeededFeatureGenerator(seed=1234)
        assert [first.generate(32) for _ in range(5)] == [second.generate(32) for _ in range(5)]

    def test_seed_advances_between_calls(self):
        gen = SeededFeatureGenerator(seed=7)
        assert gen.generate(8) != gen.generate(8)

    def test_unit_norm(self):
        gen = SeededFeatureGenerator(seed=99)
        for dim in (1, 8, 32):
            vec = gen.generate(dim)
            assert len(vec) == dim
            assert math.sqrt(sum(v * v for v in vec)) == pytest.approx(1.0)

    def test_unseeded_generator_still_valid(self):
        gen = SeededFeatureGenerator()
        assert 0 <= gen.seed < 233280
        assert len(gen.generate(4)) == 4


class TestL2Normalize:
    def test_zero_vector_unchanged(self):
        assert l2_normalize([0.0, 0.0]) == [0.0, 0.0]

    def test_simple(self):
        assert l2_normalize([3.0, 4.0]) == pytest.approx([0.6, 0.8])


class TestActivationSeeding:
    def test_spec_example(self):
        # popularity 50/100 -> 0.5, state core -> 0.9
        assert seed_activation(50, "core") == pytest.approx(0.3 * 0.5 + 0.7 * 0.9)
        assert seed_activation(50, "core") == pytest.approx(0.78)

    def test_state_table(self):
        assert state_activation("born") == 0.2
        assert state_activation("fog") == 0.3
        assert state_activation("orbiting") == 0.6
        assert state_activation("core") == 0.9
        assert state_activation("decohered") == 0.1
        assert state_activation("reemergent") == 0.5

    def test_unknown_state_defaults(self):
        assert state_activation("mystery") == 0.5
        assert state_activation(None) == 0.5

    def test_popularity_saturates(self):
        assert normalized_popularity(250) == 1.0
        assert seed_activation(1000, "core") == pytest.approx(0.3 + 0.63)

    def test_negative_popularity_clamped(self):
        assert normalized_popularity(-20) == 0.0
        assert seed_activation(-20, "born") == pytest.approx(0.14)

    def test_custom_weights_clamped(self):
        assert seed_activation(100, "core", popularity_weight=1.0, state_weight=1.0) == 1.0


class TestRefreshFeatures:
    def test_only_protected_slice_changes(self):
        features = [0.5] * 10
        refresh_features(features, "orbiting", 0.4, True, protected=slice(0, 3))
        assert features[:3] == [0.6, 0.4, 0.9]
        assert features[3:] == [0.5] * 7

    def test_not_core_mind_and_unknown_state(self):
        features = [0.0] * 4
        refresh_features(features, "elsewhere", 0.1, False)
        assert features == [0.5, 0.1, 0.3, 0.0]

    def test_offset_slice(self):
        features = [0.0] * 6
        refresh_features(features, "decohered", 0.7, False, protected=slice(2, 5))
        assert features == [0.0, 0.0, 0.2, 0.7, 0.3, 0.0]

    def test_short_slice_takes_leading_values(self):
        features = [0.0] * 4
        refresh_features(features, "core", 0.7, True, protected=slice(0, 1))
        assert features == [0.9, 0.0, 0.0, 0.0]
