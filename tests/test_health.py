"""Tests for health evaluation."""

import logging

import pytest

from solo_bench.metric import (
    HealthCondition,
    HealthStatus,
    Operator,
    SampleStore,
    SeverityLevel,
    check_condition_order,
    evaluate,
)


@pytest.fixture
def tiered_store():
    return SampleStore(
        "Load",
        [
            HealthCondition("X", 90, Operator.GREATER_THAN_OR_EQUAL, SeverityLevel.HIGH),
            HealthCondition("X", 70, Operator.GREATER_THAN_OR_EQUAL, SeverityLevel.MEDIUM),
        ],
    )


class TestEvaluate:
    def test_high_tier(self, tiered_store):
        tiered_store.add_data_point({"X": 95})

        assert evaluate(tiered_store) == (HealthStatus.UNHEALTHY, {"X": SeverityLevel.HIGH})

    def test_medium_tier(self, tiered_store):
        """First matching condition wins even though both thresholds are below 95."""
        tiered_store.add_data_point({"X": 75})

        assert evaluate(tiered_store) == (HealthStatus.HEALTHY, {"X": SeverityLevel.MEDIUM})

    def test_no_match(self, tiered_store):
        tiered_store.add_data_point({"X": 10})

        assert evaluate(tiered_store) == (HealthStatus.HEALTHY, {})

    def test_latest_point_is_used(self, tiered_store):
        tiered_store.add_data_point({"X": 95})
        tiered_store.add_data_point({"X": 10})

        assert evaluate(tiered_store) == (HealthStatus.HEALTHY, {})

    def test_explicit_values(self, tiered_store):
        tiered_store.add_data_point({"X": 10})

        status, severity = evaluate(tiered_store, {"X": 91})

        assert status is HealthStatus.UNHEALTHY
        assert severity == {"X": SeverityLevel.HIGH}

    def test_missing_measurement_is_no_data(self, tiered_store):
        tiered_store.add_data_point({"Y": 100})

        assert evaluate(tiered_store) == (HealthStatus.HEALTHY, {})

    def test_empty_store(self, tiered_store):
        assert evaluate(tiered_store) == (HealthStatus.HEALTHY, {})

    def test_does_not_mutate_store(self, tiered_store):
        tiered_store.add_data_point({"X": 95})
        before = tiered_store.data_points()

        evaluate(tiered_store)
        evaluate(tiered_store, {"X": 1})

        assert tiered_store.data_points() == before

    def test_operators(self):
        store = SampleStore(
            "Mixed",
            [
                HealthCondition("Version", "", Operator.EQUAL, SeverityLevel.HIGH),
                HealthCondition("Free", 100, Operator.LESS_THAN, SeverityLevel.MEDIUM),
                HealthCondition("Load", 1.5, Operator.GREATER_THAN, SeverityLevel.LOW),
            ],
        )
        store.add_data_point({"Version": "Lighthouse/v5.1.0", "Free": 50, "Load": 1.5})

        status, severity = evaluate(store)

        assert status is HealthStatus.HEALTHY
        assert severity == {"Free": SeverityLevel.MEDIUM}

    def test_several_measurements(self):
        store = SampleStore(
            "Mixed",
            [
                HealthCondition("A", 0, Operator.EQUAL, SeverityLevel.HIGH),
                HealthCondition("B", 10, Operator.GREATER_THAN, SeverityLevel.LOW),
            ],
        )
        store.add_data_point({"A": 0, "B": 11})

        status, severity = evaluate(store)

        assert status is HealthStatus.UNHEALTHY
        assert severity == {"A": SeverityLevel.HIGH, "B": SeverityLevel.LOW}


class TestConditionOrder:
    def test_most_severe_first(self, caplog):
        conditions = [
            HealthCondition("Count", 5, Operator.LESS_THAN_OR_EQUAL, SeverityLevel.HIGH),
            HealthCondition("Count", 20, Operator.LESS_THAN_OR_EQUAL, SeverityLevel.MEDIUM),
            HealthCondition("Count", 40, Operator.LESS_THAN_OR_EQUAL, SeverityLevel.LOW),
        ]
        with caplog.at_level(logging.WARNING):
            assert check_condition_order("Peers", conditions) is True
        assert not caplog.records

    def test_less_severe_first_warns(self, caplog):
        conditions = [
            HealthCondition("Count", 40, Operator.LESS_THAN_OR_EQUAL, SeverityLevel.LOW),
            HealthCondition("Count", 5, Operator.LESS_THAN_OR_EQUAL, SeverityLevel.HIGH),
        ]
        with caplog.at_level(logging.WARNING):
            assert check_condition_order("Peers", conditions) is False
        assert "Peers" in caplog.text
