"""Tests for Prometheus metrics utility functions."""

import pytest

from radix_app.middleware.metrics import (
    DATABASE_OPERATIONS_TOTAL,
    NUMBER_CONVERSIONS_TOTAL,
    SESSION_UNDO_TOTAL,
    record_database_operation,
    record_number_conversion,
    record_session_undo,
)


def total_samples(metric):
    """Return the _total samples of a counter."""
    # Counter creates both _total and _created samples
    samples = next(iter(metric.collect())).samples
    return [s for s in samples if s.name.endswith("_total")]


class TestMetricsUtilities:
    """Test cases for metrics utility functions."""

    @pytest.fixture(autouse=True)
    def clear_metrics(self):
        """Clear Prometheus metrics before each test."""
        NUMBER_CONVERSIONS_TOTAL.clear()
        DATABASE_OPERATIONS_TOTAL.clear()

    def test_record_number_conversion_success(self):
        """Test recording a successful conversion."""
        record_number_conversion(16, 2, success=True)

        samples = total_samples(NUMBER_CONVERSIONS_TOTAL)
        assert len(samples) == 1

        sample = samples[0]
        assert sample.labels["source_base"] == "16"
        assert sample.labels["target_base"] == "2"
        assert sample.labels["status"] == "success"
        assert sample.value == 1.0

    def test_record_number_conversion_error(self):
        """Test recording a failed conversion."""
        record_number_conversion(10, 37, success=False)

        sample = total_samples(NUMBER_CONVERSIONS_TOTAL)[0]
        assert sample.labels["source_base"] == "10"
        assert sample.labels["target_base"] == "invalid"
        assert sample.labels["status"] == "error"

    def test_record_number_conversion_multiple_calls(self):
        """Test multiple conversion recordings."""
        record_number_conversion(2, 10)
        record_number_conversion(2, 10)
        record_number_conversion(2, 10, success=False)
        record_number_conversion(16, 8)

        samples = total_samples(NUMBER_CONVERSIONS_TOTAL)
        assert len(samples) == 3  # Three unique label combinations

        binary_success = next(
            s
            for s in samples
            if s.labels["source_base"] == "2"
            and s.labels["target_base"] == "10"
            and s.labels["status"] == "success"
        )
        assert binary_success.value == 2.0

    def test_unsupported_bases_share_one_label(self):
        """Test arbitrary unsupported bases do not create new series."""
        for base in [0, 1, 37, 1000, -5, 2**31 - 1]:
            record_number_conversion(base, 10, success=False)

        samples = total_samples(NUMBER_CONVERSIONS_TOTAL)
        assert len(samples) == 1
        assert samples[0].labels["source_base"] == "invalid"
        assert samples[0].value == 6.0

    def test_supported_base_bounds_keep_their_label(self):
        """Test bases 2 and 36 are labelled with their value."""
        record_number_conversion(2, 36)

        sample = total_samples(NUMBER_CONVERSIONS_TOTAL)[0]
        assert (sample.labels["source_base"], sample.labels["target_base"]) == ("2", "36")

    def test_record_session_undo(self):
        """Test undo recordings increase the undo counter."""
        before = total_samples(SESSION_UNDO_TOTAL)[0].value

        record_session_undo()
        record_session_undo()

        assert total_samples(SESSION_UNDO_TOTAL)[0].value == before + 2

    def test_record_database_operation(self):
        """Test recording database operations."""
        record_database_operation("INSERT", "conversion_history")
        record_database_operation("SELECT", "conversion_history", success=False)

        samples = total_samples(DATABASE_OPERATIONS_TOTAL)
        assert len(samples) == 2

        insert = next(s for s in samples if s.labels["operation"] == "INSERT")
        assert insert.labels["table"] == "conversion_history"
        assert insert.labels["status"] == "success"

        select = next(s for s in samples if s.labels["operation"] == "SELECT")
        assert select.labels["status"] == "error"
