"""Tests for hour indexing and unit conversion."""

from datetime import timedelta

import pytest

from astroweather.ingest.indexer import (
    RangeError,
    convert,
    hour_index,
    value_at,
    values_at,
)
from astroweather.models.common import Metric


class TestHourIndex:
    def test_start(self, record, start_time):
        assert hour_index(record, start_time) == 0

    def test_within_first_hour(self, record, start_time):
        assert hour_index(record, start_time + timedelta(minutes=59, seconds=59)) == 0

    def test_floors_negative(self, record, start_time):
        assert hour_index(record, start_time - timedelta(seconds=1)) == -1

    def test_later_hour(self, record, start_time):
        assert hour_index(record, start_time + timedelta(hours=5, minutes=30)) == 5


class TestValueAt:
    @pytest.mark.parametrize("hours", [0, 81])
    def test_boundaries_succeed(self, record, start_time, hours):
        now = start_time + timedelta(hours=hours)
        assert value_at(record, Metric.CLOUD_COVER, now) == 10.0 + hours

    @pytest.mark.parametrize("delta", [timedelta(hours=82), timedelta(seconds=-1)])
    def test_outside_window_fails(self, record, start_time, delta):
        with pytest.raises(RangeError) as exc_info:
            value_at(record, Metric.CLOUD_COVER, start_time + delta)
        assert "outside forecast range" in str(exc_info.value)

    def test_range_error_offset(self, record, start_time):
        with pytest.raises(RangeError) as exc_info:
            value_at(record, Metric.SEEING, start_time + timedelta(hours=90))
        assert exc_info.value.hour_index == 90
        assert exc_info.value.hours == 82

    def test_idempotent(self, record, start_time):
        now = start_time + timedelta(hours=3)
        first = value_at(record, Metric.TEMPERATURE, now)
        second = value_at(record, Metric.TEMPERATURE, now)
        assert first == second
        assert record.series[Metric.TEMPERATURE][3] == pytest.approx(283.15)

    def test_converted_values(self, record, start_time):
        now = start_time + timedelta(hours=1)
        assert value_at(record, Metric.TEMPERATURE, now) == pytest.approx(8.0)
        assert value_at(record, Metric.DEW_POINT, now) == pytest.approx(-2.0)
        assert value_at(record, Metric.WIND_SPEED, now) == pytest.approx(10.8)
        assert value_at(record, Metric.WIND_DIRECTION, now) == 91.0


class TestValuesAt:
    def test_all_metrics(self, record, start_time):
        index, values = values_at(record, start_time + timedelta(hours=2))
        assert index == 2
        assert set(values) == set(Metric)
        assert values[Metric.SEEING] == 3.0
        assert values[Metric.TRANSPARENCY] == 7.0

    def test_out_of_range(self, record, start_time):
        with pytest.raises(RangeError):
            values_at(record, start_time - timedelta(hours=1))


class TestConvert:
    def test_kelvin_to_celsius(self):
        assert convert(Metric.TEMPERATURE, 293.15) == pytest.approx(20.0)
        assert convert(Metric.DEW_POINT, 293.15) == pytest.approx(20.0)

    def test_ms_to_kph(self):
        assert convert(Metric.WIND_SPEED, 10.0) == pytest.approx(36.0)

    @pytest.mark.parametrize(
        "metric",
        [Metric.CLOUD_COVER, Metric.WIND_DIRECTION, Metric.SEEING, Metric.TRANSPARENCY],
    )
    def test_passthrough(self, metric):
        assert convert(metric, 42.5) == 42.5
