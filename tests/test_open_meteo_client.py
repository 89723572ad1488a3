import datetime as dt
import unittest

from aether.config import Settings
from aether.data_sources import open_meteo_client
from aether.errors import ApplicationError, SchemaError


class DummyResp:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload


class RecordingSession:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        return DummyResp(self.payload, self.status_code)


def _make_archive_payload():
    return {
        "daily_units": {
            "time": "iso8601",
            "weather_code": "wmo code",
            "temperature_2m_max": "°C",
            "temperature_2m_min": "°C",
            "temperature_2m_mean": "°C",
        },
        "daily": {
            "time": ["2024-01-01", "2024-01-02", "2024-01-03"],
            "weather_code": [0, 61, 200],
            "temperature_2m_max": [10.5, 8.4, 7.0],
            "temperature_2m_min": [2.0, 1.6, -0.5],
            "temperature_2m_mean": [6.2, 4.5, 3.3],
        },
    }


def _make_air_payload():
    return {
        "current": {
            "time": "2024-01-01T12:00",
            "us_aqi": 42,
            "pm10": 10.0,
            "pm2_5": 5.0,
            "nitrogen_dioxide": 12.1,
            "ozone": 30.0,
            "sulphur_dioxide": 1.2,
        },
        "current_units": {
            "us_aqi": "USAQI",
            "pm10": "μg/m³",
            "pm2_5": "μg/m³",
        },
    }


class TestOpenMeteoClient(unittest.TestCase):
    def setUp(self):
        self.settings = Settings(archive_base_url="https://archive.test/v1", air_quality_base_url="https://air.test/v1")

    def test_fetch_archive_days_decodes_parallel_arrays(self):
        session = RecordingSession(_make_archive_payload())
        days = open_meteo_client.fetch_archive_days(
            51.5, -0.1, dt.date(2024, 1, 1), dt.date(2024, 1, 3), session=session, settings=self.settings
        )

        self.assertEqual([d.date for d in days], [dt.date(2024, 1, 1), dt.date(2024, 1, 2), dt.date(2024, 1, 3)])
        self.assertEqual([d.description for d in days], ["Sunny", "Rain", "Cloudy"])
        self.assertEqual(days[0].max_temp_c, 11)
        self.assertEqual(days[1].min_temp_c, 2)
        self.assertEqual(days[2].min_temp_c, 0)
        self.assertFalse(any(d.is_synthetic for d in days))

        call = session.calls[0]
        self.assertEqual(call["url"], "https://archive.test/v1/archive")
        self.assertEqual(call["params"]["start_date"], "2024-01-01")
        self.assertEqual(call["params"]["end_date"], "2024-01-03")
        self.assertEqual(
            call["params"]["daily"],
            "weather_code,temperature_2m_max,temperature_2m_min,temperature_2m_mean",
        )
        self.assertEqual(call["timeout"], self.settings.request_timeout_seconds)

    def test_archive_skips_days_with_null_temperatures(self):
        payload = _make_archive_payload()
        payload["daily"]["temperature_2m_mean"][2] = None
        days = open_meteo_client.fetch_archive_days(
            0, 0, dt.date(2024, 1, 1), dt.date(2024, 1, 3), session=RecordingSession(payload), settings=self.settings
        )
        self.assertEqual(len(days), 2)

    def test_archive_unequal_arrays_is_schema_error(self):
        payload = _make_archive_payload()
        payload["daily"]["weather_code"] = [0]
        with self.assertRaises(SchemaError):
            open_meteo_client.fetch_archive_days(
                0, 0, dt.date(2024, 1, 1), dt.date(2024, 1, 3), session=RecordingSession(payload), settings=self.settings
            )

    def test_archive_missing_daily_is_schema_error(self):
        with self.assertRaises(SchemaError):
            open_meteo_client.fetch_archive_days(
                0, 0, dt.date(2024, 1, 1), dt.date(2024, 1, 3), session=RecordingSession({}), settings=self.settings
            )

    def test_archive_error_payload_is_application_error(self):
        session = RecordingSession({"error": True, "reason": "Latitude must be in range"}, status_code=400)
        with self.assertRaises(ApplicationError) as ctx:
            open_meteo_client.fetch_archive_days(
                999, 0, dt.date(2024, 1, 1), dt.date(2024, 1, 3), session=session, settings=self.settings
            )
        self.assertIn("Latitude", ctx.exception.info)

    def test_fetch_air_current(self):
        session = RecordingSession(_make_air_payload())
        sample = open_meteo_client.fetch_air_current(0, 0, session=session, settings=self.settings)
        self.assertEqual(sample.us_aqi, 42)
        self.assertEqual(sample.pm2_5, 5.0)
        self.assertEqual(sample.sulphur_dioxide, 1.2)
        self.assertEqual(session.calls[0]["url"], "https://air.test/v1/air-quality")
        self.assertEqual(
            session.calls[0]["params"]["current"],
            "us_aqi,pm10,pm2_5,nitrogen_dioxide,ozone,sulphur_dioxide",
        )

    def test_air_missing_aqi_is_schema_error(self):
        payload = _make_air_payload()
        payload["current"]["us_aqi"] = None
        with self.assertRaises(SchemaError):
            open_meteo_client.fetch_air_current(0, 0, session=RecordingSession(payload), settings=self.settings)


if __name__ == "__main__":
    unittest.main()
