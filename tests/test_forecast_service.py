import datetime as dt
import unittest

from stylist.data_sources import CallableWeatherProvider, ForecastSample
from stylist.errors import ForecastUnavailableError
from stylist.forecast_service import (
    COLDER,
    SAME,
    WARMER,
    build_outlook,
    celsius_to_fahrenheit,
    compare_days,
    get_outlook_for_location,
    high_low_f,
    representative_code,
    round_half_up,
)

DAY = dt.date(2024, 1, 15)


def _sample(temps, codes=None, date=DAY):
    return ForecastSample(
        date=date,
        hourly_temperatures=list(temps),
        hourly_weather_codes=list(codes if codes is not None else [0] * len(temps)),
    )


class TestConversions(unittest.TestCase):
    def test_celsius_to_fahrenheit(self):
        self.assertEqual(celsius_to_fahrenheit(0), 32)
        self.assertEqual(celsius_to_fahrenheit(100), 212)
        self.assertEqual(celsius_to_fahrenheit(-40), -40)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(70.5), 71)
        self.assertEqual(round_half_up(70.49), 70)
        self.assertEqual(round_half_up(-0.5), 0)

    def test_high_low_ignores_missing_hours(self):
        high, low = high_low_f(_sample([10.0, None, 25.0, 18.0]))
        self.assertEqual((high, low), (77, 50))

    def test_high_low_rounds_to_whole_degrees(self):
        # 21.5 °C = 70.7 °F
        self.assertEqual(high_low_f(_sample([21.5, 21.5])), (71, 71))

    def test_no_temperatures_raises(self):
        with self.assertRaises(ForecastUnavailableError):
            high_low_f(_sample([None, None]))


class TestRepresentativeCode(unittest.TestCase):
    def test_uses_local_noon(self):
        codes = [0] * 24
        codes[12] = 61
        self.assertEqual(representative_code(codes), 61)

    def test_falls_back_to_first_hour(self):
        self.assertEqual(representative_code([3, 0, 0]), 3)
        codes = [71] + [0] * 11 + [None] * 12
        self.assertEqual(representative_code(codes), 71)

    def test_empty_is_clear(self):
        self.assertEqual(representative_code([]), 0)
        self.assertEqual(representative_code([None]), 0)


class TestCompareDays(unittest.TestCase):
    def test_band_of_two_degrees(self):
        self.assertEqual(compare_days(73, 70), WARMER)
        self.assertEqual(compare_days(72, 70), SAME)
        self.assertEqual(compare_days(68, 70), SAME)
        self.assertEqual(compare_days(67, 70), COLDER)

    def test_without_yesterday(self):
        self.assertEqual(compare_days(70, None), "")


class TestBuildOutlook(unittest.TestCase):
    def test_outlook_combines_forecast_and_recommendation(self):
        codes = [0] * 24
        codes[12] = 63
        today = _sample([10.0] * 12 + [20.0] * 12, codes)
        yesterday = _sample([5.0] * 24, date=DAY - dt.timedelta(days=1))

        outlook = build_outlook(today, yesterday)

        self.assertEqual(outlook.high_f, 68)
        self.assertEqual(outlook.low_f, 50)
        self.assertEqual(outlook.yesterday_high_f, 41)
        self.assertEqual(outlook.weather_code, 63)
        self.assertEqual(outlook.description, "moderate rain")
        self.assertEqual(outlook.comparison, WARMER)
        self.assertEqual(
            outlook.recommendation.outfit,
            "jeans or pants with a sweater or light jacket with a waterproof jacket or umbrella",
        )

    def test_outlook_without_yesterday(self):
        outlook = build_outlook(_sample([20.0] * 24))
        self.assertIsNone(outlook.yesterday_high_f)
        self.assertEqual(outlook.comparison, "")


class TestGetOutlookForLocation(unittest.TestCase):
    def test_fetches_today_and_yesterday(self):
        calls = []

        def fake_forecast(latitude, longitude, timezone, date):
            calls.append((latitude, longitude, timezone, date))
            temp = 30.0 if date == DAY else 20.0
            return _sample([temp] * 24, date=date)

        provider = CallableWeatherProvider(forecast=fake_forecast)
        outlook = get_outlook_for_location(provider, 51.5, -0.1, "Europe/London", DAY)

        self.assertEqual(
            calls,
            [
                (51.5, -0.1, "Europe/London", DAY),
                (51.5, -0.1, "Europe/London", dt.date(2024, 1, 14)),
            ],
        )
        self.assertEqual(outlook.high_f, 86)
        self.assertEqual(outlook.comparison, WARMER)

    def test_provider_errors_propagate(self):
        def broken(*_args, **_kwargs):
            raise ForecastUnavailableError("down")

        with self.assertRaises(ForecastUnavailableError):
            get_outlook_for_location(CallableWeatherProvider(forecast=broken), 0, 0, "UTC", DAY)


if __name__ == "__main__":
    unittest.main()
