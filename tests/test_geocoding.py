import unittest

from geopy.exc import GeocoderTimedOut

from stylist.geocoding import NominatimCityLookup


class FakeLocation:
    def __init__(self, address):
        self.raw = {"address": address}


class FakeGeolocator:
    def __init__(self, result=None, exc=None):
        self.result = result
        self.exc = exc
        self.calls = []

    def reverse(self, query, **kwargs):
        self.calls.append((query, kwargs))
        if self.exc:
            raise self.exc
        return self.result


class TestNominatimCityLookup(unittest.TestCase):
    def test_prefers_city(self):
        geo = FakeGeolocator(FakeLocation({"city": "London", "state": "England"}))
        lookup = NominatimCityLookup(user_agent="test", geolocator=geo)
        self.assertEqual(lookup.city_for(51.5, -0.1), "London")
        self.assertEqual(geo.calls[0][0], (51.5, -0.1))

    def test_falls_back_to_town(self):
        geo = FakeGeolocator(FakeLocation({"town": "Hebden Bridge", "state": "England"}))
        self.assertEqual(NominatimCityLookup(user_agent="t", geolocator=geo).city_for(53.7, -2.0), "Hebden Bridge")

    def test_no_result(self):
        lookup = NominatimCityLookup(user_agent="t", geolocator=FakeGeolocator(None))
        self.assertIsNone(lookup.city_for(0, 0))

    def test_no_usable_address(self):
        geo = FakeGeolocator(FakeLocation({"country": "Nowhere"}))
        self.assertIsNone(NominatimCityLookup(user_agent="t", geolocator=geo).city_for(0, 0))

    def test_geocoder_error_returns_none(self):
        geo = FakeGeolocator(exc=GeocoderTimedOut("slow"))
        self.assertIsNone(NominatimCityLookup(user_agent="t", geolocator=geo).city_for(0, 0))


if __name__ == "__main__":
    unittest.main()
