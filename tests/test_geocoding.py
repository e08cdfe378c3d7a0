import os
import unittest
from unittest import mock

from googlemaps.exceptions import ApiError

from tripline.api import geocoding

GEOCODE_RESULT = [{
    'place_id': 'ChIJabc',
    'formatted_address': 'Basilica Minore del Santo Niño, Osmeña Blvd, Cebu City, Philippines',
    'address_components': [{'long_name': 'Basilica Minore del Santo Niño', 'types': ['establishment']}],
    'geometry': {'location': {'lat': 10.2942, 'lng': 123.9020}},
    'types': ['church', 'place_of_worship'],
}]


class TestSearchPlacesGoogle(unittest.TestCase):
    def setUp(self):
        geocoding._gmaps = None
        geocoding._geocode.cache_clear()

    def tearDown(self):
        geocoding._gmaps = None
        geocoding._geocode.cache_clear()

    def test_disabled_without_key(self):
        with mock.patch.dict(os.environ, {'GOOGLE_MAPS_API_KEY': ''}):
            places, error = geocoding.search_places_google('Santo Nino')
        self.assertEqual(places, [])
        self.assertIn('not configured', error)

    def test_search_with_bbox(self):
        with mock.patch.dict(os.environ, {'GOOGLE_MAPS_API_KEY': 'test-key'}):
            with mock.patch('tripline.api.geocoding.googlemaps.Client') as MockClient:
                client = MockClient.return_value
                client.geocode.return_value = GEOCODE_RESULT
                places, error = geocoding.search_places_google('Santo Nino', (10.18, 123.78, 10.42, 124.0))

        self.assertIsNone(error)
        MockClient.assert_called_once_with(key='test-key')
        kwargs = client.geocode.call_args[1]
        self.assertEqual(kwargs['bounds'], {
            'southwest': {'lat': 10.18, 'lng': 123.78},
            'northeast': {'lat': 10.42, 'lng': 124.0},
        })
        (place,) = places
        self.assertEqual(place.id, 'google:ChIJabc')
        self.assertEqual(place.name, 'Basilica Minore del Santo Niño')
        self.assertEqual(place.coords, (123.9020, 10.2942))
        self.assertEqual(place.place_type, 'church')

    def test_repeat_queries_are_cached(self):
        with mock.patch.dict(os.environ, {'GOOGLE_MAPS_API_KEY': 'test-key'}):
            with mock.patch('tripline.api.geocoding.googlemaps.Client') as MockClient:
                client = MockClient.return_value
                client.geocode.return_value = GEOCODE_RESULT
                geocoding.search_places_google('Santo Nino')
                geocoding.search_places_google('Santo Nino')
        self.assertEqual(client.geocode.call_count, 1)

    def test_api_error_reported(self):
        with mock.patch.dict(os.environ, {'GOOGLE_MAPS_API_KEY': 'test-key'}):
            with mock.patch('tripline.api.geocoding.googlemaps.Client') as MockClient:
                MockClient.return_value.geocode.side_effect = ApiError('REQUEST_DENIED')
                places, error = geocoding.search_places_google('Santo Nino')
        self.assertEqual(places, [])
        self.assertIn('REQUEST_DENIED', error)


if __name__ == '__main__':
    unittest.main()
