import unittest
from unittest import mock

import requests

from tripline.api.regions import (
    PROVINCE_BBOXES,
    PROVINCES_BY_REGION,
    RegionLookupError,
    fetch_provinces,
    filter_provinces_by_name,
    get_province_bbox,
    load_provinces_by_region,
    provinces_by_region,
)

PSGC_SAMPLE = [
    {'code': '072200000', 'name': 'CEBU', 'regionCode': '070000000'},
    {'code': '071200000', 'name': 'Bohol', 'regionCode': '070000000'},
    {'code': '012800000', 'name': 'Ilocos Norte', 'regionCode': '010000000'},
]


class TestRegions(unittest.TestCase):
    def test_every_region_province_has_a_bbox(self):
        for names in PROVINCES_BY_REGION.values():
            self.assertEqual(len(names), 5)
            for name in names:
                south, west, north, east = PROVINCE_BBOXES[name]
                self.assertLess(south, north)
                self.assertLess(west, east)

    def test_get_province_bbox(self):
        self.assertEqual(get_province_bbox(' cebu '), PROVINCE_BBOXES['Cebu'])
        self.assertIsNone(get_province_bbox('Atlantis'))

    def test_filter_provinces_by_name(self):
        filtered = filter_provinces_by_name(PSGC_SAMPLE, ['Cebu', 'Bohol'])
        self.assertEqual([p['code'] for p in filtered], ['072200000', '071200000'])

    def test_provinces_by_region_prefers_psgc_names(self):
        grouped = provinces_by_region(PSGC_SAMPLE)
        self.assertEqual(grouped['visayas'][0], {'name': 'CEBU'})
        self.assertEqual(grouped['visayas'][1], {'name': 'Bohol'})
        self.assertEqual(grouped['luzon'][0], {'name': 'Batangas'})

    def test_provinces_by_region_without_lookup(self):
        grouped = provinces_by_region()
        self.assertEqual([p['name'] for p in grouped['mindanao']], PROVINCES_BY_REGION['mindanao'])


class TestFetchProvinces(unittest.TestCase):
    def test_success(self):
        response = mock.Mock(ok=True)
        response.json.return_value = PSGC_SAMPLE
        with mock.patch('tripline.api.regions.requests.get', return_value=response) as get:
            self.assertEqual(fetch_provinces(), PSGC_SAMPLE)
        self.assertTrue(get.call_args[0][0].endswith('/provinces.json'))

    def test_http_error_raises(self):
        response = mock.Mock(ok=False, reason='Service Unavailable')
        with mock.patch('tripline.api.regions.requests.get', return_value=response):
            with self.assertRaises(RegionLookupError):
                fetch_provinces()

    def test_load_falls_back_on_failure(self):
        with mock.patch('tripline.api.regions.requests.get', side_effect=requests.ConnectionError('offline')):
            grouped = load_provinces_by_region()
        self.assertEqual(grouped['visayas'][0], {'name': 'Cebu'})


if __name__ == '__main__':
    unittest.main()
