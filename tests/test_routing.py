import unittest
from unittest import mock

import requests

from tripline.api import routing
from tripline.api.routing import get_optimized_trip, get_route_by_road

COORDS = [(123.89, 10.31), (123.95, 10.25), (124.01, 10.30)]


def _response(payload):
    response = mock.Mock()
    response.json.return_value = payload
    return response


class TestGetRouteByRoad(unittest.TestCase):
    def test_success(self):
        payload = {
            'code': 'Ok',
            'routes': [{
                'geometry': {'type': 'LineString', 'coordinates': [[123.89, 10.31], [123.9, 10.3], [124.01, 10.30]]},
                'distance': 15234.5,
                'duration': 1320.0,
            }],
        }
        with mock.patch('tripline.api.routing.requests.get', return_value=_response(payload)) as get:
            result = get_route_by_road(COORDS, 'walking')

        self.assertIsNone(result.error)
        self.assertEqual(result.route_coords, [(123.89, 10.31), (123.9, 10.3), (124.01, 10.30)])
        self.assertEqual(result.distance_meters, 15234.5)
        self.assertEqual(result.duration_seconds, 1320.0)
        url = get.call_args[0][0]
        self.assertIn('/route/v1/walking/123.89,10.31;123.95,10.25;124.01,10.3', url)
        self.assertEqual(get.call_args[1]['params'], {'geometries': 'geojson', 'overview': 'full'})

    def test_service_error_keeps_input(self):
        payload = {'code': 'NoRoute', 'message': 'Impossible route between points'}
        with mock.patch('tripline.api.routing.requests.get', return_value=_response(payload)):
            result = get_route_by_road(COORDS)
        self.assertEqual(result.error, 'Impossible route between points')
        self.assertEqual(result.route_coords, COORDS)

    def test_error_code_without_message(self):
        with mock.patch('tripline.api.routing.requests.get', return_value=_response({'code': 'InvalidQuery'})):
            result = get_route_by_road(COORDS)
        self.assertEqual(result.error, 'InvalidQuery')

    def test_network_failure_does_not_raise(self):
        with mock.patch('tripline.api.routing.requests.get', side_effect=requests.ConnectionError('boom')):
            result = get_route_by_road(COORDS)
        self.assertEqual(result.error, 'boom')
        self.assertEqual(result.route_coords, COORDS)

    def test_single_point_skips_request(self):
        with mock.patch('tripline.api.routing.requests.get') as get:
            result = get_route_by_road(COORDS[:1])
        get.assert_not_called()
        self.assertEqual(result.route_coords, COORDS[:1])
        self.assertIsNone(result.error)

    def test_invalid_profile(self):
        with self.assertRaises(ValueError):
            get_route_by_road(COORDS, 'flying')


class TestGetOptimizedTrip(unittest.TestCase):
    def test_waypoints_sorted_by_visit_order(self):
        payload = {
            'code': 'Ok',
            'waypoints': [
                {'location': [123.89, 10.31], 'waypoint_index': 0, 'name': 'A'},
                {'location': [123.95, 10.25], 'waypoint_index': 2, 'name': 'B'},
                {'location': [124.01, 10.30], 'waypoint_index': 1, 'name': 'C'},
            ],
            'trips': [{
                'geometry': {'coordinates': [[123.89, 10.31], [124.01, 10.30], [123.95, 10.25], [123.89, 10.31]]},
                'distance': 30000.0,
                'duration': 2400.0,
            }],
        }
        with mock.patch('tripline.api.routing.requests.get', return_value=_response(payload)) as get:
            result = get_optimized_trip(COORDS, 'driving', roundtrip=False)

        self.assertIsNone(result.error)
        self.assertEqual([w.name for w in result.ordered_waypoints], ['A', 'C', 'B'])
        self.assertEqual([w.input_index for w in result.ordered_waypoints], [0, 2, 1])
        self.assertEqual(len(result.route_coords), 4)
        self.assertEqual(result.distance_meters, 30000.0)
        self.assertIn('/trip/v1/driving/', get.call_args[0][0])
        self.assertEqual(get.call_args[1]['params']['roundtrip'], 'false')

    def test_failure_falls_back_to_input_order(self):
        with mock.patch('tripline.api.routing.requests.get', side_effect=requests.Timeout('timed out')):
            result = get_optimized_trip(COORDS)
        self.assertEqual(result.error, 'timed out')
        self.assertEqual([w.input_index for w in result.ordered_waypoints], [0, 1, 2])
        self.assertEqual([w.location for w in result.ordered_waypoints], COORDS)

    def test_base_url_from_config(self):
        payload = {'code': 'Ok', 'trips': [], 'waypoints': []}
        with mock.patch.object(routing, 'get_routing_config',
                               return_value={'base_url': 'http://osrm.local', 'timeout': 5}):
            with mock.patch('tripline.api.routing.requests.get', return_value=_response(payload)) as get:
                result = get_optimized_trip(COORDS[:2], 'cycling')
        self.assertTrue(get.call_args[0][0].startswith('http://osrm.local/trip/v1/cycling/'))
        self.assertEqual(get.call_args[1]['timeout'], 5)
        self.assertEqual(result.route_coords, COORDS[:2])


if __name__ == '__main__':
    unittest.main()
