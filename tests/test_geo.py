import math
import unittest

from tripline.api.geo import EARTH_RADIUS_METERS, closest_route_index, distance_meters


class TestDistanceMeters(unittest.TestCase):
    def test_identical_points_are_zero(self):
        self.assertEqual(distance_meters((123.9, 10.3), (123.9, 10.3)), 0.0)
        self.assertEqual(distance_meters((0.0, 0.0), (0.0, 0.0)), 0.0)

    def test_symmetric(self):
        a, b = (123.89, 10.31), (124.02, 9.65)
        self.assertEqual(distance_meters(a, b), distance_meters(b, a))

    def test_one_degree_of_latitude(self):
        d = distance_meters((0.0, 0.0), (0.0, 1.0))
        self.assertAlmostEqual(d, EARTH_RADIUS_METERS * math.pi / 180, delta=0.01)

    def test_known_city_distance(self):
        # Cebu City to Tagbilaran, roughly 70 km as the crow flies
        d = distance_meters((123.8854, 10.3157), (123.8547, 9.6500))
        self.assertTrue(65000 <= d <= 80000)

    def test_antipodal_points_stay_finite(self):
        for a, b in [((0.0, 0.0), (180.0, 0.0)), ((10.0, 45.0), (-170.0, -45.0))]:
            d = distance_meters(a, b)
            self.assertFalse(math.isnan(d))
            self.assertAlmostEqual(d, math.pi * EARTH_RADIUS_METERS, delta=1.0)

    def test_longitude_first(self):
        # Moving along longitude at high latitude is shorter than along latitude
        along_lng = distance_meters((0.0, 60.0), (1.0, 60.0))
        along_lat = distance_meters((0.0, 60.0), (0.0, 61.0))
        self.assertLess(along_lng, along_lat)


class TestClosestRouteIndex(unittest.TestCase):
    def test_nearest_vertex(self):
        route = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]
        self.assertEqual(closest_route_index(route, (1.1, 0.0)), 1)
        self.assertEqual(closest_route_index(route, (5.0, 0.0)), 2)
        self.assertEqual(closest_route_index(route, (-3.0, 0.1)), 0)

    def test_empty_route(self):
        self.assertEqual(closest_route_index([], (1.0, 1.0)), 0)

    def test_tie_goes_to_lowest_index(self):
        route = [(0.0, 0.0), (2.0, 0.0)]
        self.assertEqual(closest_route_index(route, (1.0, 0.0)), 0)

    def test_repeated_vertex_returns_first(self):
        route = [(5.0, 5.0), (1.0, 1.0), (3.0, 3.0), (1.0, 1.0)]
        self.assertEqual(closest_route_index(route, (1.0, 1.0)), 1)


if __name__ == '__main__':
    unittest.main()
