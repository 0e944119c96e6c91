import unittest

from dashlang.lang import numerical
from dashlang.lang.error import DashException, DivideByZero


class NumericalTestCase(unittest.TestCase):

    def test_number(self):
        should_pass = {"0": 0, "12": 12, "0.5": 0.5, "3.0": 3.0, "007": 7}
        for case, result in should_pass.items():
            self.assertEqual(result, numerical.number(case))
            self.assertIs(type(result), type(numerical.number(case)))

        should_fail = ["", "1.2.3", "abc"]
        for case in should_fail:
            self.assertRaises(DashException, numerical.number, case)

    def test_numberify(self):
        should_pass = {
            14: "14",
            -3: "-3",
            2.5: "2.5",
            3.0: "3.0",
            0.1 + 0.2: "0.30000000000000004",
            1e16: "10000000000000000.0",
            -2.5e17: "-250000000000000000.0",
            1e-7: "0.0000001",
            2.5e-5: "0.000025",
            10 ** 20: "100000000000000000000",
        }
        for case, result in should_pass.items():
            self.assertEqual(result, numerical.numberify(case))

        should_fail = [True, "1", None]
        for case in should_fail:
            self.assertRaises(DashException, numerical.numberify, case)

    def test_divide(self):
        should_pass = [
            (7, 2, 3),
            (-7, 2, -3),
            (7, -2, -3),
            (-7, -2, 3),
            (6, 3, 2),
            (7.0, 2, 3.5),
            (1, 4.0, 0.25),
        ]
        for left, right, result in should_pass:
            self.assertEqual(result, numerical.divide(left, right), (left, right))

        self.assertIsInstance(numerical.divide(6, 3), int)
        self.assertIsInstance(numerical.divide(6.0, 3), float)

        should_fail = [(1, 0), (1.5, 0), (0, 0.0)]
        for left, right in should_fail:
            self.assertRaises(DivideByZero, numerical.divide, left, right)


if __name__ == '__main__':
    unittest.main()
