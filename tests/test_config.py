import os
import unittest
from datetime import date, datetime
from unittest.mock import patch

from finpulse import clock
from finpulse.config import RetirementPolicy, allowed_origins, log_level, retirement_policy_from_env


class TestConfig(unittest.TestCase):

    def test_policy_defaults(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("FINPULSE_RETIREMENT_AGE", None)
            os.environ.pop("FINPULSE_RETIREMENT_EXPENSE_FACTOR", None)
            self.assertEqual(retirement_policy_from_env(), RetirementPolicy(85, 0.7))

    def test_policy_from_env(self):
        env = {"FINPULSE_RETIREMENT_AGE": "90", "FINPULSE_RETIREMENT_EXPENSE_FACTOR": "0.8"}
        with patch.dict(os.environ, env):
            self.assertEqual(retirement_policy_from_env(), RetirementPolicy(90, 0.8))

    def test_invalid_values_fall_back(self):
        env = {"FINPULSE_RETIREMENT_AGE": "abc", "FINPULSE_RETIREMENT_EXPENSE_FACTOR": " "}
        with patch.dict(os.environ, env):
            self.assertEqual(retirement_policy_from_env(), RetirementPolicy())

    def test_non_finite_values_fall_back(self):
        env = {"FINPULSE_RETIREMENT_AGE": "90", "FINPULSE_RETIREMENT_EXPENSE_FACTOR": "nan"}
        with patch.dict(os.environ, env):
            self.assertEqual(retirement_policy_from_env(), RetirementPolicy(90, 0.7))
        with patch.dict(os.environ, {"FINPULSE_RETIREMENT_EXPENSE_FACTOR": "inf"}):
            self.assertEqual(retirement_policy_from_env().expense_factor, 0.7)

    def test_unknown_log_level_falls_back(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "chatty"}):
            self.assertEqual(log_level(), "INFO")
        with patch.dict(os.environ, {"LOG_LEVEL": " warning "}):
            self.assertEqual(log_level(), "WARNING")

    def test_origins_and_log_level(self):
        with patch.dict(os.environ, {"APP_BASE_URL": "https://app.example.com", "LOG_LEVEL": "debug"}):
            self.assertIn("https://app.example.com", allowed_origins())
            self.assertIn("http://localhost:3000", allowed_origins())
            self.assertEqual(log_level(), "DEBUG")


class TestClock(unittest.TestCase):

    def test_age_from_dob(self):
        self.assertEqual(clock.age_from_dob(date(1990, 12, 31), date(2024, 1, 1)), 34)
        self.assertIsNone(clock.age_from_dob(None, date(2024, 1, 1)))

    def test_whole_years_between(self):
        self.assertEqual(clock.whole_years_between(date(2020, 6, 1), date(2023, 5, 31)), 2)
        self.assertEqual(clock.whole_years_between(date(2020, 6, 1), date(2023, 6, 1)), 3)
        self.assertEqual(clock.whole_years_between(date(2024, 6, 1), date(2020, 1, 1)), 0)

    def test_age_at(self):
        self.assertEqual(clock.age_at(40, date(2020, 1, 1), date(2025, 1, 1)), 35)
        self.assertEqual(clock.age_at(2, date(2020, 1, 1), date(2025, 1, 1)), 0)

    def test_localize(self):
        with patch.dict(os.environ, {"TZ": "Asia/Kolkata"}):
            aware = clock.localize(datetime(2024, 1, 1, 9, 0))
            self.assertIsNotNone(aware.tzinfo)
            self.assertIs(clock.localize(aware), aware)
            self.assertIsNotNone(clock.now().tzinfo)


if __name__ == "__main__":
    unittest.main()
