import threading
import time
import unittest
from datetime import date, datetime

from finpulse.planner.errors import UnknownUser
from finpulse.planner.schemas import FinancialSnapshot, Financials, Goal, UserAction, UserProfile
from finpulse.store.repository import InMemoryClientRepository


class TestInMemoryClientRepository(unittest.TestCase):

    def setUp(self):
        self.repo = InMemoryClientRepository()
        self.repo.put_profile(UserProfile(user_id="u1", advisor_id="adv"))

    def _snap(self, sid, when):
        return FinancialSnapshot(snapshot_id=sid, user_id="u1", snapshot_date=when, snapshot_data=Financials())

    def test_unknown_user(self):
        with self.assertRaises(UnknownUser):
            self.repo.get_profile("nobody")
        with self.assertRaises(UnknownUser):
            self.repo.list_goals("nobody")

    def test_instances_do_not_share_state(self):
        other = InMemoryClientRepository()
        with self.assertRaises(UnknownUser):
            other.get_profile("u1")

    def test_snapshots(self):
        self.assertIsNone(self.repo.latest_snapshot("u1"))
        self.repo.add_snapshot(self._snap("late", datetime(2024, 5, 1)))
        self.repo.add_snapshot(self._snap("early", datetime(2023, 5, 1)))
        self.assertEqual(self.repo.latest_snapshot("u1").snapshot_id, "late")
        self.assertEqual([s.snapshot_id for s in self.repo.snapshot_history("u1")], ["early", "late"])

    def test_goals(self):
        self.repo.add_goal("u1", Goal(id="g1", target_age=40, target_value=10))
        self.repo.add_goal("u1", Goal(id="g2", target_age=50, target_value=20))
        self.assertTrue(self.repo.remove_goal("u1", "g1"))
        self.assertFalse(self.repo.remove_goal("u1", "g1"))
        self.assertEqual([g.id for g in self.repo.list_goals("u1")], ["g2"])

    def test_actions_replaced_by_id(self):
        action = UserAction(action_id="a1", user_id="u1", action_key="savingsRatio", target_date=date(2030, 1, 1))
        self.repo.put_action(action)
        self.repo.put_action(action.model_copy(update={"status": "completed"}))
        actions = self.repo.list_actions("u1")
        self.assertEqual(len(actions), 1)
        self.assertEqual(actions[0].status, "completed")

    def test_update_profile_serializes_writers(self):
        def _bump(profile):
            seen = profile.points
            time.sleep(0.001)
            return profile.model_copy(update={"points": seen + 1})

        threads = [threading.Thread(target=self.repo.update_profile, args=("u1", _bump)) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(self.repo.get_profile("u1").points, 20)

    def test_update_profile_can_read_same_repository(self):
        action = UserAction(action_id="a1", user_id="u1", action_key="savingsRatio", target_date=date(2030, 1, 1))

        def _stake(profile):
            self.repo.put_action(action)
            return profile.model_copy(update={"locked_points": 100 * len(self.repo.list_actions("u1"))})

        self.assertEqual(self.repo.update_profile("u1", _stake).locked_points, 100)

    def test_update_profile_create(self):
        with self.assertRaises(UnknownUser):
            self.repo.update_profile("new", lambda p: UserProfile(user_id="new"))
        created = self.repo.update_profile("new", lambda p: p or UserProfile(user_id="new", points=70), create=True)
        self.assertEqual(created.points, 70)
        self.assertEqual(self.repo.get_profile("new").points, 70)

    def test_list_clients(self):
        self.repo.put_profile(UserProfile(user_id="u2", advisor_id="other"))
        self.repo.put_profile(UserProfile(user_id="adv", role="Financial Professional", advisor_id="adv"))
        self.assertEqual([p.user_id for p in self.repo.list_clients("adv")], ["u1"])


if __name__ == "__main__":
    unittest.main()
