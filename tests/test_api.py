"""
HTTP tests against the FastAPI app with a fresh in-memory repository.
"""

import unittest

from fastapi.testclient import TestClient

from finpulse.config import RetirementPolicy
from finpulse.deps.repo import get_policy, get_repository
from finpulse.store.repository import InMemoryClientRepository
from main import app


def _monthly(value):
    return {"value": value, "frequency": "monthly"}


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self.repo = InMemoryClientRepository()
        app.dependency_overrides[get_repository] = lambda: self.repo
        app.dependency_overrides[get_policy] = lambda: RetirementPolicy()
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def _create(self, uid="u1", **body):
        payload = {"name": "Asha Rao", "phoneNumber": "9800000001", "age": 30}
        payload.update(body)
        r = self.client.put(f"/users/{uid}", json=payload)
        self.assertEqual(r.status_code, 200, r.text)
        return r.json()

    def _snapshot(self, uid="u1", date="2024-01-01T00:00:00", **sections):
        r = self.client.post(f"/users/{uid}/snapshots", json={"financials": sections, "snapshotDate": date})
        self.assertEqual(r.status_code, 200, r.text)
        return r.json()


class TestHealthEndpoints(ApiTestCase):

    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"ok": True})
        self.assertTrue(self.client.get("/").json()["ok"])


class TestProfileAndMetrics(ApiTestCase):

    def test_signup_points(self):
        profile = self._create()
        self.assertEqual(profile["points"], 70)
        self.assertTrue(profile["points_source"]["signup"])
        # Updating the profile does not award sign-up points again.
        self.assertEqual(self._create(name="Asha R")["points"], 70)

    def test_unknown_user(self):
        self.assertEqual(self.client.get("/users/ghost/metrics").status_code, 404)
        self.assertEqual(self.client.get("/users/ghost").status_code, 404)

    def test_metrics_without_snapshot(self):
        self._create()
        body = self.client.get("/users/u1/metrics").json()
        self.assertEqual(body["metrics"]["netWorth"], 0)
        self.assertIn("savingsRatio", body["triggeredActionKeys"])
        self.assertEqual(body["expenseBreakdown"], [])

    def test_metrics_need_age(self):
        self._create(age=None)
        self.assertEqual(self.client.get("/users/u1/metrics").status_code, 409)

    def test_age_from_date_of_birth(self):
        self._create(age=None, dateOfBirth="1990-06-01")
        self.assertEqual(self.client.get("/users/u1/metrics").status_code, 200)

    def test_latest_snapshot_drives_metrics(self):
        self._create()
        self._snapshot(date="2023-01-01T00:00:00", income={"salary": _monthly(100000)}, expenses={"rent": _monthly(95000)})
        self._snapshot(date="2024-01-01T00:00:00", income={"salary": _monthly(100000)}, expenses={"rent": _monthly(70000)})
        ratios = self.client.get("/users/u1/metrics").json()["metrics"]["healthRatios"]
        self.assertAlmostEqual(ratios["savingsRatio"]["value"], 30.0)
        self.assertEqual(ratios["savingsRatio"]["status"], "green")

    def test_negative_amount_rejected(self):
        self._create()
        r = self.client.post("/users/u1/snapshots", json={"financials": {"assets": {"cashInHand": -5}}})
        self.assertEqual(r.status_code, 422)

    def test_timeline(self):
        self._create()
        self._snapshot(date="2023-01-01T00:00:00", income={"salary": _monthly(100000)})
        self._snapshot(date="2024-01-01T00:00:00", income={"salary": _monthly(100000)})
        body = self.client.get("/users/u1/timeline").json()
        self.assertEqual(len(body["history"]), 2)
        self.assertEqual(body["benchmark"][0]["age"], 20)
        self.assertEqual(body["benchmark"][-1]["age"], 85)


class TestGoals(ApiTestCase):

    def test_add_and_remove(self):
        self._create()
        goal = self.client.post("/users/u1/goals", json={"name": "House", "targetAge": 32, "targetValue": 500000}).json()
        coverage = self.client.get("/users/u1/metrics").json()["metrics"]["goalCoverageRatios"]
        self.assertEqual(coverage["medium"]["status"], "red")
        self.assertEqual(self.client.delete(f"/users/u1/goals/{goal['id']}").status_code, 200)
        self.assertEqual(self.client.delete(f"/users/u1/goals/{goal['id']}").status_code, 404)

    def test_invalid_goal(self):
        self._create()
        r = self.client.post("/users/u1/goals", json={"name": "X", "targetAge": -1, "targetValue": 1})
        self.assertEqual(r.status_code, 422)


class TestGamification(ApiTestCase):

    def test_persona(self):
        self._create()
        body = self.client.post("/users/u1/persona", json={"answers": [0, 0, 0, 0, 0]}).json()
        self.assertEqual(body, {"persona": "Adventurer", "points": 100})
        self.assertEqual(self.client.get("/users/u1").json()["persona"], "Adventurer")

    def test_bad_persona_answers(self):
        self._create()
        self.assertEqual(self.client.post("/users/u1/persona", json={"answers": [5, 0, 0, 0, 0]}).status_code, 400)
        self.assertEqual(self.client.post("/users/u1/persona", json={"answers": [0]}).status_code, 400)

    def test_section_rewards(self):
        self._create()
        self.assertEqual(self.client.post("/users/u1/rewards/netWorth").json()["points"], 320)
        self.assertEqual(self.client.post("/users/u1/rewards/netWorth").json()["points"], 320)
        self.assertEqual(self.client.post("/users/u1/rewards/bogus").status_code, 400)


class TestActions(ApiTestCase):

    def test_action_lifecycle(self):
        self._create()
        r = self.client.post("/users/u1/actions", json={"actionKey": "liquidityRatio", "targetDate": "2030-01-01"})
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(r.json()["lockedPoints"], 100)
        action_id = r.json()["action"]["action_id"]

        dup = self.client.post("/users/u1/actions", json={"actionKey": "liquidityRatio", "targetDate": "2030-01-01"})
        self.assertEqual(dup.status_code, 409)

        plan = self.client.get("/users/u1/plan").json()
        self.assertNotIn("liquidityRatio", plan["todoActionKeys"])
        self.assertTrue(plan["inProgress"][0]["stillTriggered"])

        # Still triggered: no liquid savings yet.
        self.assertEqual(self.client.post(f"/users/u1/actions/{action_id}/complete").status_code, 409)

        self._snapshot(
            assets={"savingsAccount": 600000},
            income={"salary": _monthly(100000)},
            expenses={"rent": _monthly(50000)},
        )
        done = self.client.post(f"/users/u1/actions/{action_id}/complete")
        self.assertEqual(done.status_code, 200, done.text)
        self.assertEqual(done.json()["points"], 170)
        self.assertEqual(done.json()["action"]["status"], "completed")
        self.assertEqual(self.client.get("/users/u1").json()["locked_points"], 0)

        again = self.client.post(f"/users/u1/actions/{action_id}/complete")
        self.assertEqual(again.status_code, 409)

    def test_key_outside_catalog(self):
        self._create()
        for _ in range(3):
            r = self.client.post("/users/u1/actions", json={"actionKey": "not-a-real-key", "targetDate": "2030-01-01"})
            self.assertEqual(r.status_code, 404)
        profile = self.client.get("/users/u1").json()
        self.assertEqual(profile["points"], 70)
        self.assertEqual(profile["locked_points"], 0)
        self.assertEqual(self.client.get("/users/u1/plan").json()["inProgress"], [])

    def test_key_not_currently_triggered(self):
        self._create()
        # No liabilities, so leverage is not flagged.
        r = self.client.post("/users/u1/actions", json={"actionKey": "leverageRatio", "targetDate": "2030-01-01"})
        self.assertEqual(r.status_code, 409)
        self.assertEqual(self.client.get("/users/u1").json()["locked_points"], 0)

    def test_unknown_action(self):
        self._create()
        self.assertEqual(self.client.post("/users/u1/actions/nope/complete").status_code, 404)


class TestProjections(ApiTestCase):

    def test_seeded_from_monthly_savings(self):
        self._create()
        self._snapshot(income={"salary": _monthly(100000)}, expenses={"rent": _monthly(70000)})
        body = self.client.get("/users/u1/projections", params={"rate": 0, "years": 2, "stepUp": 0}).json()
        self.assertEqual(body["monthlyInvestment"], 30000)
        self.assertEqual(body["sip"]["futureValue"], 720000)
        self.assertEqual(len(body["sip"]["points"]), 2)
        self.assertEqual(body["stepUp"]["totalInvested"], 720000)

    def test_negative_savings_project_nothing(self):
        self._create()
        self._snapshot(income={"salary": _monthly(50000)}, expenses={"rent": _monthly(70000)})
        body = self.client.get("/users/u1/projections", params={"years": 3}).json()
        self.assertEqual(body["monthlyInvestment"], 0)
        self.assertEqual(body["sip"]["futureValue"], 0)

    def test_explicit_amount_and_bad_input(self):
        self._create()
        body = self.client.get("/users/u1/projections", params={"monthly": 1000, "rate": 12, "years": 1}).json()
        self.assertEqual(body["sip"]["totalInvested"], 12000)
        self.assertGreater(body["stepUp"]["totalCorpus"], 12000)
        r = self.client.get("/users/u1/projections", params={"monthly": -1})
        self.assertEqual(r.status_code, 400)


class TestAdvisorClients(ApiTestCase):

    def test_list_and_filter(self):
        self._create("adv", role="Financial Professional", name="Adviser")
        self._create("c1", name="Asha", advisorId="adv")
        self._create("c2", name="Vikram", phoneNumber="9700000002", advisorId="adv", age=50)
        self._snapshot("c1", assets={"stocks": 1000000})
        self.client.post("/users/c1/rewards/netWorth")

        body = self.client.get("/advisors/adv/clients").json()
        self.assertEqual(body["stats"]["total_clients"], 2)
        self.assertEqual(body["stats"]["net_worth_calculated"], 1)

        rows = self.client.get("/advisors/adv/clients", params={"completion": "not-started"}).json()["clients"]
        self.assertEqual([r["user_id"] for r in rows], ["c2"])

        rows = self.client.get("/advisors/adv/clients", params={"netWorthMin": 500000}).json()["clients"]
        self.assertEqual([r["user_id"] for r in rows], ["c1"])

        rows = self.client.get("/advisors/adv/clients", params={"search": "vik"}).json()["clients"]
        self.assertEqual([r["user_id"] for r in rows], ["c2"])

    def test_bad_completion_filter(self):
        r = self.client.get("/advisors/adv/clients", params={"completion": "halfway"})
        self.assertEqual(r.status_code, 422)


if __name__ == "__main__":
    unittest.main()
