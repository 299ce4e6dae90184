import unittest

from finpulse.planner.persona import QUIZ_QUESTIONS, quiz_scores, score_persona


class TestPersonaQuiz(unittest.TestCase):

    def test_five_questions(self):
        self.assertEqual(len(QUIZ_QUESTIONS), 5)
        for q in QUIZ_QUESTIONS:
            self.assertEqual(len(q["answers"]), 3)

    def test_disciplined_personas(self):
        self.assertEqual(score_persona([0, 0, 0, 0, 0]), "Adventurer")
        self.assertEqual(score_persona([1, 1, 1, 0, 0]), "Guardian")
        self.assertEqual(score_persona([2, 2, 2, 0, 0]), "Planner")

    def test_undisciplined_personas(self):
        self.assertEqual(score_persona([0, 0, 0, 1, 1]), "Accumulator")
        self.assertEqual(score_persona([1, 1, 1, 2, 2]), "Spender")
        self.assertEqual(score_persona([2, 2, 2, 2, 2]), "Seeker")

    def test_risk_boundary(self):
        # One aggressive answer gives risk 2, enough to clear the > 1 bar.
        self.assertEqual(quiz_scores([0, 2, 2, 0, 1]), (2, 2))
        self.assertEqual(score_persona([0, 2, 2, 0, 1]), "Adventurer")
        # Aggressive and cautious answers cancel out.
        self.assertEqual(score_persona([0, 1, 2, 0, 1]), "Planner")

    def test_invalid_answers(self):
        with self.assertRaises(ValueError):
            score_persona([0, 0, 0, 0])
        with self.assertRaises(ValueError):
            score_persona([0, 0, 0, 0, 3])
        with self.assertRaises(ValueError):
            score_persona([0, 0, -1, 0, 0])
        with self.assertRaises(ValueError):
            score_persona([True, 0, 0, 0, 0])


if __name__ == "__main__":
    unittest.main()
