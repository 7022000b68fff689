import math
import random
import unittest

from app.services.analysis_engine import (
    HUMANIZED_SUFFIX,
    SUGGESTION_POOL,
    TRANSITIONS,
    AnalysisEngine,
    ai_probability_for_length,
    humanized_scores,
)


def expected_ai_probability(length: int) -> int:
    if length > 500:
        return math.floor(min(95, 40 + (length % 100) / 2))
    return math.floor(min(90, 20 + (length % 100)))


class ScoringTests(unittest.TestCase):
    def setUp(self):
        self.engine = AnalysisEngine(random.Random(7), clock=lambda: 1_700_000_000_000, id_factory=lambda: "fixed-id")

    def test_probabilities_follow_length_formula_and_sum_to_100(self):
        for length in list(range(0, 1200, 7)) + [499, 500, 501, 570, 599, 600, 699]:
            result = self.engine.analyze("x" * length)
            self.assertEqual(result.ai_probability, expected_ai_probability(length), length)
            self.assertEqual(result.ai_probability + result.human_probability, 100, length)

    def test_scores_are_repeatable_for_same_text(self):
        text = "Experienced engineer. " * 30
        first = self.engine.analyze(text)
        second = self.engine.analyze(text)
        self.assertEqual(first.ai_probability, second.ai_probability)
        self.assertEqual(first.human_probability, second.human_probability)

    def test_known_values(self):
        self.assertEqual(ai_probability_for_length(600), 40)
        self.assertEqual(ai_probability_for_length(599), 89)
        self.assertEqual(ai_probability_for_length(500), 20)
        self.assertEqual(ai_probability_for_length(470), 90)
        self.assertEqual(ai_probability_for_length(49), 69)

    def test_length_counts_code_points(self):
        text = "\U0001F600" * 30
        self.assertEqual(self.engine.analyze(text).ai_probability, ai_probability_for_length(30))
        self.assertEqual(self.engine.analyze(text).ai_probability, 50)

    def test_result_is_stamped(self):
        result = self.engine.analyze("some resume text", "cv.txt")
        self.assertEqual(result.id, "fixed-id")
        self.assertEqual(result.timestamp, 1_700_000_000_000)
        self.assertEqual(result.original_text, "some resume text")
        self.assertEqual(result.file_name, "cv.txt")
        self.assertIsNone(result.humanized_text)

    def test_default_label_is_raw_text(self):
        self.assertEqual(AnalysisEngine().analyze("abc").file_name, "Raw Text")


class SuggestionTests(unittest.TestCase):
    def test_three_distinct_suggestions_from_pool(self):
        engine = AnalysisEngine(random.Random(3))
        for _ in range(25):
            suggestions = engine.analyze("text").suggestions
            self.assertEqual(len(suggestions), 3)
            self.assertEqual(len(set(suggestions)), 3)
            self.assertTrue(set(suggestions) <= set(SUGGESTION_POOL))

    def test_selection_follows_shuffle_order(self):
        expected = list(SUGGESTION_POOL)
        random.Random(11).shuffle(expected)
        result = AnalysisEngine(random.Random(11)).analyze("text")
        self.assertEqual(result.suggestions, expected[:3])

    def test_default_engine_uses_unique_ids(self):
        engine = AnalysisEngine()
        self.assertNotEqual(engine.analyze("a").id, engine.analyze("a").id)


class HumanizeTests(unittest.TestCase):
    def test_transitions_only_on_every_third_sentence(self):
        text = "One. Two. Three. Four. Five. Six. Seven"
        output = AnalysisEngine(random.Random(5)).humanize(text)
        self.assertTrue(output.endswith(HUMANIZED_SUFFIX))
        sentences = output[: -len(HUMANIZED_SUFFIX)].split(". ")
        self.assertEqual(sentences[:3], ["One", "Two", "Three"])
        self.assertEqual(sentences[4:6], ["Five", "Six"])
        for index, original in ((3, "four"), (6, "seven")):
            transition, _, rest = sentences[index].rpartition(" ")
            self.assertIn(transition, TRANSITIONS)
            self.assertEqual(rest, original)

    def test_exact_output_with_seeded_rng(self):
        rng = random.Random(42)
        first, second = rng.choice(TRANSITIONS), rng.choice(TRANSITIONS)
        output = AnalysisEngine(random.Random(42)).humanize("A. B. C. Dog. E. F. Gate")
        self.assertEqual(output, f"A. B. C. {first} dog. E. F. {second} gate{HUMANIZED_SUFFIX}")

    def test_short_text_only_gets_suffix(self):
        engine = AnalysisEngine(random.Random(1))
        self.assertEqual(engine.humanize("Just one sentence."), "Just one sentence." + HUMANIZED_SUFFIX)
        self.assertEqual(engine.humanize(""), HUMANIZED_SUFFIX)

    def test_rehumanizing_appends_suffix_again(self):
        engine = AnalysisEngine(random.Random(9))
        once = engine.humanize("Alpha. Beta. Gamma")
        twice = engine.humanize(once)
        self.assertEqual(twice, once + HUMANIZED_SUFFIX)
        self.assertEqual(twice.count(HUMANIZED_SUFFIX), 2)

    def test_rehumanizing_adds_transitions_at_the_same_positions(self):
        engine = AnalysisEngine(random.Random(13))
        once = engine.humanize("One. Two. Three. Four. Five. Six. Seven. Eight")
        twice = engine.humanize(once)
        first_pass = once[: -len(HUMANIZED_SUFFIX)].split(". ")
        second_pass = twice[: -2 * len(HUMANIZED_SUFFIX)].split(". ")
        self.assertEqual(len(second_pass), len(first_pass))
        for index, (before, after) in enumerate(zip(first_pass, second_pass)):
            if index % 3 == 0 and index != 0:
                prefixes = [t for t in TRANSITIONS if after.startswith(t + " ")]
                self.assertEqual(len(prefixes), 1, after)
                self.assertEqual(after[len(prefixes[0]) + 1 :], before[:1].lower() + before[1:])
            else:
                self.assertEqual(after, before)


class HumanizedScoreTests(unittest.TestCase):
    def test_example_from_600_chars(self):
        self.assertEqual(humanized_scores(40, 60), (5, 95))

    def test_clamped_boundaries(self):
        self.assertEqual(humanized_scores(10, 90), (5, 95))
        self.assertEqual(humanized_scores(30, 70), (5, 95))
        self.assertEqual(humanized_scores(90, 10), (30, 70))

    def test_sum_is_not_an_invariant(self):
        ai, human = humanized_scores(5, 95)
        self.assertEqual((ai, human), (5, 95))
        ai, human = humanized_scores(70, 30)
        self.assertEqual((ai, human), (10, 90))
        ai, human = humanized_scores(70, 20)
        self.assertEqual((ai, human), (10, 80))
        self.assertNotEqual(ai + human, 100)


if __name__ == "__main__":
    unittest.main()
