from __future__ import annotations

import math
import random
import time
import uuid
from typing import Callable

from app.schemas.analysis import AnalysisResult

DEFAULT_FILE_NAME = "Raw Text"
SUGGESTION_COUNT = 3
LONG_TEXT_THRESHOLD = 500

SUGGESTION_POOL = (
    "Use more active verbs to describe your achievements.",
    "Include specific metrics (e.g., 'increased revenue by 20%') to ground your claims.",
    "Vary your sentence structure to avoid a robotic rhythm.",
    "Inject more personal voice when describing your career objectives.",
    "Replace generic buzzwords with specific industry terminology.",
    "Focus on 'storytelling' for your major projects rather than just listing tasks.",
)

TRANSITIONS = (
    "Furthermore,",
    "Additionally,",
    "In my experience,",
    "Notably,",
    "To elaborate,",
)

SENTENCE_DELIMITER = ". "
HUMANIZED_SUFFIX = " (Enhanced for personal tone and flow)"

HUMANIZE_DELTA = 60
HUMANIZE_FLOOR = 5
HUMANIZE_CEILING = 95


def epoch_ms() -> int:
    return int(time.time() * 1000)


def _new_id() -> str:
    return str(uuid.uuid4())


def ai_probability_for_length(length: int) -> int:
    pseudo_random = length % 100
    if length > LONG_TEXT_THRESHOLD:
        ai_prob = min(95, 40 + pseudo_random / 2)
    else:
        ai_prob = min(90, 20 + pseudo_random)
    return math.floor(ai_prob)


def humanized_scores(ai_probability: int, human_probability: int) -> tuple[int, int]:
    # Clamped independently; the pair is not guaranteed to sum to 100.
    return (
        max(HUMANIZE_FLOOR, ai_probability - HUMANIZE_DELTA),
        min(HUMANIZE_CEILING, human_probability + HUMANIZE_DELTA),
    )


class AnalysisEngine:
    """Mock scorer and rewriter.

    Scores depend only on text length. Randomness is limited to suggestion
    order and transition choice and comes from the injected ``rng``.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        clock: Callable[[], int] = epoch_ms,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.rng = rng or random.Random()
        self.clock = clock
        self.id_factory = id_factory

    def pick_suggestions(self) -> list[str]:
        shuffled = list(SUGGESTION_POOL)
        self.rng.shuffle(shuffled)
        return shuffled[:SUGGESTION_COUNT]

    def analyze(self, text: str, file_name: str | None = DEFAULT_FILE_NAME) -> AnalysisResult:
        ai_probability = ai_probability_for_length(len(text))
        return AnalysisResult(
            id=self.id_factory(),
            file_name=file_name,
            original_text=text,
            ai_probability=ai_probability,
            human_probability=100 - ai_probability,
            timestamp=self.clock(),
            suggestions=self.pick_suggestions(),
        )

    def humanize(self, text: str) -> str:
        sentences = text.split(SENTENCE_DELIMITER)
        rewritten: list[str] = []
        for index, sentence in enumerate(sentences):
            if index % 3 == 0 and index != 0:
                transition = self.rng.choice(TRANSITIONS)
                sentence = f"{transition} {sentence[:1].lower()}{sentence[1:]}"
            rewritten.append(sentence)
        return SENTENCE_DELIMITER.join(rewritten) + HUMANIZED_SUFFIX
