"""
Multiple-choice distractor generation.

Distractors come from the answer's neighbourhood: the off-by-one and
off-by-ten values first, then random values near the answer. Small answers
(0, 1, 2) can exhaust the neighbourhood, so random draws are capped and the
remaining slots are filled deterministically.
"""

from __future__ import annotations

import random

from loguru import logger

CHOICE_COUNT = 4
RANDOM_CANDIDATES = 5


class ChoiceGenerator:
    """Build a shuffled set of answer choices around the correct answer."""

    def __init__(self, rng: random.Random | None = None, max_retries: int = 50):
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        self.rng = rng or random.Random()
        self.max_retries = max_retries

    def choices(self, correct_answer: int) -> list[int]:
        """
        Return CHOICE_COUNT unique non-negative integers including correct_answer.

        Args:
            correct_answer: The right answer (non-negative)

        Returns:
            Shuffled list of choices
        """
        if correct_answer < 0:
            raise ValueError(f"correct_answer must be non-negative: {correct_answer}")

        rng = self.rng
        c = correct_answer

        pool = [c + 1, c - 1, c + 10, c - 10]
        for _ in range(RANDOM_CANDIDATES):
            pool.append(rng.randint(max(0, c - 5), c + 10))

        # Dedupe preserving first-seen order, then shuffle
        distractors = list(dict.fromkeys(v for v in pool if v >= 0 and v != c))
        rng.shuffle(distractors)

        selected = [c] + distractors[: CHOICE_COUNT - 1]

        retries = 0
        while len(selected) < CHOICE_COUNT and retries < self.max_retries:
            candidate = rng.randint(max(0, c - 8), c + 15)
            if candidate not in selected:
                selected.append(candidate)
            retries += 1

        if len(selected) < CHOICE_COUNT:
            logger.debug(f"Distractor draws exhausted for {c}, filling deterministically")
            step = 1
            while len(selected) < CHOICE_COUNT:
                if c + step not in selected:
                    selected.append(c + step)
                step += 1

        rng.shuffle(selected)
        return selected
