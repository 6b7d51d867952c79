"""
Tests for the built-in question bank.
"""
from collections import Counter

import pytest

from placement_service.core.placement.types import Subject
from placement_service.schemas.questions import QuestionCreate
from placement_service.seed import SEED_QUESTIONS


class TestSeedQuestions:
    @pytest.mark.parametrize("entry", SEED_QUESTIONS, ids=lambda e: e["question_text"][:30])
    def test_entry_is_valid_question(self, entry):
        """Test that every seed entry passes the admin create schema."""
        QuestionCreate(**entry)

    def test_every_subject_covered(self):
        """Test that each subject has one question per difficulty step."""
        by_subject = Counter(entry["subject"] for entry in SEED_QUESTIONS)
        assert by_subject == {subject.value: 10 for subject in Subject}

        for subject in Subject:
            difficulties = sorted(
                entry["difficulty"]
                for entry in SEED_QUESTIONS
                if entry["subject"] == subject.value
            )
            assert difficulties == list(range(1, 11))

    def test_texts_unique_per_subject(self):
        keys = [(entry["subject"], entry["question_text"]) for entry in SEED_QUESTIONS]
        assert len(keys) == len(set(keys))
