"""Random integer conversion quiz."""

import random

from radix_app.models.quiz import QuizAnswer, QuizAnswerResult, QuizQuestion, QuizResult
from radix_app.services.converter_service import MAX_BASE, MIN_BASE, convert_integer, to_base

MIN_QUIZ_VALUE = 10
MAX_QUIZ_VALUE = 999


class QuizService:
    """Generates conversion questions and grades answers.

    Grading recomputes the expected answer from the question, so questions
    need not be stored between generation and grading.
    """

    def __init__(self, rng: random.Random | None = None, question_count: int = 5):
        """Initialize the quiz service.

        Args:
            rng: Random source, seeded in tests
            question_count: Questions per generated quiz
        """
        self.rng = rng or random.Random()
        self.question_count = question_count

    def generate_question(self) -> QuizQuestion:
        source_base = self.rng.randint(MIN_BASE, MAX_BASE)
        target_base = self.rng.randint(MIN_BASE, MAX_BASE)
        value = to_base(self.rng.randint(MIN_QUIZ_VALUE, MAX_QUIZ_VALUE), source_base)
        return QuizQuestion(value=value, source_base=source_base, target_base=target_base)

    def generate_quiz(self, count: int | None = None) -> list[QuizQuestion]:
        return [self.generate_question() for _ in range(count or self.question_count)]

    @staticmethod
    def correct_answer(question: QuizQuestion) -> str:
        """Expected answer for a question, or an empty string if it is not convertible."""
        outcome = convert_integer(question.value, question.source_base, question.target_base)
        return outcome.result

    def grade(self, answer: QuizAnswer) -> QuizAnswerResult:
        """Grade one answer. Digits compare case-insensitively."""
        correct_answer = self.correct_answer(answer)
        is_correct = bool(correct_answer) and answer.answer.strip().lower() == correct_answer
        return QuizAnswerResult(
            **answer.model_dump(), correct_answer=correct_answer, is_correct=is_correct
        )

    def grade_quiz(self, answers: list[QuizAnswer]) -> QuizResult:
        results = [self.grade(answer) for answer in answers]
        return QuizResult(
            score=sum(1 for result in results if result.is_correct),
            total=len(results),
            results=results,
        )
