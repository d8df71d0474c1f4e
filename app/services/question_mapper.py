"""
Question Mapper
Builds the caller-facing question view with correctness stripped
"""
from app.models.catalog import Question
from app.models.next_question import OptionView, QuestionView


def map_to_question_view(
    question: Question,
    sequence_number: int,
    total_questions: int
) -> QuestionView:
    """
    Map a catalog question to its sanitized view

    SECURITY: options are rebuilt from id and text only, so is_correct
    never reaches the response.

    Args:
        question: Full question including correctness flags
        sequence_number: 1-based position of the question in the quiz
        total_questions: Number of questions in the test

    Returns:
        QuestionView safe to send to the quiz-taker
    """
    return QuestionView(
        id=question.id,
        text=question.text,
        options=[OptionView(id=option.id, text=option.text) for option in question.options],
        sequenceNumber=sequence_number,
        totalQuestions=total_questions
    )
