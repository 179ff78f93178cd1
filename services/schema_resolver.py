"""
Schema resolver for assessment report exports
Derives the dynamic per-question-type columns of an assessment
"""

import logging

from utils.exceptions import DataShapeError

logger = logging.getLogger(__name__)

DEFAULT_QUESTION_TYPES = (
    'multiple_choice',
    'true_false',
    'short_answer',
    'essay',
    'coding',
    'fill_blanks',
    'matching',
    'ordering',
    'file_upload',
)

QUESTION_TYPE_LABELS = {
    'multiple_choice': 'MCQ Marks',
    'true_false': 'True/False Marks',
    'short_answer': 'Short Answer Marks',
    'essay': 'Essay Marks',
    'coding': 'Coding Marks',
    'fill_blanks': 'Fill Blanks Marks',
    'matching': 'Matching Marks',
    'ordering': 'Ordering Marks',
    'file_upload': 'File Upload Marks',
}


def _unique(values):
    """Drop duplicates and blanks, keeping first occurrence order"""
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def from_explicit_types(assessment):
    return _unique(getattr(assessment, 'question_types', None) or [])


def from_questions(assessment):
    types = []
    for question in getattr(assessment, 'questions', None) or []:
        if isinstance(question, dict):
            types.append(question.get('question_type'))
        else:
            types.append(getattr(question, 'question_type', None))
    return _unique(types)


def from_default_palette(assessment):
    return list(DEFAULT_QUESTION_TYPES)


class SchemaResolver:
    """Resolves (type, label) column pairs for an assessment"""

    STRATEGIES = (from_explicit_types, from_questions, from_default_palette)

    @staticmethod
    def question_type_label(question_type):
        """Human readable column label for a question type"""
        label = QUESTION_TYPE_LABELS.get(question_type)
        if label:
            return label
        return f"{str(question_type).replace('_', ' ').upper()} Marks"

    @staticmethod
    def resolve_question_types(assessment, strategies=None):
        """Try each strategy in turn and return the first non-empty result"""
        for strategy in strategies or SchemaResolver.STRATEGIES:
            types = strategy(assessment)
            if types:
                if strategy is from_default_palette:
                    logger.info("No question types for assessment %s, using default palette",
                                getattr(assessment, 'id', None))
                return types
        raise DataShapeError("Could not resolve question types for the assessment")

    @staticmethod
    def resolve(assessment, strategies=None):
        """Return ordered (question_type, label) pairs"""
        types = SchemaResolver.resolve_question_types(assessment, strategies)
        return [(qtype, SchemaResolver.question_type_label(qtype)) for qtype in types]
