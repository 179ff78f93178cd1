"""
Submission and assessment input records for report exports
These are read-only inputs supplied by the submissions API
"""

from utils.formatters import to_number

SUBMISSION_STATUSES = ('not_attempted', 'in_progress', 'submitted', 'graded')
PRESENT_STATUSES = ('submitted', 'graded')


class SubmissionRecord:
    """One student's attempt at one assessment"""

    FIELDS = (
        'student_id_number', 'student_name', 'student_email',
        'department_name', 'batch', 'college_name',
        'status', 'score', 'percentage_score', 'attempt_number',
        'late_submission', 'disqualified',
        'started_at', 'submitted_at', 'graded_at',
    )

    def __init__(self, student_id_number=None, student_name=None, student_email=None,
                 department_name=None, batch=None, college_name=None, status=None,
                 score=None, percentage_score=None, attempt_number=None,
                 late_submission=None, disqualified=None, started_at=None,
                 submitted_at=None, graded_at=None, extras=None):
        self.student_id_number = student_id_number
        self.student_name = student_name
        self.student_email = student_email
        self.department_name = department_name
        self.batch = batch
        self.college_name = college_name
        self.status = status
        self.score = to_number(score)
        self.percentage_score = to_number(percentage_score)
        self.attempt_number = to_number(attempt_number)
        self.late_submission = late_submission
        self.disqualified = disqualified
        self.started_at = started_at
        self.submitted_at = submitted_at
        self.graded_at = graded_at
        self.extras = dict(extras or {})

    @classmethod
    def from_dict(cls, data):
        """Build a record from a snake_case submission payload"""
        data = data or {}
        known = {field: data.get(field) for field in cls.FIELDS}
        extras = {key: value for key, value in data.items() if key not in cls.FIELDS}
        return cls(extras=extras, **known)

    def get(self, field, default=None):
        """Look up a named field, falling back to the extra payload keys"""
        if field in self.FIELDS:
            value = getattr(self, field)
        else:
            value = self.extras.get(field)
        return default if value is None else value

    @property
    def is_present(self):
        """Submitted or graded attempts count as present"""
        return self.status in PRESENT_STATUSES

    @property
    def attempt(self):
        """Attempt number, treating a missing value as the first attempt"""
        return self.attempt_number if self.attempt_number is not None else 1

    @property
    def performance_value(self):
        """Percentage used for bucketing; falls back to the raw score"""
        if self.percentage_score is not None:
            return self.percentage_score
        if self.score is not None:
            return self.score
        return 0

    def to_dict(self):
        data = dict(self.extras)
        data.update({field: getattr(self, field) for field in self.FIELDS})
        return data

    def __repr__(self):
        return f'<SubmissionRecord {self.student_id_number} - {self.status}: {self.score}>'


class AssessmentMetadata:
    """Assessment identity and its question-type composition"""

    def __init__(self, id=None, title=None, college_name=None, created_at=None,
                 question_types=None, questions=None):
        self.id = id
        self.title = title
        self.college_name = college_name
        self.created_at = created_at
        # None means the composition was not supplied at all
        self.question_types = list(question_types) if question_types is not None else None
        self.questions = list(questions) if questions is not None else None

    @classmethod
    def from_dict(cls, data):
        """Build metadata from an assessment payload.

        Question types may be plain strings or objects such as
        {"type": "coding", "marks": 40}; only the type is used.
        """
        data = data or {}
        raw_types = data.get('question_types')
        if raw_types is None:
            raw_types = data.get('questionTypes')

        question_types = None
        if raw_types is not None:
            question_types = []
            for entry in raw_types:
                if isinstance(entry, dict):
                    qtype = entry.get('type') or entry.get('question_type')
                else:
                    qtype = entry
                if qtype:
                    question_types.append(str(qtype))

        return cls(
            id=data.get('id'),
            title=data.get('title'),
            college_name=data.get('college_name'),
            created_at=data.get('created_at'),
            question_types=question_types,
            questions=data.get('questions'),
        )

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'college_name': self.college_name,
            'created_at': self.created_at,
            'question_types': self.question_types,
        }

    def __repr__(self):
        return f'<AssessmentMetadata {self.id}: {self.title}>'
