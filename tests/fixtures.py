"""
Shared sample data for the test suites
"""

from datetime import datetime

from models.submission import AssessmentMetadata, SubmissionRecord

FIXED_TIME = datetime(2024, 3, 1, 10, 15, 30)


def fixed_clock():
    return FIXED_TIME


def make_submission(roll, name, status='graded', score=None, percentage=None, **extra):
    data = {
        'student_id_number': roll,
        'student_name': name,
        'student_email': f'{roll.lower()}@example.edu',
        'department_name': 'CSE',
        'batch': '2024',
        'college_name': 'Greenfield College',
        'status': status,
        'score': score,
        'percentage_score': percentage if percentage is not None else score,
        'attempt_number': 1,
    }
    data.update(extra)
    return data


def scenario_a_submissions():
    """Two graded students (95 and 62) and one who never attempted"""
    return [
        make_submission('R002', 'Bala', score=62),
        make_submission('R001', 'Asha', score=95),
        make_submission('R003', 'Chitra', status='not_attempted', score=None, percentage=None),
    ]


def mixed_submissions():
    return [
        make_submission('R001', 'Asha', score=95, department_name='CSE', batch='2024'),
        make_submission('R002', 'Bala', score=85, department_name='ECE', batch='2024'),
        make_submission('R003', 'Chitra', score=90, department_name='CSE', batch='2023'),
        make_submission('R004', 'Dev', status='submitted', score=55, department_name='MECH', batch='2023',
                        late_submission=True, attempt_number=2),
        make_submission('R005', 'Esha', status='in_progress', score=None, percentage=None,
                        department_name='ECE', batch='2024'),
        make_submission('R006', 'Farid', status='graded', score=72, department_name=None, batch='2024',
                        admission_type='lateral'),
    ]


def two_type_assessment(**overrides):
    data = {
        'id': 'A-1',
        'title': 'Data Structures Midterm',
        'college_name': 'Greenfield College',
        'created_at': '2024-03-01T09:00:00Z',
        'question_types': ['multiple_choice', 'essay'],
    }
    data.update(overrides)
    return AssessmentMetadata.from_dict(data)


def records(submissions):
    return [SubmissionRecord.from_dict(item) for item in submissions]
