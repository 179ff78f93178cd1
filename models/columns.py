"""
Catalog of columns available to advanced (custom-column) exports
Each column maps a configuration key to a header label and a source field
"""

# Formatting kinds applied by the row projector
TEXT = 'text'
NUMBER = 'number'
PERCENTAGE = 'percentage'
DURATION = 'duration'
BOOLEAN = 'boolean'
TIMESTAMP = 'timestamp'
ADMISSION_TYPE = 'admission_type'
PERFORMANCE_LEVEL = 'performance_level'
ATTENDANCE_STATUS = 'attendance_status'
SUBMISSION_STATUS = 'submission_status'
FEEDBACK = 'feedback'
TRUNCATED = 'truncated'
QUESTION_MARKS = 'question_marks'


class ColumnDefinition:
    """One selectable export column"""

    def __init__(self, key, label, source, kind=TEXT, default=False, question_type=None):
        self.key = key
        self.label = label
        self.source = source
        self.kind = kind
        self.default = default
        self.question_type = question_type

    def __repr__(self):
        return f'<ColumnDefinition {self.key}: {self.label}>'


def _marks(key, label, question_type):
    return ColumnDefinition(key, label, f'{question_type}_marks', QUESTION_MARKS,
                            question_type=question_type)


COLUMN_GROUPS = {
    'studentInfo': [
        ColumnDefinition('studentIdNumber', 'Student ID Number', 'student_id_number', default=True),
        ColumnDefinition('studentName', 'Student Name', 'student_name', default=True),
        ColumnDefinition('emailId', 'Email ID', 'student_email', default=True),
        ColumnDefinition('phoneNumber', 'Phone Number', 'phone'),
        ColumnDefinition('avatarUrl', 'Avatar URL', 'avatar_url'),
        ColumnDefinition('emailVerified', 'Email Verified', 'email_verified', BOOLEAN),
    ],
    'academicInfo': [
        ColumnDefinition('department', 'Department', 'department_name', default=True),
        ColumnDefinition('batch', 'Batch', 'batch', default=True),
        ColumnDefinition('admissionType', 'Admission Type', 'admission_type', ADMISSION_TYPE),
        ColumnDefinition('joiningYear', 'Joining Year', 'joining_year'),
        ColumnDefinition('finalYear', 'Final Year', 'final_year'),
        ColumnDefinition('currentYear', 'Current Year', 'current_year'),
        ColumnDefinition('yearStartDate', 'Year Start Date', 'year_start_date', TIMESTAMP),
    ],
    'collegeInfo': [
        ColumnDefinition('collegeName', 'College Name', 'college_name', default=True),
        ColumnDefinition('collegeCode', 'College Code', 'college_code'),
        ColumnDefinition('collegeAddress', 'College Address', 'college_address'),
        ColumnDefinition('collegeCity', 'College City', 'college_city'),
        ColumnDefinition('collegeState', 'College State', 'college_state'),
        ColumnDefinition('collegeCountry', 'College Country', 'college_country'),
        ColumnDefinition('collegePhone', 'College Phone', 'college_phone'),
        ColumnDefinition('collegeEmail', 'College Email', 'college_email'),
        ColumnDefinition('collegeWebsite', 'College Website', 'college_website'),
    ],
    'assessmentDetails': [
        ColumnDefinition('assessmentId', 'Assessment ID', 'assessment_id'),
        ColumnDefinition('assessmentTitle', 'Assessment Title', 'assessment_title', default=True),
        ColumnDefinition('assessmentType', 'Assessment Type', 'assessment_type', default=True),
        ColumnDefinition('assessmentCategory', 'Assessment Category', 'assessment_category'),
        ColumnDefinition('difficultyLevel', 'Difficulty Level', 'difficulty_level'),
        ColumnDefinition('totalPoints', 'Total Points', 'total_points', NUMBER, default=True),
        ColumnDefinition('durationMinutes', 'Duration (Minutes)', 'duration_minutes', DURATION),
        ColumnDefinition('startTime', 'Start Time', 'start_time', TIMESTAMP),
        ColumnDefinition('endTime', 'End Time', 'end_time', TIMESTAMP),
        ColumnDefinition('passingScore', 'Passing Score', 'passing_score', NUMBER),
        ColumnDefinition('maxAttempts', 'Max Attempts', 'max_attempts', NUMBER),
        ColumnDefinition('isTimed', 'Is Timed', 'is_timed', BOOLEAN),
        ColumnDefinition('allowRetake', 'Allow Retake', 'allow_retake', BOOLEAN),
    ],
    'submissionDetails': [
        ColumnDefinition('submissionId', 'Submission ID', 'submission_id'),
        ColumnDefinition('submittedAt', 'Submitted At', 'submitted_at', TIMESTAMP, default=True),
        ColumnDefinition('startedAt', 'Started At', 'started_at', TIMESTAMP),
        ColumnDefinition('gradedAt', 'Graded At', 'graded_at', TIMESTAMP),
        ColumnDefinition('gradedBy', 'Graded By', 'graded_by'),
        ColumnDefinition('timeTakenMinutes', 'Time Taken (Minutes)', 'time_taken_minutes', DURATION, default=True),
        ColumnDefinition('attemptNumber', 'Attempt Number', 'attempt_number', NUMBER, default=True),
        ColumnDefinition('submissionStatus', 'Submission Status', 'status', SUBMISSION_STATUS, default=True),
        ColumnDefinition('ipAddress', 'IP Address', 'ip_address'),
        ColumnDefinition('userAgent', 'User Agent', 'user_agent', TRUNCATED),
    ],
    'performanceMetrics': [
        ColumnDefinition('score', 'Score (Points)', 'score', NUMBER, default=True),
        ColumnDefinition('maxScore', 'Max Score (Points)', 'max_score', NUMBER, default=True),
        ColumnDefinition('percentageScore', 'Percentage Score', 'percentage_score', PERCENTAGE, default=True),
        ColumnDefinition('correctAnswers', 'Correct Answers', 'correct_answers', NUMBER),
        ColumnDefinition('totalQuestions', 'Total Questions', 'total_questions', NUMBER),
        ColumnDefinition('feedback', 'Feedback', 'feedback', FEEDBACK),
        ColumnDefinition('performanceLevel', 'Performance Level', 'percentage_score', PERFORMANCE_LEVEL, default=True),
    ],
    'questionTypeBreakdown': [
        _marks('multipleChoiceMarks', 'Multiple Choice Marks', 'multiple_choice'),
        _marks('trueFalseMarks', 'True/False Marks', 'true_false'),
        _marks('shortAnswerMarks', 'Short Answer Marks', 'short_answer'),
        _marks('essayMarks', 'Essay Marks', 'essay'),
        _marks('codingMarks', 'Coding Marks', 'coding'),
        _marks('fillBlanksMarks', 'Fill Blanks Marks', 'fill_blanks'),
        _marks('matchingMarks', 'Matching Marks', 'matching'),
        _marks('orderingMarks', 'Ordering Marks', 'ordering'),
        _marks('fileUploadMarks', 'File Upload Marks', 'file_upload'),
    ],
    'attendanceInfo': [
        ColumnDefinition('attendanceStatus', 'Attendance Status', 'status', ATTENDANCE_STATUS, default=True),
        ColumnDefinition('lateSubmission', 'Late Submission', 'late_submission', BOOLEAN),
        ColumnDefinition('disqualified', 'Disqualified', 'disqualified', BOOLEAN),
    ],
    'additionalAnalytics': [
        ColumnDefinition('createdAt', 'Created At', 'created_at', TIMESTAMP),
        ColumnDefinition('updatedAt', 'Updated At', 'updated_at', TIMESTAMP),
        ColumnDefinition('isPublished', 'Is Published', 'is_published', BOOLEAN),
        ColumnDefinition('isActive', 'Is Active', 'is_active', BOOLEAN),
    ],
}

COLUMN_MAPPING = {
    column.key: column
    for columns in COLUMN_GROUPS.values()
    for column in columns
}

# Columns that read 'Absent' for students who did not submit
PERFORMANCE_COLUMN_KEYS = frozenset(
    ['score', 'maxScore', 'percentageScore', 'correctAnswers', 'performanceLevel'] +
    [column.key for column in COLUMN_GROUPS['questionTypeBreakdown']]
)


def default_column_selection():
    """Column flags the export dialog starts with"""
    return {key: column.default for key, column in COLUMN_MAPPING.items()}
