"""
Unit tests for models, formatters and validators
"""

import unittest

from config import Config, TestingConfig
from models.columns import COLUMN_MAPPING, PERFORMANCE_COLUMN_KEYS, default_column_selection
from models.export_config import ExportConfiguration, ExportSettings, FilterSelection
from models.performance import BUCKET_LABELS, PerformanceBands
from models.submission import AssessmentMetadata, SubmissionRecord
from utils.exceptions import ConfigurationError, ExportError, SerializationError
from utils.formatters import (
    format_admission_type, format_date, format_duration, format_number, format_percentage,
    format_rate, format_timestamp, format_yes_no, is_missing, round_half_up,
    sanitize_filename_part, truncate,
)
from utils.validators import validate_custom_filename, validate_template_name


class TestPerformanceBands(unittest.TestCase):

    def test_bucket_boundaries(self):
        """Bucket edges: 90 belongs to 80-90%, anything above to >90%"""
        self.assertEqual(PerformanceBands.bucket_for(90), '80-90%')
        self.assertEqual(PerformanceBands.bucket_for(90.01), '>90%')
        self.assertEqual(PerformanceBands.bucket_for(80), '80-90%')
        self.assertEqual(PerformanceBands.bucket_for(79.9), '70-80%')
        self.assertEqual(PerformanceBands.bucket_for(50), '50-60%')
        self.assertEqual(PerformanceBands.bucket_for(49.99), '<50%')
        self.assertEqual(PerformanceBands.bucket_for(0), '<50%')

    def test_every_value_lands_in_exactly_one_bucket(self):
        for value in (0, 49.5, 50, 59.9, 60, 70, 80, 89.99, 90, 90.5, 100):
            matches = [label for label in BUCKET_LABELS if PerformanceBands.in_bucket(value, label)]
            self.assertEqual(len(matches), 1, value)

    def test_range_label_spellings(self):
        self.assertTrue(PerformanceBands.in_bucket(75, '70–80%'))
        self.assertTrue(PerformanceBands.in_bucket(75, '70-80%'))
        self.assertFalse(PerformanceBands.in_bucket(75, '80-90%'))

    def test_unknown_range_label_matches_everything(self):
        self.assertTrue(PerformanceBands.in_bucket(12, 'top-students'))

    def test_performance_levels(self):
        self.assertEqual(PerformanceBands.performance_level(90), 'Excellent')
        self.assertEqual(PerformanceBands.performance_level(85), 'Good')
        self.assertEqual(PerformanceBands.performance_level(70), 'Average')
        self.assertEqual(PerformanceBands.performance_level(60), 'Below Average')
        self.assertEqual(PerformanceBands.performance_level(None), 'Needs Improvement')

    def test_color_bands(self):
        self.assertEqual(PerformanceBands.color_band(80), 'good')
        self.assertEqual(PerformanceBands.color_band(79), 'borderline')
        self.assertEqual(PerformanceBands.color_band(59), 'at_risk')
        self.assertEqual(PerformanceBands.color_band(95, is_present=False), 'absent')


class TestSubmissionModels(unittest.TestCase):

    def test_record_keeps_unknown_fields(self):
        record = SubmissionRecord.from_dict({
            'student_id_number': 'R1', 'status': 'graded', 'score': '80', 'phone': '555-0101',
        })
        self.assertEqual(record.score, 80.0)
        self.assertEqual(record.get('phone'), '555-0101')
        self.assertEqual(record.get('missing', 'x'), 'x')
        self.assertEqual(record.to_dict()['phone'], '555-0101')

    def test_presence(self):
        self.assertTrue(SubmissionRecord(status='graded').is_present)
        self.assertTrue(SubmissionRecord(status='submitted').is_present)
        self.assertFalse(SubmissionRecord(status='in_progress').is_present)
        self.assertFalse(SubmissionRecord(status=None).is_present)

    def test_attempt_defaults_to_first(self):
        self.assertEqual(SubmissionRecord().attempt, 1)
        self.assertEqual(SubmissionRecord(attempt_number=3).attempt, 3)

    def test_performance_value_falls_back_to_score(self):
        self.assertEqual(SubmissionRecord(percentage_score=72, score=36).performance_value, 72)
        self.assertEqual(SubmissionRecord(score=40).performance_value, 40)
        self.assertEqual(SubmissionRecord().performance_value, 0)

    def test_assessment_question_type_objects(self):
        assessment = AssessmentMetadata.from_dict({
            'id': 7,
            'questionTypes': [{'type': 'coding', 'marks': 40}, 'essay'],
        })
        self.assertEqual(assessment.question_types, ['coding', 'essay'])

    def test_assessment_without_composition(self):
        self.assertIsNone(AssessmentMetadata.from_dict({'title': 'Quiz'}).question_types)


class TestExportConfiguration(unittest.TestCase):

    def test_defaults(self):
        config = ExportConfiguration.from_dict({})
        self.assertEqual(config.export_type, 'regular')
        self.assertEqual(config.settings.file_format, 'xlsx')
        self.assertTrue(config.settings.include_timestamp)
        config.validate()

    def test_advanced_export_requires_a_column(self):
        config = ExportConfiguration.from_dict({
            'type': 'advanced',
            'columns': {key: False for key in COLUMN_MAPPING},
        })
        with self.assertRaises(ConfigurationError) as ctx:
            config.validate()
        self.assertIn('at least one column', str(ctx.exception))

    def test_unknown_columns_do_not_count_as_selected(self):
        config = ExportConfiguration.from_dict({'type': 'advanced', 'columns': {'shoeSize': True}})
        with self.assertRaises(ConfigurationError):
            config.validate()

    def test_regular_export_ignores_column_selection(self):
        ExportConfiguration.from_dict({'type': 'regular', 'columns': {}}).validate()

    def test_unknown_file_format(self):
        config = ExportConfiguration.from_dict({'settings': {'fileFormat': 'docx'}})
        with self.assertRaises(ConfigurationError):
            config.validate()

    def test_format_not_allowed_by_deployment(self):
        config = ExportConfiguration.from_dict({'settings': {'fileFormat': 'csv'}})
        with self.assertRaises(ConfigurationError):
            config.validate(allowed_formats={'xlsx'})

    def test_unknown_export_type(self):
        with self.assertRaises(ConfigurationError):
            ExportConfiguration.from_dict({'type': 'everything'}).validate()

    def test_non_object_payloads(self):
        with self.assertRaises(ConfigurationError):
            ExportConfiguration.from_dict(['xlsx'])
        with self.assertRaises(ConfigurationError):
            ExportConfiguration.from_dict({'filters': 'byDepartment'})

    def test_filter_payload_split(self):
        filters = FilterSelection.from_dict({
            'byDepartment': True,
            'byBatch': False,
            'selectedDepartments': ['CSE'],
        })
        self.assertEqual(filters.flags, {'byDepartment': True, 'byBatch': False})
        self.assertEqual(filters.selected_departments, ['CSE'])
        self.assertIsNone(filters.selected_batches)
        self.assertEqual(filters.active_keys(), ['byDepartment'])
        self.assertEqual(filters.to_dict()['selectedDepartments'], ['CSE'])

    def test_filter_allow_list_must_be_a_list(self):
        filters = FilterSelection.from_dict({'selectedDepartments': 'CSE'})
        with self.assertRaises(ConfigurationError):
            filters.validate()

    def test_settings_accept_snake_case(self):
        settings = ExportSettings.from_dict({'include_charts': False, 'customFilename': '  Midterm '})
        self.assertFalse(settings.include_charts)
        self.assertEqual(settings.custom_filename, 'Midterm')
        self.assertEqual(settings.to_dict()['includeCharts'], False)

    def test_custom_filename_with_path_separator(self):
        config = ExportConfiguration.from_dict({'settings': {'customFilename': '../etc/passwd'}})
        with self.assertRaises(ConfigurationError):
            config.validate()

    def test_to_dict_round_trip_keeps_type(self):
        data = ExportConfiguration.from_dict({'type': 'advanced'}).to_dict()
        self.assertEqual(data['type'], 'advanced')
        self.assertTrue(data['columns']['studentName'])


class TestColumns(unittest.TestCase):

    def test_default_selection(self):
        selection = default_column_selection()
        self.assertTrue(selection['studentName'])
        self.assertTrue(selection['percentageScore'])
        self.assertFalse(selection['phoneNumber'])

    def test_performance_columns(self):
        self.assertIn('essayMarks', PERFORMANCE_COLUMN_KEYS)
        self.assertIn('score', PERFORMANCE_COLUMN_KEYS)
        self.assertNotIn('studentName', PERFORMANCE_COLUMN_KEYS)


class TestFormatters(unittest.TestCase):

    def test_numbers(self):
        self.assertEqual(format_number(32.0), 32)
        self.assertEqual(format_number(32.456), 32.46)
        self.assertEqual(format_number('abc'), 'abc')

    def test_percentages(self):
        self.assertEqual(format_percentage(95), '95%')
        self.assertEqual(format_percentage(66.666), '66.67%')
        self.assertEqual(format_percentage(None), '0%')
        self.assertEqual(format_percentage(0), '0%')
        self.assertEqual(format_rate(200 / 3), '66.7%')

    def test_timestamps(self):
        self.assertEqual(format_timestamp('2024-03-01T10:15:30Z'), '3/1/2024, 10:15:30 AM')
        self.assertEqual(format_timestamp('2024-03-01T22:05:09'), '3/1/2024, 10:05:09 PM')
        self.assertEqual(format_timestamp('2024-03-01T00:00:00'), '3/1/2024, 12:00:00 AM')
        self.assertEqual(format_timestamp(None), 'N/A')
        self.assertEqual(format_date('2024-03-01T09:00:00Z'), '3/1/2024')

    def test_misc_values(self):
        self.assertEqual(format_duration(45), '45 min')
        self.assertEqual(format_duration(None), 'N/A')
        self.assertEqual(format_yes_no(None), 'No')
        self.assertEqual(format_yes_no(True), 'Yes')
        self.assertEqual(format_admission_type('LATERAL'), 'Lateral')
        self.assertEqual(format_admission_type(None), 'Regular')
        self.assertEqual(truncate('a' * 60), 'a' * 50 + '...')

    def test_missing_values(self):
        self.assertTrue(is_missing(None))
        self.assertTrue(is_missing('  '))
        self.assertFalse(is_missing(0))
        self.assertFalse(is_missing(False))

    def test_rounding_and_filenames(self):
        self.assertEqual(round_half_up(42.5), 43)
        self.assertEqual(round_half_up(41.5), 42)
        self.assertEqual(round_half_up(40.4), 40)
        self.assertEqual(sanitize_filename_part('Data Structures: Midterm!'), 'DataStructuresMidterm')
        self.assertEqual(sanitize_filename_part(None), '')


class TestValidatorsAndConfig(unittest.TestCase):

    def test_template_name(self):
        self.assertFalse(validate_template_name('')[0])
        self.assertFalse(validate_template_name('x' * 101)[0])
        self.assertTrue(validate_template_name('Weekly CSE')[0])

    def test_custom_filename(self):
        self.assertTrue(validate_custom_filename('')[0])
        self.assertFalse(validate_custom_filename('a|b')[0])
        self.assertFalse(validate_custom_filename('x' * 101)[0])

    def test_exception_hierarchy(self):
        self.assertTrue(issubclass(ConfigurationError, ExportError))
        self.assertTrue(SerializationError.retryable)

    def test_testing_config(self):
        self.assertTrue(TestingConfig.TESTING)
        self.assertEqual(TestingConfig.SQLALCHEMY_DATABASE_URI, 'sqlite:///:memory:')
        self.assertFalse(TestingConfig.WTF_CSRF_ENABLED)
        self.assertIn('pdf', Config.ALLOWED_EXPORT_FORMATS)


if __name__ == '__main__':
    unittest.main()
