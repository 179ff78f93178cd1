"""
Unit tests for service classes
"""

import copy
import unittest
from io import BytesIO
from unittest import mock

import openpyxl

from app import create_app
from config import TestingConfig
from database import db
from services.csv_export_service import CsvExportService
from services.excel_export_service import ExcelExportService
from services.export_history_service import ExportHistoryService
from services.export_progress_service import ExportProgressService
from services.export_service import ExportService
from services.sheet_builder import SheetBuilder
from tests.fixtures import (
    fixed_clock, make_submission, mixed_submissions, scenario_a_submissions,
)
from utils.exceptions import ConfigurationError, SerializationError

ASSESSMENT = {
    'id': 'A-1',
    'title': 'Data Structures Midterm',
    'college_name': 'Greenfield College',
    'created_at': '2024-03-01T09:00:00Z',
    'question_types': ['multiple_choice', 'essay'],
}


def export(submissions, config=None, assessment=ASSESSMENT):
    return ExportService.export_assessment_data(submissions, assessment, config or {}, clock=fixed_clock)


class TestExportService(unittest.TestCase):

    def test_scenario_a(self):
        workbook = export(scenario_a_submissions())
        self.assertEqual(workbook.sheet_names, [
            'Student Performance Report', 'Absentees Report', 'Analytics Summary',
        ])
        performance = workbook.get_sheet('Student Performance Report')
        self.assertEqual([row[1] for row in performance.rows], ['Asha', 'Bala'])
        absentees = workbook.get_sheet('Absentees Report')
        self.assertEqual(len(absentees.rows), 1)
        self.assertEqual(absentees.rows[0][5:], ['Absent'] * 4)
        analytics = workbook.get_sheet('Analytics Summary')
        self.assertEqual(analytics.rows[2:6], [
            ['Total Students', 3], ['Present Students', 2], ['Absent Students', 1],
            ['Attendance Rate', '66.7%'],
        ])

    def test_scenario_b_even_split(self):
        workbook = export([make_submission('R001', 'Asha', score=80)])
        performance = workbook.get_sheet('Student Performance Report')
        self.assertEqual(performance.header[5:7], ['MCQ Marks', 'Essay Marks'])
        self.assertEqual(performance.rows[0][5:7], [40, 40])

    def test_scenario_c_flag_without_allow_list(self):
        workbook = export(mixed_submissions(), {'filters': {'byDepartment': True}})
        self.assertEqual(workbook.get_sheet('Analytics Summary').rows[2], ['Total Students', 6])

    def test_rows_add_up_to_total(self):
        workbook = export(mixed_submissions())
        performance_rows = len(workbook.get_sheet('Student Performance Report').rows)
        absentee_rows = len(workbook.get_sheet('Absentees Report').rows)
        total = workbook.get_sheet('Analytics Summary').rows[2][1]
        self.assertEqual(performance_rows + absentee_rows, total)

    def test_idempotent_and_input_untouched(self):
        submissions = mixed_submissions()
        snapshot = copy.deepcopy(submissions)
        first = export(submissions)
        second = export(submissions)
        self.assertEqual(first, second)
        self.assertEqual(submissions, snapshot)

    def test_analytics_follow_filtered_set(self):
        workbook = export(mixed_submissions(), {'filters': {'presentStudents': True}})
        self.assertEqual(workbook.get_sheet('Absentees Report').rows, [])
        self.assertEqual(workbook.get_sheet('Analytics Summary').rows[2], ['Total Students', 5])

    def test_workbook_carries_filtered_count(self):
        workbook = export(mixed_submissions(), {'filters': {'presentStudents': True}})
        self.assertEqual(workbook.record_count, 5)
        self.assertEqual(export(mixed_submissions()).record_count, 6)

    def test_ninety_lands_in_same_bucket_for_filter_and_summary(self):
        submissions = [make_submission('R001', 'Asha', score=90)]
        workbook = export(submissions, {
            'filters': {'byPerformanceRange': True, 'selectedRanges': ['80-90%']},
        })
        analytics = workbook.get_sheet('Analytics Summary')
        self.assertEqual(analytics.rows[2], ['Total Students', 1])
        self.assertIn(['80-90%', 1], analytics.rows)
        self.assertIn(['>90%', 0], analytics.rows)

    def test_advanced_sheet_order(self):
        workbook = export(scenario_a_submissions(), {
            'type': 'advanced', 'filters': {'allStudents': True},
        })
        self.assertEqual(workbook.sheet_names, [
            'Custom Student Data', 'Custom Absentees Data', 'Analytics Summary',
        ])
        self.assertEqual(len(workbook.get_sheet('Custom Student Data').rows), 3)
        self.assertEqual(len(workbook.get_sheet('Custom Absentees Data').rows), 1)

    def test_advanced_without_summary(self):
        workbook = export(scenario_a_submissions(), {
            'type': 'advanced', 'settings': {'includeSummary': False},
        })
        self.assertEqual(workbook.sheet_names, ['Custom Student Data'])

    def test_invalid_configuration_fails_before_building(self):
        config = {'type': 'advanced', 'columns': {'studentName': False}}
        with mock.patch.object(SheetBuilder, 'build_custom_sheet') as build:
            with self.assertRaises(ConfigurationError):
                export(scenario_a_submissions(), config)
            build.assert_not_called()

    def test_filename_uses_clock(self):
        workbook = export([], {'settings': {'customFilename': 'Midterm'}})
        self.assertEqual(workbook.filename, 'Midterm_20240301T101530')

    def test_preview(self):
        preview = ExportService.preview(scenario_a_submissions(), ASSESSMENT, {}, rows=1, clock=fixed_clock)
        self.assertEqual(preview['sheet'], 'Student Performance Report')
        self.assertEqual(len(preview['rows']), 1)
        self.assertEqual(preview['total_rows'], 2)
        self.assertEqual(preview['summary']['attendance_rate'], 66.7)
        self.assertEqual(preview['summary']['batch_breakdown'][0]['name'], '2024')
        self.assertTrue(preview['filename'].endswith('.xlsx'))


class TestSerializers(unittest.TestCase):

    def setUp(self):
        self.workbook = export(scenario_a_submissions())

    def test_xlsx(self):
        content, mimetype, extension = ExportService.serialize(self.workbook, 'xlsx')
        self.assertEqual(extension, 'xlsx')
        self.assertIn('spreadsheetml', mimetype)

        wb = openpyxl.load_workbook(BytesIO(content))
        self.assertEqual(wb.sheetnames, self.workbook.sheet_names)
        ws = wb['Student Performance Report']
        self.assertEqual(ws['A1'].value, 'Roll Number')
        self.assertEqual(ws['A1'].fill.start_color.rgb, '004472C4')
        self.assertEqual(ws['I2'].value, 0.95)
        self.assertEqual(ws['I2'].number_format, '0%')
        self.assertGreaterEqual(ws.column_dimensions['A'].width, 15)
        self.assertEqual(wb['Absentees Report']['A1'].fill.start_color.rgb, '00DC3545')
        self.assertEqual(wb.properties.creator, 'LMS Platform')

    def test_xlsx_strips_control_characters(self):
        workbook = export([make_submission('R1', 'Asha\x01Rao', score=80)])
        content, _, _ = ExportService.serialize(workbook, 'xlsx')
        ws = openpyxl.load_workbook(BytesIO(content))['Student Performance Report']
        self.assertEqual(ws['B2'].value, 'AshaRao')

    def test_xlsx_rates_keep_their_decimals(self):
        content, _, _ = ExportService.serialize(self.workbook, 'xlsx')
        ws = openpyxl.load_workbook(BytesIO(content))['Analytics Summary']
        rates = {row[0].value: row[1] for row in ws.iter_rows(min_col=1, max_col=2) if row[0].value}
        self.assertAlmostEqual(rates['Attendance Rate'].value, 0.667)
        self.assertEqual(rates['Attendance Rate'].number_format, '0.0%')

    def test_percent_format_follows_string(self):
        ws = openpyxl.Workbook().active
        self.assertEqual(ExcelExportService.set_value(ws['A1'], '70.0%').number_format, '0.0%')
        self.assertEqual(ExcelExportService.set_value(ws['A2'], '66.67%').number_format, '0.00%')
        self.assertEqual(ExcelExportService.set_value(ws['A3'], '95%').number_format, '0%')
        self.assertEqual(ws['A1'].value, 0.7)

    def test_xlsx_chart(self):
        wb = ExcelExportService.build_workbook(self.workbook)
        self.assertEqual(len(wb['Analytics Summary']._charts), 1)

    def test_csv(self):
        content, mimetype, _ = ExportService.serialize(self.workbook, 'csv')
        text = content.decode('utf-8')
        self.assertEqual(mimetype, 'text/csv')
        self.assertTrue(text.startswith('=== Student Performance Report ===\n'))
        self.assertIn('\n\n=== Absentees Report ===\n', text)
        self.assertIn('Roll Number,Name,Email ID,Department,Batch,MCQ Marks,Essay Marks', text)

    def test_pdf(self):
        content, mimetype, _ = ExportService.serialize(self.workbook, 'pdf')
        self.assertEqual(mimetype, 'application/pdf')
        self.assertTrue(content.startswith(b'%PDF'))

    def test_unknown_format(self):
        with self.assertRaises(ConfigurationError):
            ExportService.serialize(self.workbook, 'docx')

    def test_writer_failure_is_retryable(self):
        with mock.patch.object(ExcelExportService, 'build_workbook', side_effect=ValueError('boom')):
            with self.assertRaises(SerializationError) as ctx:
                ExportService.serialize(self.workbook, 'xlsx')
        self.assertTrue(ctx.exception.retryable)

    def test_csv_sheet_marker(self):
        sheet = self.workbook.sheets[0]
        self.assertEqual(CsvExportService.sheet_marker(sheet), '=== Student Performance Report ===')


class FakeClock:

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestExportProgressService(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.tracker = ExportProgressService(ttl_seconds=300, time_func=self.clock)

    def tearDown(self):
        self.tracker.clear()

    def test_lifecycle(self):
        self.tracker.create('exp-1', total_steps=4)
        self.assertEqual(self.tracker.get('exp-1')['status'], 'processing')

        self.assertTrue(self.tracker.update('exp-1', 2, 'Halfway'))
        progress = self.tracker.get('exp-1')
        self.assertEqual(progress['percentage'], 50)
        self.assertEqual(progress['message'], 'Halfway')

        self.tracker.complete('exp-1')
        self.assertEqual(self.tracker.get('exp-1')['percentage'], 100)

        self.clock.now = 299
        self.assertEqual(self.tracker.get('exp-1')['status'], 'completed')
        self.clock.now = 300
        self.assertEqual(self.tracker.get('exp-1')['status'], 'not_found')

    def test_failure(self):
        self.tracker.create('exp-2')
        self.assertTrue(self.tracker.fail('exp-2', 'Disk full'))
        progress = self.tracker.get('exp-2')
        self.assertEqual(progress['status'], 'failed')
        self.assertEqual(progress['message'], 'Disk full')

    def test_unknown_export(self):
        self.assertFalse(self.tracker.update('missing', 10))
        self.assertFalse(self.tracker.complete('missing'))
        self.assertEqual(self.tracker.get('missing')['status'], 'not_found')

    def test_clear(self):
        self.tracker.create('exp-4')
        self.tracker.clear()
        self.assertEqual(self.tracker.get('exp-4')['status'], 'not_found')

    def test_abandoned_exports_expire(self):
        self.tracker.create('exp-3')
        self.clock.now = 3600
        self.assertEqual(self.tracker.get('exp-3')['status'], 'not_found')


class TestExportHistoryService(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures"""
        self.app = create_app(TestingConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()
        db.create_all()

    def tearDown(self):
        """Clean up after tests"""
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def add(self, name, **extra):
        data = {'filename': name, 'type': 'regular', 'record_count': 10, 'file_size': 1000}
        data.update(extra)
        return ExportHistoryService.add_export(data)

    def test_add_export(self):
        success, _, entry = self.add('report.xlsx', settings={'colorCode': True})
        self.assertTrue(success)
        item = entry.to_dict()
        self.assertEqual(item['filename'], 'report.xlsx')
        self.assertEqual(item['settings'], {'colorCode': True})
        self.assertEqual(len(ExportHistoryService.get_export_history()), 1)

    def test_history_is_trimmed_to_limit(self):
        for index in range(5):
            ExportHistoryService.add_export({'filename': f'r{index}.xlsx'}, limit=3)
        names = [entry.filename for entry in ExportHistoryService.get_export_history()]
        self.assertEqual(names, ['r4.xlsx', 'r3.xlsx', 'r2.xlsx'])

    def test_remove_and_clear(self):
        _, _, entry = self.add('a.xlsx')
        self.add('b.xlsx')
        self.assertEqual(ExportHistoryService.remove_export(9999), (False, 'Export not found'))
        self.assertTrue(ExportHistoryService.remove_export(entry.id)[0])
        self.assertEqual(len(ExportHistoryService.get_export_history()), 1)
        self.assertTrue(ExportHistoryService.clear_history()[0])
        self.assertEqual(ExportHistoryService.get_export_history(), [])

    def test_templates(self):
        success, _, template = ExportHistoryService.save_template({
            'name': 'CSE weekly',
            'columns': {'studentName': True},
            'filters': {'byDepartment': True, 'selectedDepartments': ['CSE']},
            'settings': {'fileFormat': 'csv'},
        })
        self.assertTrue(success)
        loaded = ExportHistoryService.load_template(template.id)
        self.assertEqual(loaded.to_config_dict()['filters']['selectedDepartments'], ['CSE'])
        self.assertEqual(len(ExportHistoryService.get_templates()), 1)
        self.assertTrue(ExportHistoryService.delete_template(template.id)[0])
        self.assertIsNone(ExportHistoryService.load_template(template.id))

    def test_template_requires_name(self):
        success, message, template = ExportHistoryService.save_template({'name': '  '})
        self.assertFalse(success)
        self.assertEqual(message, 'Template name is required')
        self.assertIsNone(template)

    def test_statistics(self):
        self.add('a.xlsx', file_size=1000)
        self.add('b.csv', type='advanced', file_size=2001, record_count=5)
        stats = ExportHistoryService.get_statistics()
        self.assertEqual(stats['total_exports'], 2)
        self.assertEqual(stats['exports_by_type'], {'regular': 1, 'advanced': 1})
        self.assertEqual(stats['total_records_exported'], 15)
        self.assertEqual(stats['average_file_size'], 1501)
        self.assertEqual(sum(stats['exports_by_month'].values()), 2)

    def test_format_file_size(self):
        self.assertEqual(ExportHistoryService.format_file_size(0), '0 Bytes')
        self.assertEqual(ExportHistoryService.format_file_size(500), '500 Bytes')
        self.assertEqual(ExportHistoryService.format_file_size(1536), '1.5 KB')
        self.assertEqual(ExportHistoryService.format_file_size(1048576), '1 MB')


if __name__ == '__main__':
    unittest.main()
