"""
Write a sample assessment report in every supported format
Usage: python scripts/generate_sample_export.py [output_dir]
"""

import os
import sys
from io import BytesIO

CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import openpyxl  # noqa: E402

from services.export_service import ExportService  # noqa: E402


def build_sample_data():
    assessment = {
        'id': 'DSA-MID-01',
        'title': 'Design and Analysis of Algorithms Midterm',
        'college_name': 'Greenfield College',
        'created_at': '2024-03-01T09:00:00Z',
        'question_types': ['multiple_choice', 'coding', 'essay'],
    }
    submissions = [
        {'student_id_number': 'BCA23001', 'student_name': 'Alice', 'student_email': 'alice@example.edu',
         'department_name': 'BCA', 'batch': '2023', 'status': 'graded', 'score': 86,
         'percentage_score': 86, 'attempt_number': 1, 'submitted_at': '2024-03-01T10:15:30Z'},
        {'student_id_number': 'BCA23002', 'student_name': 'Bob', 'student_email': 'bob@example.edu',
         'department_name': 'BCA', 'batch': '2023', 'status': 'submitted', 'score': 45,
         'percentage_score': 45, 'attempt_number': 2, 'late_submission': True},
        {'student_id_number': 'BSC23003', 'student_name': 'Chitra', 'student_email': 'chitra@example.edu',
         'department_name': 'BSc', 'batch': '2023', 'status': 'not_attempted'},
    ]
    return submissions, assessment


def headers_from_excel_bytes(xlsx_bytes):
    wb = openpyxl.load_workbook(filename=BytesIO(xlsx_bytes))
    return {ws.title: [cell.value for cell in ws[1]] for ws in wb.worksheets}


def main():
    output_dir = sys.argv[1] if len(sys.argv) > 1 else os.getcwd()
    submissions, assessment = build_sample_data()

    for export_type in ('regular', 'advanced'):
        config = {'type': export_type, 'filters': {'allStudents': True}}
        workbook = ExportService.export_assessment_data(submissions, assessment, config)
        for file_format in ('xlsx', 'csv', 'pdf'):
            content, _, extension = ExportService.serialize(workbook, file_format)
            path = os.path.join(output_dir, f"{workbook.filename}_{export_type}.{extension}")
            with open(path, 'wb') as handle:
                handle.write(content)
            print(f"Wrote {path} ({len(content)} bytes)")
            if file_format == 'xlsx':
                for sheet, headers in headers_from_excel_bytes(content).items():
                    print(f"  {sheet}: {headers}")


if __name__ == '__main__':
    main()
