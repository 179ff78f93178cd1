"""
Sheet and workbook structures produced by the export engine
Plain in-memory values; serializers turn them into files
"""

HEADER_PRIMARY = 'primary'
HEADER_DANGER = 'danger'

# Row styles for free-form sheets
STYLE_SECTION = 'section'
STYLE_SUBHEADER = 'subheader'


class Sheet:
    """One named table: header row, data rows and presentation metadata"""

    def __init__(self, name, header, header_style=HEADER_PRIMARY):
        self.name = name
        self.header = list(header)
        self.header_style = header_style
        self.rows = []
        # row index -> band for whole-row shading
        self.row_styles = {}
        # (row index, column index) -> band for single cells
        self.cell_styles = {}
        # chart specs rendered by the xlsx writer
        self.charts = []

    @property
    def row_count(self):
        return len(self.rows)

    def add_row(self, values, row_style=None):
        self.rows.append(list(values))
        index = len(self.rows) - 1
        if row_style:
            self.row_styles[index] = row_style
        return index

    def style_cell(self, row_index, column_index, band):
        self.cell_styles[(row_index, column_index)] = band

    def add_chart(self, title, first_row, last_row, label_column=0, value_column=1):
        """Register a bar chart over data rows first_row..last_row (0-based)"""
        self.charts.append({
            'type': 'bar',
            'title': title,
            'first_row': first_row,
            'last_row': last_row,
            'label_column': label_column,
            'value_column': value_column,
        })

    def iter_rows(self):
        """Header followed by every data row"""
        yield self.header
        for row in self.rows:
            yield row

    def to_dict(self):
        return {
            'name': self.name,
            'header': list(self.header),
            'header_style': self.header_style,
            'rows': [list(row) for row in self.rows],
            'row_styles': sorted(self.row_styles.items()),
            'cell_styles': sorted((r, c, band) for (r, c), band in self.cell_styles.items()),
            'charts': [dict(chart) for chart in self.charts],
        }

    def __eq__(self, other):
        if not isinstance(other, Sheet):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'<Sheet {self.name}: {self.row_count} rows>'


class Workbook:
    """Ordered sheets plus document metadata"""

    def __init__(self, sheets, filename, creator, created=None, modified=None, record_count=None):
        self.sheets = list(sheets)
        self.record_count = record_count
        self.filename = filename
        self.creator = creator
        self.created = created
        self.modified = modified

    @property
    def sheet_names(self):
        return [sheet.name for sheet in self.sheets]

    def get_sheet(self, name):
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        return None

    def to_dict(self):
        return {
            'filename': self.filename,
            'creator': self.creator,
            'created': self.created.isoformat() if self.created else None,
            'modified': self.modified.isoformat() if self.modified else None,
            'record_count': self.record_count,
            'sheets': [sheet.to_dict() for sheet in self.sheets],
        }

    def __eq__(self, other):
        if not isinstance(other, Workbook):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'<Workbook {self.filename}: {", ".join(self.sheet_names)}>'
