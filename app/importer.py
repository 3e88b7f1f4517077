"""
Bulk CSV import for catalog content

The first line is the header. Every following non-blank line becomes one
record; `tags` and `gallery` cells hold several values separated by "|".
A bad row is reported and skipped, the rest of the batch still goes in.
"""
import logging
import re
from dataclasses import dataclass, field

from content_types import CONTENT_TYPES
from db import transaction
from exceptions import ValidationException
from metrics import import_rows_total
from slugs import unique_slug

logger = logging.getLogger('main')

_LINE_BREAK = re.compile(r'\r?\n')


@dataclass
class ImportReport:
    success_count: int = 0
    fail_count: int = 0
    errors: list = field(default_factory=list)

    def record_failure(self, line_number, message):
        self.fail_count += 1
        self.errors.append(f'Row {line_number}: {message}')

    def to_dict(self):
        return {
            'successCount': self.success_count,
            'failCount': self.fail_count,
            'errors': self.errors,
        }


def parse_csv_line(line):
    """Split one CSV line into trimmed fields.

    Commas inside double quotes do not split, and a doubled quote inside a
    quoted field stands for one literal quote.
    """
    fields = []
    current = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            fields.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append(''.join(current).strip())
    return fields


def parse_csv(csv_text):
    """Return the header list and (line_number, row) pairs.

    Line numbers count the header as line 1 and skip blank lines.
    """
    lines = [line for line in _LINE_BREAK.split(csv_text or '') if line.strip()]
    if not lines:
        return [], []
    headers = [header.strip() for header in parse_csv_line(lines[0])]
    rows = []
    for index, line in enumerate(lines[1:]):
        values = parse_csv_line(line)
        row = {header: (values[position] if position < len(values) else None)
               for position, header in enumerate(headers)}
        rows.append((index + 2, row))
    return headers, rows


def _insert_row(session, content_type, row):
    payload = content_type.payload.from_csv(row)
    record = content_type.model(**payload.columns())
    record.slug = unique_slug(session, content_type.model, content_type.title_of(payload))
    session.add(record)
    session.flush()
    return record


def import_csv(session, type_key, csv_text):
    """Insert every valid row of `csv_text` as `type_key` records.

    Rows run in their own savepoint inside one transaction, so a failing row
    only undoes its own statements.
    """
    if not isinstance(type_key, str) or type_key not in CONTENT_TYPES:
        raise ValidationException(f'Unknown content type: {type_key}')
    if not isinstance(csv_text, str) or not csv_text.strip():
        raise ValidationException('csvData is required')

    content_type = CONTENT_TYPES[type_key]
    headers, rows = parse_csv(csv_text)
    report = ImportReport()

    with transaction(session):
        for line_number, row in rows:
            try:
                with session.begin_nested():
                    _insert_row(session, content_type, row)
            except ValidationException as e:
                report.record_failure(line_number, e.message)
                import_rows_total.labels(content_type=type_key, outcome='failed').inc()
            except Exception as e:
                logger.warning(f'CSV import row {line_number} failed: {e}', exc_info=True)
                report.record_failure(line_number, str(getattr(e, 'orig', None) or e))
                import_rows_total.labels(content_type=type_key, outcome='failed').inc()
            else:
                report.success_count += 1
                import_rows_total.labels(content_type=type_key, outcome='imported').inc()

    logger.info(
        f'CSV import ({type_key}): {report.success_count} imported, {report.fail_count} failed '
        f'from {len(rows)} rows ({len(headers)} columns)'
    )
    return report
