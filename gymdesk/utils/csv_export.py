import csv
import io

from gymdesk.models.database import current_db_path, execute_query
from gymdesk.models.member import EFFECTIVE_STATUS
from gymdesk.utils.helpers import today_iso

# Every ? placeholder in an export query binds today's date.
EXPORTS = {
    'members': (
        ['ID', 'Name', 'Phone', 'Plan', 'Amount', 'Start Date', 'Expiry Date', 'DOB', 'Status'],
        f'''SELECT m.id, m.name, m.phone, m.plan_type, m.amount, m.start_date,
                  m.expiry_date, m.dob, {EFFECTIVE_STATUS} AS status
           FROM members m ORDER BY m.id''',
    ),
    'finances': (
        ['ID', 'Type', 'Amount', 'Date', 'Category', 'Description'],
        '''SELECT id, type, amount, date, category, description
           FROM finances ORDER BY date DESC, id DESC''',
    ),
    'attendance': (
        ['ID', 'Member Name', 'Date', 'Status'],
        '''SELECT a.id, m.name, a.date, a.status
           FROM attendance a JOIN members m ON m.id = a.member_id
           ORDER BY a.date DESC, a.id DESC''',
    ),
}


def rows_to_csv(headers, rows):
    """Render a header row plus data rows; None becomes an empty field."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator='\n')
    writer.writerow(headers)
    for row in rows:
        writer.writerow(['' if value is None else value for value in row])
    csv_data = output.getvalue()
    output.close()
    return csv_data


def export_filename(export_type, on_date=None):
    return f"{export_type}_{on_date or today_iso()}.csv"


def build_export(export_type, on_date=None):
    """(filename, csv text) for one export type; KeyError for unknown types."""
    on_date = on_date or today_iso()
    headers, query = EXPORTS[export_type]
    params = (on_date,) * query.count('?')
    rows = execute_query(query, params, current_db_path(), fetch=True)
    return export_filename(export_type, on_date), rows_to_csv(headers, [tuple(r) for r in rows])
