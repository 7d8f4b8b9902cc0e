# tests/unit/test_csv_export.py
import csv
import io

from gymdesk.utils import csv_export


def test_rows_to_csv_quotes_only_when_needed():
    text = csv_export.rows_to_csv(['ID', 'Name'], [(1, 'Plain'), (2, 'Rao, Asha')])
    assert text == 'ID,Name\n1,Plain\n2,"Rao, Asha"\n'


def test_none_becomes_empty_field():
    text = csv_export.rows_to_csv(['ID', 'DOB'], [(1, None)])
    assert text.splitlines()[1] == '1,'


def test_round_trip_preserves_awkward_values():
    rows = [
        (1, 'Comma, Inc', 'Said "hi"'),
        (2, 'Line\nbreak', ''),
        (3, 'plain', 'trailing space '),
    ]
    text = csv_export.rows_to_csv(['ID', 'A', 'B'], rows)
    parsed = list(csv.reader(io.StringIO(text)))
    assert parsed[0] == ['ID', 'A', 'B']
    assert parsed[1:] == [[str(r[0]), r[1], r[2]] for r in rows]


def test_export_filename():
    assert csv_export.export_filename('members', '2024-05-01') == 'members_2024-05-01.csv'


def test_export_headers():
    assert csv_export.EXPORTS['members'][0] == [
        'ID', 'Name', 'Phone', 'Plan', 'Amount', 'Start Date', 'Expiry Date', 'DOB', 'Status'
    ]
    assert csv_export.EXPORTS['finances'][0] == ['ID', 'Type', 'Amount', 'Date', 'Category', 'Description']
    assert csv_export.EXPORTS['attendance'][0] == ['ID', 'Member Name', 'Date', 'Status']
