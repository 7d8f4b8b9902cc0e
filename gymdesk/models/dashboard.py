"""Dashboard aggregation.

Every metric is an independent scalar query. They run concurrently, each on
its own SQLite connection, and "today" is fixed once so every query agrees
on the date.
"""
import concurrent.futures
from datetime import timedelta

from gymdesk.models.database import current_db_path, execute_query, fetch_scalar
from gymdesk.utils.helpers import parse_date, today

DAY_LABELS = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')
CHART_DAYS = 7


def _metric_queries(on_date):
    today_iso = on_date.isoformat()
    week_ahead = (on_date + timedelta(days=7)).isoformat()
    month_start = on_date.replace(day=1).isoformat()
    return {
        'totalMembers': ('SELECT COUNT(*) FROM members', ()),
        'activeMembers': (
            '''SELECT COUNT(*) FROM members
               WHERE status = 'active' AND (expiry_date IS NULL OR expiry_date >= ?)''',
            (today_iso,),
        ),
        'expiringSoon': (
            '''SELECT COUNT(*) FROM members
               WHERE status = 'active' AND expiry_date BETWEEN ? AND ?''',
            (today_iso, week_ahead),
        ),
        'todayAttendance': (
            "SELECT COUNT(*) FROM attendance WHERE date = ? AND status = 'present'",
            (today_iso,),
        ),
        'monthIncome': (
            "SELECT COALESCE(SUM(amount), 0) FROM finances WHERE type = 'Income' AND date BETWEEN ? AND ?",
            (month_start, today_iso),
        ),
        'monthExpense': (
            "SELECT COALESCE(SUM(amount), 0) FROM finances WHERE type = 'Expense' AND date BETWEEN ? AND ?",
            (month_start, today_iso),
        ),
    }


REVENUE_CHART_QUERY = '''
    WITH RECURSIVE days(day) AS (
        SELECT DATE(?, ?)
        UNION ALL
        SELECT DATE(day, '+1 day') FROM days WHERE day < ?
    )
    SELECT days.day AS date,
           COALESCE(SUM(CASE WHEN f.type = 'Income' THEN f.amount END), 0) AS income,
           COALESCE(SUM(CASE WHEN f.type = 'Expense' THEN f.amount END), 0) AS expense
    FROM days
    LEFT JOIN finances f ON f.date = days.day
    GROUP BY days.day
    ORDER BY days.day
'''


def get_revenue_chart(on_date=None, db_path=None):
    """Income and expense per day for the week ending ``on_date``, zero-filled."""
    on_date = on_date or today()
    db_path = db_path or current_db_path()
    today_iso = on_date.isoformat()
    rows = execute_query(
        REVENUE_CHART_QUERY,
        (today_iso, f'-{CHART_DAYS - 1} days', today_iso),
        db_path,
        fetch=True,
    )
    chart = []
    for row in rows:
        day = parse_date(row['date'])
        chart.append({
            'date': row['date'],
            'name': DAY_LABELS[day.weekday()],
            'income': row['income'],
            'expense': row['expense'],
        })
    return chart


def get_metrics(on_date=None, db_path=None):
    on_date = on_date or today()
    db_path = db_path or current_db_path()
    queries = _metric_queries(on_date)

    with concurrent.futures.ThreadPoolExecutor(max_workers=len(queries)) as executor:
        futures = {
            name: executor.submit(fetch_scalar, query, params, db_path)
            for name, (query, params) in queries.items()
        }
        # result() re-raises the first failure, aborting the whole summary
        metrics = {name: future.result() for name, future in futures.items()}

    metrics['monthBalance'] = metrics['monthIncome'] - metrics['monthExpense']
    return metrics


def get_dashboard(on_date=None):
    on_date = on_date or today()
    db_path = current_db_path()
    with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
        metrics = executor.submit(get_metrics, on_date, db_path)
        chart = executor.submit(get_revenue_chart, on_date, db_path)
        return {
            'metrics': metrics.result(),
            'revenueChart': chart.result(),
        }
