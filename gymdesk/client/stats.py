from datetime import date

from gymdesk.utils.helpers import is_birthday, parse_date


def _days_left(member, on_date):
    expiry = parse_date(member.get('expiry'))
    if expiry is None:
        return None
    return (expiry - on_date).days


def _sum(transactions, kind, on_date=None):
    return sum(
        float(t.get('amount') or 0)
        for t in transactions
        if t.get('type') == kind and (on_date is None or t.get('date') == on_date)
    )


def compute_stats(state, today=None):
    """Headline numbers for the owner dashboard, derived from client state only."""
    today = today or date.today()
    members = state.members
    days_left = [d for d in (_days_left(m, today) for m in members) if d is not None]

    stats = {
        'liveMembers': sum(1 for m in members if m.get('status') == 'active'),
        'totalUsers': len(members),
        'birthdaysToday': sum(1 for m in members if is_birthday(m.get('dob'), today)),
        'expired': sum(1 for d in days_left if d < 0),
        'expiringSoon': sum(1 for d in days_left if 0 <= d <= 3),
        'in4to7Days': sum(1 for d in days_left if 4 <= d <= 7),
        'in8to15Days': sum(1 for d in days_left if 8 <= d <= 15),
        'todaysCash': _sum(state.transactions, 'Income', today.isoformat()),
        'totalIncome': _sum(state.transactions, 'Income'),
        'expenses': _sum(state.transactions, 'Expense'),
    }
    stats['balance'] = stats['totalIncome'] - stats['expenses']
    return stats
