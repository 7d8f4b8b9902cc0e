import calendar
from datetime import date, datetime

PLAN_MONTHS = {
    'Monthly': 1,
    'Quarterly': 3,
    'Yearly': 12,
}


def today():
    return date.today()


def today_iso():
    return date.today().isoformat()


def parse_date(value):
    """Convert 'YYYY-MM-DD' (or a full ISO timestamp) to a date; None if unparseable."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value)).date()
    except ValueError:
        try:
            return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
        except ValueError:
            return None


def calculate_expiry_date(membership_date, months=1):
    """Calculate membership expiry date.

    The day is clamped to the end of the target month (Jan 31 + 1 month is
    Feb 28/29).
    """
    month_index = membership_date.month - 1 + months
    year = membership_date.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(membership_date.day, last_day))


def expiry_for_plan(start_date, plan_type):
    """Expiry for a known plan type, or None for custom plans."""
    months = PLAN_MONTHS.get(plan_type)
    if months is None or start_date is None:
        return None
    return calculate_expiry_date(start_date, months)


def days_since_joining(start_date, on_date=None):
    """Days counted from the joining date, rounded up, never below 1.

    The joining day itself counts as a day, so a member who joined today has
    been with the gym for 1 day.
    """
    start = parse_date(start_date)
    if start is None:
        return 1
    on_date = on_date or today()
    elapsed = (on_date - start).days
    total = elapsed + 1 if elapsed >= 0 else -elapsed
    return max(1, total)


def is_birthday(dob, on_date=None):
    dob = parse_date(dob)
    if dob is None:
        return False
    on_date = on_date or today()
    return (dob.month, dob.day) == (on_date.month, on_date.day)


def calculate_bmi(weight_kg, height_cm):
    """Calculate BMI from weight and height"""
    if not weight_kg or not height_cm or height_cm <= 0 or weight_kg <= 0:
        return None

    height_m = height_cm / 100
    bmi = weight_kg / (height_m ** 2)
    return round(bmi, 1)


def get_bmi_category(bmi):
    """Get BMI category based on BMI value.

    Categories (WHO-style):
      - < 18.5 : 'Underweight'
      - 18.5 - <25 : 'Normal'
      - 25 - <30 : 'Overweight'
      - >=30 : 'Obese'
    """
    if bmi is None:
        return "Unknown"

    try:
        bmi_val = float(bmi)
    except (TypeError, ValueError):
        return "Unknown"

    if bmi_val < 18.5:
        return "Underweight"
    elif bmi_val < 25:
        return "Normal"
    elif bmi_val < 30:
        return "Overweight"
    else:
        return "Obese"


def member_link_tag(member_id):
    """Tag appended to finance descriptions that belong to a member."""
    return f"member:{member_id}"
