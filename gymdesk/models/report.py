from gymdesk.models.attendance import Attendance
from gymdesk.models.measurement import Measurement
from gymdesk.models.member import Member
from gymdesk.utils.helpers import calculate_bmi, days_since_joining, get_bmi_category, today


def build_member_report(member_id, on_date=None):
    """Progress report for one member, or None if the member does not exist."""
    on_date = on_date or today()
    member = Member.get_by_id(member_id, on_date.isoformat())
    if member is None:
        return None

    attendance = Attendance.count_present(member_id)
    first_weight, latest_weight = Measurement.first_and_latest_weight(member_id)
    initial_weight = first_weight if first_weight is not None else (latest_weight or 0)
    current_weight = latest_weight or 0
    total_days = days_since_joining(member.start_date, on_date)

    bmi = calculate_bmi(current_weight, member.height)

    return {
        'member': {
            'id': member.id,
            'name': member.name,
            'phone': member.phone,
            'dob': member.dob,
            'height': member.height,
            'planType': member.plan_type,
            'startDate': member.start_date,
            'expiry': member.expiry_date,
            'status': member.status,
        },
        'stats': {
            'attendance': attendance,
            'totalDays': total_days,
            'initialWeight': initial_weight,
            'currentWeight': current_weight,
            'weightChange': round(current_weight - initial_weight, 1),
            'bmi': bmi,
            'bmiCategory': get_bmi_category(bmi),
            'attendanceRate': round(attendance / total_days * 100),
        },
    }
