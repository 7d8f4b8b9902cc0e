"""Request body schemas for the JSON API."""
from __future__ import annotations

import datetime as dt
import json
from typing import Any, List, Literal, Optional, Union

from flask import request
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gymdesk.utils.errors import BadRequest

MEAL_TYPES = ('Breakfast', 'Morning Snack', 'Lunch', 'Evening Snack', 'Dinner')
WEEK_DAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')

MealType = Literal['Breakfast', 'Morning Snack', 'Lunch', 'Evening Snack', 'Dinner']
WeekDay = Literal['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
MachineStatus = Literal['Operational', 'Under Maintenance', 'Broken']
MemberStatus = Literal['active', 'expired', 'inactive']


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class RequestSchema(BaseModel):
    model_config = ConfigDict(extra='forbid', populate_by_name=True, str_strip_whitespace=True)


# ---------------------------
# Auth
# ---------------------------
class LoginRequest(RequestSchema):
    pin: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None

    @field_validator('pin', 'phone', 'password', mode='before')
    @classmethod
    def _v_text(cls, v):
        if isinstance(v, int):
            v = str(v)
        return _blank_to_none(v)


# ---------------------------
# Members / trainers / machines
# ---------------------------
class MemberCreate(RequestSchema):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    plan_type: str = Field(alias='planType', min_length=1)
    amount: float = Field(ge=0)
    start_date: dt.date = Field(alias='startDate')
    expiry: Optional[dt.date] = None
    photo: Optional[str] = None
    height: Optional[float] = Field(default=None, gt=0)
    dob: Optional[dt.date] = None
    trainer_id: Optional[int] = Field(default=None, alias='trainerId')

    @field_validator('photo', 'height', 'dob', 'trainer_id', 'expiry', mode='before')
    @classmethod
    def _v_optional(cls, v):
        return _blank_to_none(v)


class MemberUpdate(RequestSchema):
    id: Optional[int] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    plan_type: Optional[str] = Field(default=None, alias='planType')
    amount: Optional[float] = Field(default=None, ge=0)
    start_date: Optional[dt.date] = Field(default=None, alias='startDate')
    expiry: Optional[dt.date] = None
    photo: Optional[str] = None
    height: Optional[float] = Field(default=None, gt=0)
    dob: Optional[dt.date] = None
    trainer_id: Optional[int] = Field(default=None, alias='trainerId')
    status: Optional[MemberStatus] = None

    @field_validator(
        'name', 'phone', 'plan_type', 'photo', 'height', 'dob', 'trainer_id',
        'expiry', 'start_date', 'status', mode='before'
    )
    @classmethod
    def _v_optional(cls, v):
        return _blank_to_none(v)


class TrainerCreate(RequestSchema):
    name: str = Field(min_length=1)
    specialty: Optional[str] = None
    phone: Optional[str] = None


class TrainerUpdate(RequestSchema):
    id: Optional[int] = None
    name: Optional[str] = None
    specialty: Optional[str] = None
    phone: Optional[str] = None

    @field_validator('name', mode='before')
    @classmethod
    def _v_name(cls, v):
        return _blank_to_none(v)


class MachineCreate(RequestSchema):
    name: str = Field(min_length=1)
    status: MachineStatus = 'Operational'
    last_maintenance: Optional[dt.date] = Field(default=None, alias='lastMaintenance')
    next_maintenance: Optional[dt.date] = Field(default=None, alias='nextMaintenance')

    @field_validator('last_maintenance', 'next_maintenance', mode='before')
    @classmethod
    def _v_dates(cls, v):
        return _blank_to_none(v)


class MachineUpdate(RequestSchema):
    id: Optional[int] = None
    name: Optional[str] = None
    status: Optional[MachineStatus] = None
    last_maintenance: Optional[dt.date] = Field(default=None, alias='lastMaintenance')
    next_maintenance: Optional[dt.date] = Field(default=None, alias='nextMaintenance')

    @field_validator('name', 'status', 'last_maintenance', 'next_maintenance', mode='before')
    @classmethod
    def _v_optional(cls, v):
        return _blank_to_none(v)


# ---------------------------
# Time series
# ---------------------------
class AttendanceMark(RequestSchema):
    member_id: int = Field(alias='memberId')
    status: Literal['present', 'absent']
    date: Optional[dt.date] = None


class MeasurementCreate(RequestSchema):
    member_id: int = Field(alias='memberId')
    date: Optional[dt.date] = None
    weight: Optional[float] = None
    body_fat: Optional[float] = Field(default=None, alias='bodyFat')
    chest: Optional[float] = None
    biceps_l: Optional[float] = Field(default=None, alias='bicepsL')
    biceps_r: Optional[float] = Field(default=None, alias='bicepsR')
    waist: Optional[float] = None
    thigh: Optional[float] = None
    calves: Optional[float] = None

    # '' means "not measured"; 0 is a real reading and is kept.
    @field_validator(
        'date', 'weight', 'body_fat', 'chest', 'biceps_l', 'biceps_r', 'waist', 'thigh', 'calves',
        mode='before'
    )
    @classmethod
    def _v_optional(cls, v):
        return _blank_to_none(v)


class FinanceCreate(RequestSchema):
    type: Literal['Income', 'Expense']
    amount: float = Field(gt=0)
    date: Optional[dt.date] = None
    category: Optional[str] = None
    description: Optional[str] = None
    member_id: Optional[int] = Field(default=None, alias='memberId')

    @field_validator('date', 'category', 'description', 'member_id', mode='before')
    @classmethod
    def _v_optional(cls, v):
        return _blank_to_none(v)


# ---------------------------
# Plans and chat
# ---------------------------
class DietPlanUpsert(RequestSchema):
    member_id: int = Field(alias='memberId')
    meal_type: MealType = Field(alias='mealType')
    items: Optional[str] = None

    def items_text(self):
        return self.items or None


class WorkoutPlanUpsert(RequestSchema):
    member_id: int = Field(alias='memberId')
    day: WeekDay
    exercises: Optional[Union[List[Any], str]] = None

    def exercises_text(self):
        """Stored form of the exercises, or None when the day is being cleared."""
        if self.exercises is None:
            return None
        if isinstance(self.exercises, str):
            return self.exercises or None
        if not self.exercises:
            return None
        return json.dumps(self.exercises)


class ChatReply(RequestSchema):
    member_id: int = Field(alias='memberId')
    message: str = Field(min_length=1)


class PortalChatMessage(RequestSchema):
    message: str = Field(min_length=1)


# ---------------------------
# Parsing helpers
# ---------------------------
def describe_validation_error(error):
    """First problem in a ValidationError as a short client-facing sentence."""
    first = error.errors()[0]
    field = '.'.join(str(part) for part in first.get('loc', ())) or 'body'
    kind = first.get('type')
    if kind == 'missing':
        return f'Missing required field: {field}'
    if kind == 'extra_forbidden':
        return f'Unknown field: {field}'
    return f"Invalid value for {field}: {first.get('msg')}"


def parse_body(schema):
    """Validate the JSON request body against ``schema`` or raise BadRequest."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest('Request body must be a JSON object')
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise BadRequest(describe_validation_error(e))


def int_arg(name, required=True, message=None):
    """Positive integer query-string parameter, or None when optional and absent."""
    raw = request.args.get(name)
    if raw is None or raw.strip() == '':
        if required:
            raise BadRequest(message or f'{name} required')
        return None
    try:
        value = int(raw)
    except ValueError:
        raise BadRequest(f'Invalid value for {name}: must be an integer')
    if value <= 0:
        raise BadRequest(f'Invalid value for {name}: must be positive')
    return value
