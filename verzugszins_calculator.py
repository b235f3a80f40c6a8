"""
Swiss Default Interest Calculator
Core calculation engine for Verzugszins according to OR Art. 104-106
"""

import math
import re
from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP, localcontext
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd
from dateutil.relativedelta import relativedelta

DateLike = Union[date, datetime]

# Statutory default interest rate per OR Art. 104 Abs. 1
DEFAULT_INTEREST_RATE = 5.0

RESULT_OUT_OF_RANGE = 'Result is out of range'

# Apostrophe-like thousands separators plus whitespace
_SEPARATORS = re.compile(r"['’‘ʼ\s]")
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class InterestMethod(Enum):
    ACTUAL_360 = "360-day year"
    COMPOUND_ANNUAL = "compound (annual)"


@dataclass(frozen=True)
class CalculationResult:
    """Outcome of one interest calculation, or the reason it was rejected"""
    principal: Optional[float] = None
    start_date: Optional[DateLike] = None
    end_date: Optional[DateLike] = None
    days: Optional[int] = None
    interest_rate: Optional[float] = None
    interest: Optional[float] = None
    total: Optional[float] = None
    method: Optional[InterestMethod] = None
    years: Optional[float] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict:
        """JSON-friendly representation"""
        if self.is_error:
            return {'error': self.error}
        data = asdict(self)
        data.pop('error')
        if self.years is None:
            data.pop('years')
        data['method'] = self.method.value
        data['start_date'] = self.start_date.isoformat()
        data['end_date'] = self.end_date.isoformat()
        return data


def round_rappen(value: float) -> float:
    """
    Round to 2 decimal places (Rappen), halves away from zero

    inf and nan are returned unchanged.
    """
    value = float(value)
    if not math.isfinite(value):
        return value
    # Enough digits for any finite float plus two decimals
    with localcontext() as ctx:
        ctx.prec = 400
        return float(Decimal(repr(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def count_days(start_date: DateLike, end_date: DateLike) -> int:
    """Whole days between two dates, floored under a 24h/day assumption"""
    return (end_date - start_date) // timedelta(days=1)


class VerzugszinsCalculator:
    """Core default interest calculations"""

    # actual/360 for simple interest (Swiss banking convention)
    DAY_COUNT_BASIS = 360
    # Compounding counts years of 365 days, not 360. Keep the two apart.
    COMPOUND_YEAR_DAYS = 365

    def __init__(self, default_rate: float = DEFAULT_INTEREST_RATE):
        self.default_rate = default_rate

    def _check(self, principal: float, start_date: DateLike, end_date: DateLike,
               interest_rate: float) -> Optional[str]:
        if not math.isfinite(principal):
            return 'Principal must be a finite number'
        if principal <= 0:
            return 'Principal must be positive'
        if not math.isfinite(interest_rate):
            return 'Interest rate must be a finite number'
        # (1 + r) must stay positive for compounding
        if interest_rate <= -100:
            return 'Interest rate must be greater than -100'
        if start_date >= end_date:
            return 'End date must be after start date'
        return None

    def calculate_default_interest(self,
                                   principal: float,
                                   start_date: DateLike,
                                   end_date: DateLike,
                                   interest_rate: Optional[float] = None) -> CalculationResult:
        """
        Calculate default interest (Verzugszins) using the actual/360 method

        Args:
            principal: The overdue amount (Kapital)
            start_date: Start of default (Verzugsbeginn)
            end_date: End date for calculation
            interest_rate: Annual rate in percent, 5% per OR Art. 104 if omitted
        """
        if interest_rate is None:
            interest_rate = self.default_rate

        error = self._check(principal, start_date, end_date, interest_rate)
        if error:
            return CalculationResult(error=error)

        days = count_days(start_date, end_date)
        daily_rate = interest_rate / 100 / self.DAY_COUNT_BASIS
        interest = round_rappen(principal * daily_rate * days)
        total = round_rappen(principal + interest)
        if not math.isfinite(total):
            return CalculationResult(error=RESULT_OUT_OF_RANGE)

        return CalculationResult(
            principal=principal,
            start_date=start_date,
            end_date=end_date,
            days=days,
            interest_rate=interest_rate,
            interest=interest,
            total=total,
            method=InterestMethod.ACTUAL_360
        )

    def calculate_compound_interest(self,
                                    principal: float,
                                    start_date: DateLike,
                                    end_date: DateLike,
                                    interest_rate: Optional[float] = None) -> CalculationResult:
        """
        Calculate interest with annual compounding (Zinseszins)

        Compound interest is generally not allowed under OR Art. 105 Abs. 3,
        except e.g. for current account agreements.
        """
        if interest_rate is None:
            interest_rate = self.default_rate

        error = self._check(principal, start_date, end_date, interest_rate)
        if error:
            return CalculationResult(error=error)

        days = count_days(start_date, end_date)
        years = days / self.COMPOUND_YEAR_DAYS

        # A = P(1 + r)^t
        try:
            total = principal * (1 + interest_rate / 100) ** years
        except OverflowError:
            return CalculationResult(error=RESULT_OUT_OF_RANGE)
        if not math.isfinite(total):
            return CalculationResult(error=RESULT_OUT_OF_RANGE)
        interest = total - principal

        return CalculationResult(
            principal=principal,
            start_date=start_date,
            end_date=end_date,
            days=days,
            years=round_rappen(years),
            interest_rate=interest_rate,
            interest=round_rappen(interest),
            total=round_rappen(total),
            method=InterestMethod.COMPOUND_ANNUAL
        )

    def generate_accrual_schedule(self,
                                  principal: float,
                                  start_date: DateLike,
                                  end_date: DateLike,
                                  interest_rate: Optional[float] = None) -> pd.DataFrame:
        """
        Break the default period into calendar-month slices

        Each row carries the actual/360 interest of its slice. Slice interest
        is rounded per row, so the cumulative figure can differ by a few
        Rappen from the single-period result.
        """
        if interest_rate is None:
            interest_rate = self.default_rate

        error = self._check(principal, start_date, end_date, interest_rate)
        if error:
            raise ValueError(error)

        daily_rate = interest_rate / 100 / self.DAY_COUNT_BASIS
        schedule = []
        period = 1
        period_start = start_date

        while period_start < end_date:
            # Step from start_date so month-end dates don't drift
            period_end = min(start_date + relativedelta(months=period), end_date)
            days = count_days(period_start, period_end)
            schedule.append({
                'period': period,
                'period_start': period_start,
                'period_end': period_end,
                'days': days,
                'interest': round_rappen(principal * daily_rate * days)
            })
            period += 1
            period_start = period_end

        df = pd.DataFrame(schedule)
        df['cumulative_interest'] = df['interest'].cumsum().round(2)
        df['balance'] = (principal + df['cumulative_interest']).round(2)
        return df

    def validate_inputs(self, inputs: Dict) -> Tuple[bool, List[str]]:
        """Validate request data before running a calculation"""
        errors = []

        required = ['principal', 'start_date', 'end_date']
        for field in required:
            if field not in inputs or inputs[field] is None:
                errors.append(f"Missing required field: {field}")

        principal = inputs.get('principal')
        if principal is not None:
            if not math.isfinite(principal):
                errors.append("Principal must be a finite number")
            elif principal <= 0:
                errors.append("Principal must be positive")

        rate = inputs.get('interest_rate')
        if rate is not None and not (0 <= rate <= 100):
            errors.append("Interest rate must be between 0 and 100")

        start, end = inputs.get('start_date'), inputs.get('end_date')
        if start is not None and end is not None and start >= end:
            errors.append("End date must be after start date")

        return len(errors) == 0, errors


def format_number(value: float, decimals: int = 2) -> str:
    """Format a number with Swiss grouping, e.g. 1’234.56"""
    return f"{value:,.{decimals}f}".replace(',', '’')


def format_chf(value: float) -> str:
    """Format value as Swiss francs, e.g. CHF 1’234.56 or CHF-1’234.56"""
    if value < 0:
        return f"CHF-{format_number(-value, 2)}"
    return f"CHF {format_number(value, 2)}"


def parse_swiss_number(text):
    """
    Parse a Swiss formatted number string

    Apostrophes and spaces used as thousands separators are dropped and a
    decimal comma is accepted. Anything that isn't a string is returned as
    is. Returns None when no number can be read.
    """
    if not isinstance(text, str):
        return text
    cleaned = _SEPARATORS.sub('', text).replace(',', '.', 1)
    match = _NUMBER_PREFIX.match(cleaned)
    if not match:
        return None
    return float(match.group(0))
