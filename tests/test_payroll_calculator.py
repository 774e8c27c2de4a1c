"""Unit tests for the monthly salary calculation."""

from decimal import Decimal

import pytest

from farm_engine.calculators.attendance import summarize_attendance
from farm_engine.calculators.payroll import calculate_payroll, finalize_salary
from farm_engine.errors import ValidationError


def attendance(present: int, half: int = 0, working_days: int = 26):
    return summarize_attendance(["present"] * present + ["half_day"] * half, working_days)


class TestCalculatePayroll:
    """Test salary derivation from attendance."""

    @pytest.mark.parametrize("base", ["26000", "10000", "12345.67"])
    def test_full_attendance_pays_base(self, base):
        """Full attendance yields exactly the base salary, even when not divisible."""
        figures = calculate_payroll(Decimal(base), attendance(26))
        assert figures.salary_deductions == Decimal("0.00")
        assert figures.final_salary == Decimal(base)

    def test_absent_days_deducted_pro_rata(self):
        """k absent days pays base * (n - k) / n."""
        figures = calculate_payroll(Decimal("26000"), attendance(24))

        assert figures.days_absent == Decimal("2")
        assert figures.daily_salary == Decimal("1000")
        assert figures.salary_deductions == Decimal("2000.00")
        assert figures.final_salary == Decimal("24000.00")

    def test_half_days_deducted(self):
        """Half days add half a day's pay to the deduction."""
        figures = calculate_payroll(Decimal("26000"), attendance(24, half=2))

        assert figures.days_worked == Decimal("25")
        assert figures.days_absent == Decimal("1")
        assert figures.salary_deductions == Decimal("2000.00")
        assert figures.final_salary == Decimal("24000.00")

    def test_bonus_added(self):
        figures = calculate_payroll(Decimal("26000"), attendance(26), bonus_amount="750")
        assert figures.bonus_amount == Decimal("750")
        assert figures.final_salary == Decimal("26750.00")

    def test_deductions_rounded_to_cents(self):
        figures = calculate_payroll(Decimal("10000"), attendance(25))
        assert figures.salary_deductions == Decimal("384.62")
        assert figures.final_salary == Decimal("9615.38")

    def test_zero_working_days(self):
        figures = calculate_payroll(Decimal("5000"), attendance(0, working_days=0), "100")
        assert figures.daily_salary == Decimal("0")
        assert figures.final_salary == Decimal("5100.00")

    def test_negative_base_rejected(self):
        with pytest.raises(ValidationError):
            calculate_payroll(Decimal("-1"), attendance(26))

    def test_negative_bonus_rejected(self):
        with pytest.raises(ValidationError):
            calculate_payroll(Decimal("1000"), attendance(26), Decimal("-5"))


class TestFinalizeSalary:
    def test_recomputes_from_parts(self):
        assert finalize_salary(Decimal("26000"), Decimal("1000.006"), Decimal("0")) == Decimal(
            "24999.99"
        )

    def test_accepts_plain_numbers(self):
        assert finalize_salary(1000, 0, 250) == Decimal("1250.00")
