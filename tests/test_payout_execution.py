"""
Unit tests for the payout execution wizard.
"""

import unittest
from unittest.mock import MagicMock

from models.entities import Employee
from utils.error_handling import ValidationError
from workflow.payout_execution import (
    INSUFFICIENT_FUNDS_MESSAGE,
    INVALID_OTP_MESSAGE,
    NO_SELECTION_MESSAGE,
    OTP_SENT_MESSAGE,
    OTP_STEP_REQUIRED_MESSAGE,
    PayoutExecutionWizard,
    TransferStatus,
    WizardStep,
)


def employee(employee_id: str, salary_cents: int) -> Employee:
    return Employee.model_validate({
        "id": employee_id,
        "first_name": "Emp",
        "last_name": employee_id,
        "net_salary_cents": salary_cents,
        "subsidiary": {"id": "1", "name": "Cement"},
    })


class FixedRandom:
    """Returns the given values in turn."""

    def __init__(self, *values: float):
        self.values = list(values)

    def random(self) -> float:
        return self.values.pop(0)


class TestPayoutExecutionWizard(unittest.TestCase):

    def setUp(self):
        self.now = 1000.0
        self.sleep = MagicMock()
        self.wizard = PayoutExecutionWizard(
            wallet_balance_cents=1000000,
            failure_rate=0.1,
            execution_delay_seconds=3,
            rng=FixedRandom(0.5, 0.05),
            clock=lambda: self.now,
            sleep=self.sleep,
        )

    def test_next_requires_a_selection(self):
        with self.assertRaises(ValidationError) as ctx:
            self.wizard.next()

        self.assertEqual(ctx.exception.message, NO_SELECTION_MESSAGE)
        self.assertEqual(self.wizard.step, WizardStep.SELECT)

    def test_dry_run_totals(self):
        self.wizard.select([employee("1", 400000), employee("2", 350000)])

        self.assertEqual(self.wizard.next(), WizardStep.DRY_RUN)
        self.assertEqual(self.wizard.total_payout_cents, 750000)
        self.assertTrue(self.wizard.has_sufficient_funds)
        self.assertEqual(self.wizard.candidates[0].subsidiary_name, "Cement")

    def test_shortfall_blocks_otp(self):
        self.wizard.select([employee("1", 900000), employee("2", 350000)])
        self.wizard.next()

        self.assertEqual(self.wizard.shortfall_cents, 250000)
        self.assertEqual(self.wizard.next(), WizardStep.OTP)
        with self.assertRaises(ValidationError) as ctx:
            self.wizard.request_otp()
        self.assertEqual(ctx.exception.message, INSUFFICIENT_FUNDS_MESSAGE)

    def test_back_navigation(self):
        self.wizard.select([employee("1", 100)])
        self.wizard.next()
        self.wizard.next()

        self.assertEqual(self.wizard.back(), WizardStep.DRY_RUN)
        self.assertEqual(self.wizard.back(), WizardStep.SELECT)
        self.assertEqual(self.wizard.back(), WizardStep.SELECT)

    def test_selection_locked_after_dry_run(self):
        self.wizard.select([employee("1", 100)])
        self.wizard.next()
        self.wizard.next()

        with self.assertRaises(ValidationError):
            self.wizard.select([employee("2", 100)])

    def test_otp_countdown(self):
        self.assertEqual(self.wizard.countdown_display, "5:00")

        self.assertEqual(self.wizard.request_otp(), OTP_SENT_MESSAGE)
        self.now += 75
        self.assertEqual(self.wizard.countdown_remaining, 225)
        self.assertEqual(self.wizard.countdown_display, "3:45")

        self.now += 1000
        self.assertEqual(self.wizard.countdown_remaining, 0)

    def test_otp_input_keeps_six_digits(self):
        self.assertEqual(self.wizard.set_otp("12-34 5678"), "123456")
        self.assertTrue(self.wizard.otp_complete)
        self.assertEqual(self.wizard.set_otp("12a"), "12")
        self.assertFalse(self.wizard.otp_complete)

    def test_execute_rejects_short_otp(self):
        self.wizard.select([employee("1", 100)])
        self.wizard.next()
        self.wizard.next()

        with self.assertRaises(ValidationError) as ctx:
            self.wizard.execute("123")

        self.assertEqual(ctx.exception.message, INVALID_OTP_MESSAGE)
        self.sleep.assert_not_called()

    def test_execute_simulates_transfers(self):
        self.wizard.select([employee("1", 400000), employee("2", 350000)])
        self.wizard.next()
        self.wizard.next()

        results = self.wizard.execute("654321")

        self.sleep.assert_called_once_with(3)
        self.assertEqual(self.wizard.step, WizardStep.RESULTS)
        self.assertEqual([r.status for r in results], [TransferStatus.SUCCESS, TransferStatus.FAILED])
        self.assertEqual(results[1].message, INSUFFICIENT_FUNDS_MESSAGE)
        self.assertEqual(self.wizard.summary, "1 successful, 1 failed")
        self.assertEqual(self.wizard.outcome, "warning")

    def test_execute_requires_the_otp_step(self):
        self.wizard.select([employee("1", 100)])
        self.wizard.next()

        with self.assertRaises(ValidationError) as ctx:
            self.wizard.execute("123456")

        self.assertEqual(ctx.exception.message, OTP_STEP_REQUIRED_MESSAGE)
        self.assertEqual(self.wizard.step, WizardStep.DRY_RUN)
        self.assertEqual(self.wizard.results, [])
        self.sleep.assert_not_called()

    def test_execute_refuses_a_shortfall(self):
        self.wizard.select([employee("1", 900000), employee("2", 350000)])
        self.wizard.next()
        self.wizard.next()

        with self.assertRaises(ValidationError) as ctx:
            self.wizard.execute("123456")

        self.assertEqual(ctx.exception.message, INSUFFICIENT_FUNDS_MESSAGE)
        self.assertEqual(self.wizard.step, WizardStep.OTP)
        self.sleep.assert_not_called()

    def test_results_cannot_be_executed_again(self):
        self.wizard.select([employee("1", 400000), employee("2", 350000)])
        self.wizard.next()
        self.wizard.next()
        first = self.wizard.execute("654321")

        with self.assertRaises(ValidationError) as ctx:
            self.wizard.execute("654321")

        self.assertEqual(ctx.exception.message, OTP_STEP_REQUIRED_MESSAGE)
        self.assertEqual(self.wizard.results, first)
        self.sleep.assert_called_once_with(3)

    def test_round_trip_through_session(self):
        self.wizard.select([employee("1", 400000)])
        self.wizard.next()
        self.wizard.next()
        self.wizard.execute("111111")

        restored = PayoutExecutionWizard.from_dict(self.wizard.to_dict())

        self.assertEqual(restored.step, WizardStep.RESULTS)
        self.assertEqual(restored.candidates, self.wizard.candidates)
        self.assertEqual(restored.results, self.wizard.results)
        self.assertEqual(restored.outcome, "success")

    def test_unreadable_state_starts_over(self):
        restored = PayoutExecutionWizard.from_dict({"step": 9, "candidates": [{"id": "1"}]})

        self.assertEqual(restored.step, WizardStep.SELECT)
        self.assertEqual(restored.candidates, [])

    def test_from_config(self):
        wizard = PayoutExecutionWizard.from_config({"payouts": {
            "mock_wallet_balance_cents": 42, "otp_countdown_seconds": 60,
            "execution_delay_seconds": 0, "failure_rate": 0,
        }})

        self.assertEqual((wizard.wallet_balance_cents, wizard.otp_countdown_seconds), (42, 60))
        self.assertEqual(wizard.failure_rate, 0.0)


if __name__ == "__main__":
    unittest.main()
