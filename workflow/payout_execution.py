"""
Payout execution wizard.

Five steps over client-local state: select employees, dry run against the
wallet balance, OTP verification, execution and results. No transfer API is
called; execution is simulated with a delay and a random failure rate. The
state round-trips through to_dict/from_dict so the web console can keep it in
the session between requests.
"""

import logging
import random
import time
from dataclasses import asdict, dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, Iterable, List, Optional

from models.entities import Employee
from utils.error_handling import ValidationError
from utils.formatting import format_countdown

logger = logging.getLogger("finmanager.workflow.payouts")

DEFAULT_WALLET_BALANCE_CENTS = 50000000
DEFAULT_OTP_COUNTDOWN_SECONDS = 300
DEFAULT_EXECUTION_DELAY_SECONDS = 3.0
DEFAULT_FAILURE_RATE = 0.1
OTP_LENGTH = 6

NO_SELECTION_MESSAGE = "Please select at least one employee"
INVALID_OTP_MESSAGE = "Please enter a valid 6-digit OTP"
OTP_SENT_MESSAGE = "OTP sent to your email"
INSUFFICIENT_FUNDS_MESSAGE = "Insufficient funds"
TRANSFER_SUCCESS_MESSAGE = "Transfer successful"
OTP_STEP_REQUIRED_MESSAGE = "Complete the dry run and OTP verification before executing"


class WizardStep(IntEnum):
    SELECT = 0
    DRY_RUN = 1
    OTP = 2
    EXECUTION = 3
    RESULTS = 4

    @property
    def title(self) -> str:
        return STEP_TITLES[self]


STEP_TITLES = {
    WizardStep.SELECT: "Select Employees",
    WizardStep.DRY_RUN: "Dry Run",
    WizardStep.OTP: "OTP Verification",
    WizardStep.EXECUTION: "Execution",
    WizardStep.RESULTS: "Results",
}


class TransferStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


@dataclass
class PayoutCandidate:
    """Employee snapshot taken when the selection is made."""
    id: str
    employee_name: str
    subsidiary_name: str
    net_salary_cents: int

    @classmethod
    def from_employee(cls, employee: Employee) -> 'PayoutCandidate':
        return cls(
            id=employee.id,
            employee_name=employee.full_name,
            subsidiary_name=employee.subsidiary.name if employee.subsidiary else "",
            net_salary_cents=employee.net_salary_cents,
        )


@dataclass
class PayoutResult:
    id: str
    employee_name: str
    amount_cents: int
    status: TransferStatus
    message: str

    @property
    def succeeded(self) -> bool:
        return self.status == TransferStatus.SUCCESS


def _wizard_error(message: str) -> ValidationError:
    return ValidationError(message, form_name="payout execution")


@dataclass
class PayoutExecutionWizard:
    """
    State machine behind the Execute Payout page.

    Args:
        wallet_balance_cents: Balance shown in the dry run
        otp_countdown_seconds: Lifetime of a requested OTP
        execution_delay_seconds: Simulated processing time
        failure_rate: Share of transfers that fail in the simulation
        rng: Random source for the simulated failures
        clock: Wall clock (seconds) for the OTP countdown
        sleep: Called with the execution delay
    """

    wallet_balance_cents: int = DEFAULT_WALLET_BALANCE_CENTS
    otp_countdown_seconds: int = DEFAULT_OTP_COUNTDOWN_SECONDS
    execution_delay_seconds: float = DEFAULT_EXECUTION_DELAY_SECONDS
    failure_rate: float = DEFAULT_FAILURE_RATE

    step: WizardStep = WizardStep.SELECT
    candidates: List[PayoutCandidate] = field(default_factory=list)
    otp: str = ""
    otp_requested_at: Optional[float] = None
    results: List[PayoutResult] = field(default_factory=list)

    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)
    clock: Callable[[], float] = field(default=time.time, repr=False, compare=False)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)

    @classmethod
    def from_config(cls, config: Dict[str, Any], **kwargs: Any) -> 'PayoutExecutionWizard':
        """Build a wizard from the `payouts` configuration section."""
        payouts = config.get("payouts", {})
        return cls(
            wallet_balance_cents=int(payouts.get("mock_wallet_balance_cents", DEFAULT_WALLET_BALANCE_CENTS)),
            otp_countdown_seconds=int(payouts.get("otp_countdown_seconds", DEFAULT_OTP_COUNTDOWN_SECONDS)),
            execution_delay_seconds=float(payouts.get("execution_delay_seconds", DEFAULT_EXECUTION_DELAY_SECONDS)),
            failure_rate=float(payouts.get("failure_rate", DEFAULT_FAILURE_RATE)),
            **kwargs
        )

    # Step 1: selection

    @property
    def selected_ids(self) -> List[str]:
        return [c.id for c in self.candidates]

    def select(self, employees: Iterable[Employee]) -> None:
        """Replace the selection; only allowed before the OTP step."""
        if self.step > WizardStep.DRY_RUN:
            raise _wizard_error("The selection can no longer be changed")
        self.candidates = [PayoutCandidate.from_employee(e) for e in employees]

    # Step 2: dry run

    @property
    def total_payout_cents(self) -> int:
        return sum(c.net_salary_cents for c in self.candidates)

    @property
    def shortfall_cents(self) -> int:
        return max(0, self.total_payout_cents - self.wallet_balance_cents)

    @property
    def has_sufficient_funds(self) -> bool:
        return self.shortfall_cents == 0

    # Navigation

    def next(self) -> WizardStep:
        """
        Advance one step.

        SELECT requires a selection; OTP and later steps only move forward
        through execute().
        """
        if self.step == WizardStep.SELECT:
            if not self.candidates:
                raise _wizard_error(NO_SELECTION_MESSAGE)
            self.step = WizardStep.DRY_RUN
        elif self.step == WizardStep.DRY_RUN:
            self.step = WizardStep.OTP
        return self.step

    def back(self) -> WizardStep:
        if WizardStep.SELECT < self.step < WizardStep.EXECUTION:
            self.step = WizardStep(self.step - 1)
        return self.step

    # Step 3: OTP

    def request_otp(self) -> str:
        """
        Send an OTP (simulated) and restart the countdown.

        Returns:
            The confirmation message
        """
        if not self.has_sufficient_funds:
            raise _wizard_error(INSUFFICIENT_FUNDS_MESSAGE)
        self.otp_requested_at = self.clock()
        logger.info(f"OTP requested for payout of {len(self.candidates)} employees")
        return OTP_SENT_MESSAGE

    @property
    def countdown_remaining(self) -> int:
        """Seconds left on the OTP countdown; the full duration before any request."""
        if self.otp_requested_at is None:
            return self.otp_countdown_seconds
        elapsed = int(self.clock() - self.otp_requested_at)
        return max(0, self.otp_countdown_seconds - elapsed)

    @property
    def countdown_display(self) -> str:
        return format_countdown(self.countdown_remaining)

    def set_otp(self, raw: Optional[str]) -> str:
        """Keep only digits, at most six."""
        self.otp = "".join(ch for ch in (raw or "") if ch.isdigit())[:OTP_LENGTH]
        return self.otp

    @property
    def otp_complete(self) -> bool:
        return len(self.otp) == OTP_LENGTH

    # Steps 4 and 5: execution and results

    def execute(self, otp: Optional[str] = None) -> List[PayoutResult]:
        """
        Verify the OTP and run the simulated transfers.

        Returns:
            One result per selected employee
        """
        if self.step != WizardStep.OTP:
            raise _wizard_error(OTP_STEP_REQUIRED_MESSAGE)
        if not self.has_sufficient_funds:
            raise _wizard_error(INSUFFICIENT_FUNDS_MESSAGE)
        if otp is not None:
            self.set_otp(otp)
        if not self.otp_complete:
            raise _wizard_error(INVALID_OTP_MESSAGE)
        if not self.candidates:
            raise _wizard_error(NO_SELECTION_MESSAGE)

        self.step = WizardStep.EXECUTION
        logger.info(f"Executing payout for {len(self.candidates)} employees")
        self.sleep(self.execution_delay_seconds)

        results = []
        for candidate in self.candidates:
            failed = self.rng.random() < self.failure_rate
            results.append(PayoutResult(
                id=candidate.id,
                employee_name=candidate.employee_name,
                amount_cents=candidate.net_salary_cents,
                status=TransferStatus.FAILED if failed else TransferStatus.SUCCESS,
                message=INSUFFICIENT_FUNDS_MESSAGE if failed else TRANSFER_SUCCESS_MESSAGE,
            ))

        self.results = results
        self.step = WizardStep.RESULTS
        logger.info(f"Payout execution complete: {self.summary}")
        return results

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if not r.succeeded)

    @property
    def summary(self) -> str:
        return f"{self.success_count} successful, {self.failure_count} failed"

    @property
    def outcome(self) -> str:
        return "success" if self.failure_count == 0 else "warning"

    # Persistence

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": int(self.step),
            "candidates": [asdict(c) for c in self.candidates],
            "otp": self.otp,
            "otp_requested_at": self.otp_requested_at,
            "results": [
                {**asdict(r), "status": r.status.value} for r in self.results
            ],
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], config: Optional[Dict[str, Any]] = None,
                  **kwargs: Any) -> 'PayoutExecutionWizard':
        """Restore a wizard saved with to_dict; missing or unreadable state starts over."""
        wizard = cls.from_config(config or {}, **kwargs)
        if not data:
            return wizard
        try:
            wizard.step = WizardStep(int(data.get("step", 0)))
            wizard.candidates = [PayoutCandidate(**c) for c in data.get("candidates", [])]
            wizard.otp = str(data.get("otp") or "")
            wizard.otp_requested_at = data.get("otp_requested_at")
            wizard.results = [
                PayoutResult(**{**r, "status": TransferStatus(r["status"])})
                for r in data.get("results", [])
            ]
        except (TypeError, ValueError, KeyError) as e:
            logger.warning(f"Discarding unreadable payout wizard state: {e}")
            return cls.from_config(config or {}, **kwargs)
        return wizard
