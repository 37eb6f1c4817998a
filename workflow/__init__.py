"""
Workflow module for FinManager.

Multi-step console processes that keep their own state between requests.
"""

from workflow.payout_execution import (
    PayoutCandidate,
    PayoutExecutionWizard,
    PayoutResult,
    TransferStatus,
    WizardStep,
)

__all__ = [
    'PayoutCandidate',
    'PayoutExecutionWizard',
    'PayoutResult',
    'TransferStatus',
    'WizardStep',
]
