"""
Console forms: validation and API payloads.
"""

from forms.account_forms import LoginForm, NotificationTemplateForm, PasswordChangeForm, ProfileForm
from forms.employee_form import EmployeeForm
from forms.expense_form import ExpenseForm
from forms.filters import FilterField, ListFilters
from forms.invoice_form import InvoiceForm
from forms.subsidiary_form import SubsidiaryForm
