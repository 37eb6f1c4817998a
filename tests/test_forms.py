"""
Unit tests for the console forms.
"""

import unittest
from datetime import date

from forms import (
    EmployeeForm,
    ExpenseForm,
    InvoiceForm,
    LoginForm,
    NotificationTemplateForm,
    PasswordChangeForm,
    ProfileForm,
    SubsidiaryForm,
)
from forms.base import cents_to_input
from forms.invoice_form import line_items_from_inputs
from models.documents import Invoice
from models.entities import Employee
from utils.error_handling import ValidationError

EMPLOYEE_INPUTS = {
    "first_name": "Ada",
    "last_name": "Obi",
    "email": "ada@example.com",
    "phone_number": "",
    "subsidiaryId": "1",
    "employment_status": "ACTIVE",
    "hire_date": "2024-03-01",
    "bank_name": "GTBank",
    "account_number": "0123456789",
    "account_name": "Ada Obi",
    "net_salary": "250,000.50",
}


class TestEmployeeForm(unittest.TestCase):

    def test_valid_employee_payload(self):
        payload = EmployeeForm.validate_form(EMPLOYEE_INPUTS).to_payload()

        self.assertEqual(payload["net_salary_cents"], 25000050)
        self.assertNotIn("net_salary", payload)
        self.assertEqual(payload["hire_date"], "2024-03-01T00:00:00.000Z")
        self.assertEqual(payload["subsidiaryId"], "1")
        self.assertEqual(payload["employment_status"], "ACTIVE")
        self.assertNotIn("phone_number", payload)

    def test_required_fields(self):
        with self.assertRaises(ValidationError) as ctx:
            EmployeeForm.validate_form({"first_name": "  "})

        errors = ctx.exception.field_errors
        self.assertEqual(errors["first_name"], "Please enter first name")
        self.assertEqual(errors["subsidiaryId"], "Please select a subsidiary")
        self.assertEqual(errors["net_salary"], "Please enter salary")
        self.assertNotIn("employment_status", errors)

    def test_invalid_values(self):
        inputs = dict(EMPLOYEE_INPUTS, email="not-an-email", net_salary="0", hire_date="yesterday")

        with self.assertRaises(ValidationError) as ctx:
            EmployeeForm.validate_form(inputs)

        errors = ctx.exception.field_errors
        self.assertEqual(errors["email"], "Please enter a valid email")
        self.assertEqual(errors["net_salary"], "Salary must be greater than 0")
        self.assertEqual(errors["hire_date"], "Please select hire date")

    def test_initial_values_round_trip_cents(self):
        employee = Employee.model_validate({
            "id": "3", "first_name": "Ada", "last_name": "Obi", "net_salary_cents": 25000050,
            "hire_date": "2024-03-01T00:00:00.000Z", "subsidiary": {"id": "1", "name": "Cement"},
        })

        values = EmployeeForm.initial_values(employee)

        self.assertEqual(values["net_salary"], "250000.50")
        self.assertEqual(values["hire_date"], "2024-03-01")
        self.assertEqual(values["subsidiaryId"], "1")
        self.assertEqual(EmployeeForm.initial_values(), {"employment_status": "ACTIVE"})


class TestExpenseForm(unittest.TestCase):

    def test_payload(self):
        form = ExpenseForm.validate_form({
            "employeeId": "11",
            "subsidiaryId": "1",
            "expense_date": "2025-02-10",
            "category": "TRAVEL",
            "amount": "₦1,500",
            "description": "Taxi to site",
        })

        payload = form.to_payload()

        self.assertEqual(payload["amount_cents"], 150000)
        self.assertEqual(payload["expense_date"], "2025-02-10T00:00:00.000Z")
        self.assertEqual(payload["employeeId"], "11")

    def test_date_defaults_to_today(self):
        form = ExpenseForm.validate_form({
            "employeeId": "11", "subsidiaryId": "1", "category": "MEALS",
            "amount": "20", "description": "Lunch", "expense_date": "",
        })

        self.assertEqual(form.expense_date, date.today())

    def test_invalid_expense(self):
        with self.assertRaises(ValidationError) as ctx:
            ExpenseForm.validate_form({"category": "FUEL", "amount": "-5", "description": "x" * 501})

        errors = ctx.exception.field_errors
        self.assertEqual(errors["category"], "Please select a category")
        self.assertEqual(errors["amount"], "Amount must be greater than 0")
        self.assertEqual(errors["employeeId"], "Please select an employee")
        self.assertIn("description", errors)


class TestInvoiceForm(unittest.TestCase):

    def inputs(self, **overrides):
        values = {
            "subsidiaryId": "1",
            "client_name": "Dangote Ltd",
            "client_email": "billing@dangote.example.com",
            "issue_date": "2025-01-15",
            "due_date": "2025-02-14",
            "payment_terms": "Net 30",
            "lineItems-0-description": "Cement bags",
            "lineItems-0-quantity": "2",
            "lineItems-0-unitPrice": "750.00",
            "lineItems-1-description": "Delivery",
            "lineItems-1-quantity": "1.5",
            "lineItems-1-unitPrice": "100",
        }
        values.update(overrides)
        return values

    def test_payload_with_line_items(self):
        form = InvoiceForm.from_inputs(self.inputs())
        payload = form.to_payload()

        self.assertEqual(form.total_cents, 165000)
        self.assertEqual(payload["lineItems"], [
            {"description": "Cement bags", "quantity": 2, "unit_price_cents": 75000, "amount_cents": 150000},
            {"description": "Delivery", "quantity": 1.5, "unit_price_cents": 10000, "amount_cents": 15000},
        ])
        self.assertEqual(payload["due_date"], "2025-02-14T00:00:00.000Z")
        self.assertEqual(payload["payment_terms"], "Net 30")
        self.assertNotIn("vinNumber", payload)

    def test_blank_rows_are_skipped(self):
        rows = line_items_from_inputs({
            "lineItems-2-description": "Last",
            "lineItems-0-description": "First",
            "lineItems-1-description": "",
            "lineItems-1-quantity": " ",
            "lineItems-x-description": "ignored",
        })

        self.assertEqual([r["description"] for r in rows], ["First", "Last"])

    def test_at_least_one_line_item(self):
        values = {k: v for k, v in self.inputs().items() if not k.startswith("lineItems-")}

        with self.assertRaises(ValidationError) as ctx:
            InvoiceForm.from_inputs(values)

        self.assertEqual(ctx.exception.field_errors["lineItems"], "Add at least one line item")

    def test_line_item_errors(self):
        with self.assertRaises(ValidationError) as ctx:
            InvoiceForm.from_inputs(self.inputs(**{"lineItems-1-quantity": "0",
                                                   "lineItems-0-unitPrice": "-1"}))

        errors = ctx.exception.field_errors
        self.assertEqual(errors["lineItems.1.quantity"], "Quantity must be greater than 0")
        self.assertEqual(errors["lineItems.0.unitPrice"], "Unit price cannot be negative")

    def test_initial_values_from_invoice(self):
        invoice = Invoice.model_validate({
            "id": "7", "client_name": "Dangote Ltd", "payment_terms": "Net 60",
            "lineItems": [{"description": "Bags", "quantity": 2, "unit_price_cents": 75000}],
        })

        values = InvoiceForm.initial_values(invoice)

        self.assertEqual(values["lineItems"], [{"description": "Bags", "quantity": "2", "unitPrice": "750.00"}])
        self.assertEqual(len(InvoiceForm.initial_values()["lineItems"]), 1)


class TestSubsidiaryForm(unittest.TestCase):

    def test_code_is_uppercased(self):
        form = SubsidiaryForm.validate_form({"name": "Cement", "code": "cem", "invoice_template_id": "cement"})

        payload = form.to_payload()
        self.assertEqual(payload["code"], "CEM")
        self.assertEqual(payload["primary_color"], "#8B2F39")
        self.assertEqual(payload["invoice_template_id"], "cement")

    def test_invalid_subsidiary(self):
        with self.assertRaises(ValidationError) as ctx:
            SubsidiaryForm.validate_form({"name": "Cement", "code": "C" * 21, "primary_color": "red",
                                          "contact_email": "nope"})

        errors = ctx.exception.field_errors
        self.assertEqual(errors["code"], "Code must be max 20 characters")
        self.assertEqual(errors["primary_color"], "Please pick a valid color")
        self.assertEqual(errors["contact_email"], "Please enter a valid email")


class TestAccountForms(unittest.TestCase):

    def test_login_required(self):
        with self.assertRaises(ValidationError) as ctx:
            LoginForm.validate_form({"username": "", "password": ""})

        self.assertEqual(ctx.exception.field_errors, {
            "username": "Please input your username!",
            "password": "Please input your password!",
        })

    def test_password_confirmation(self):
        with self.assertRaises(ValidationError) as ctx:
            PasswordChangeForm.validate_form({"current_password": "old-secret",
                                              "new_password": "new-secret",
                                              "confirm_password": "other-secret"})
        self.assertEqual(ctx.exception.field_errors, {"confirm_password": "Passwords do not match"})

        with self.assertRaises(ValidationError) as ctx:
            PasswordChangeForm.validate_form({"current_password": "old", "new_password": "short",
                                              "confirm_password": "short"})
        self.assertEqual(ctx.exception.field_errors, {"new_password": "Password must be at least 8 characters"})

    def test_password_not_in_repr(self):
        form = LoginForm.validate_form({"username": "admin", "password": "hunter22"})

        self.assertNotIn("hunter22", repr(form))

    def test_profile_and_template(self):
        with self.assertRaises(ValidationError) as ctx:
            ProfileForm.validate_form({"email": "bad"})
        self.assertEqual(ctx.exception.field_errors, {"email": "Please enter a valid email"})

        with self.assertRaises(ValidationError) as ctx:
            NotificationTemplateForm.validate_form({"subject": "Hi"})
        self.assertEqual(ctx.exception.field_errors, {"body": "Please enter body"})

    def test_cents_to_input(self):
        self.assertEqual(cents_to_input(197500), "1975.00")
        self.assertEqual(cents_to_input(None), "")


if __name__ == "__main__":
    unittest.main()
