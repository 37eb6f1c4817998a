"""
Tests for the web console pages.

The console runs in-process through FastAPI's TestClient; the backend API is a
mocked requests session that answers from a route table.
"""

import unittest
from typing import Any, Dict, Tuple
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from console import create_app
from stores.session_store import SessionStore

API_ROOT = "http://api.test/api"

CONFIG: Dict[str, Any] = {
    "environment": "test",
    "api": {"base_url": API_ROOT, "timeout_seconds": 5},
    "auth": {"mock_login": True},
    "cache": {"stale_seconds": 30},
    "session": {"cookie_name": "finmanager_session", "storage_dir": ""},
    "payouts": {
        "mock_wallet_balance_cents": 50000000,
        "otp_countdown_seconds": 300,
        "execution_delay_seconds": 0,
        "failure_rate": 0,
    },
}

SUBSIDIARY = {"id": "1", "name": "Cement", "code": "CEM", "is_active": True}

EMPLOYEE = {
    "id": "11",
    "first_name": "Ada",
    "last_name": "Obi",
    "email": "ada@example.com",
    "bank_name": "GTBank",
    "account_number": "0123456789",
    "net_salary_cents": 25000000,
    "employment_status": "ACTIVE",
    "subsidiary": {"id": "1", "name": "Cement"},
}

INVOICE = {
    "id": "7",
    "invoice_number": "INV-007",
    "client_name": "Dangote Ltd",
    "status": "DRAFT",
    "total_cents": 150000,
    "lineItems": [{"description": "Bags", "quantity": 2, "unit_price_cents": 75000, "amount_cents": 150000}],
}


def fake_response(status_code: int, body: Any) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = b"" if body is None else b"{}"
    response.json.return_value = body
    return response


class FakeApi:
    """Answers API requests from a {(method, path): (status, body)} table."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {
            ("GET", "/subsidiaries"): (200, {"data": [SUBSIDIARY], "total": 1}),
            ("GET", "/dashboard/stats"): (200, {"walletBalance": 50000000, "activeEmployees": 1}),
        }
        self.session = MagicMock()
        self.session.headers = {}
        self.session.request.side_effect = self.request

    def request(self, method: str, url: str, **kwargs: Any) -> MagicMock:
        path = url[len(API_ROOT):]
        if (method, path) in self.routes:
            return fake_response(*self.routes[(method, path)])
        if method == "GET":
            return fake_response(200, {"data": [], "total": 0})
        return fake_response(204, None)

    def calls(self, method: str, path: str):
        return [c for c in self.session.request.call_args_list
                if c.args[0] == method and c.args[1] == API_ROOT + path]


class ConsoleTestCase(unittest.TestCase):

    def setUp(self):
        self.api = FakeApi()
        self.app = create_app(CONFIG, session_store=SessionStore(), http_session=self.api.session)
        self.client = TestClient(self.app)

    def login(self):
        response = self.client.post("/login", data={"username": "admin", "password": "secret"},
                                    follow_redirects=False)
        self.assertEqual(response.status_code, 303)
        return response

    def post(self, path: str, data: Any = None):
        return self.client.post(path, data=data or {}, follow_redirects=False)


class TestAuthPages(ConsoleTestCase):

    def test_pages_require_login(self):
        response = self.client.get("/employees", follow_redirects=False)

        self.assertEqual(response.status_code, 303)
        self.assertEqual(response.headers["location"], "/login")

    def test_login_page(self):
        response = self.client.get("/login")

        self.assertEqual(response.status_code, 200)
        self.assertIn('name="username"', response.text)
        self.assertIn("finmanager_session", response.cookies)

    def test_login_validation(self):
        response = self.client.post("/login", data={"username": "", "password": ""})

        self.assertEqual(response.status_code, 400)
        self.assertIn("Please input your username!", response.text)
        self.assertIn("Please input your password!", response.text)

    def test_login_and_dashboard(self):
        self.assertEqual(self.login().headers["location"], "/dashboard")

        response = self.client.get("/dashboard")

        self.assertEqual(response.status_code, 200)
        self.assertIn("Login successful", response.text)
        self.assertIn("₦500,000.00", response.text)
        self.assertEqual(len(self.api.calls("GET", "/dashboard/stats")), 1)

    def test_logout(self):
        self.login()

        response = self.post("/logout")

        self.assertEqual(response.headers["location"], "/login")
        self.assertEqual(self.client.get("/dashboard", follow_redirects=False).status_code, 303)

    def test_expired_token_returns_to_login(self):
        self.login()
        self.api.routes[("GET", "/employees")] = (401, {"message": "jwt expired"})

        response = self.client.get("/employees", follow_redirects=False)

        self.assertEqual(response.headers["location"], "/login")
        login_page = self.client.get("/login")
        self.assertIn("Session expired. Please login again.", login_page.text)
        self.assertEqual(self.client.get("/dashboard", follow_redirects=False).status_code, 303)

    def test_planted_session_id_is_not_adopted(self):
        victim = TestClient(self.app, cookies={"finmanager_session": "attackerchosen123"})
        victim.post("/login", data={"username": "admin", "password": "secret"}, follow_redirects=False)

        attacker = TestClient(self.app, cookies={"finmanager_session": "attackerchosen123"})

        self.assertEqual(attacker.get("/dashboard", follow_redirects=False).status_code, 303)
        self.assertNotIn("attackerchosen123", self.app.state.session_store.session_ids())

    def test_login_and_logout_rotate_the_session_id(self):
        anonymous_id = self.client.get("/login").cookies["finmanager_session"]

        signed_in_id = self.login().cookies["finmanager_session"]
        signed_out_id = self.post("/logout").cookies["finmanager_session"]

        self.assertEqual(len({anonymous_id, signed_in_id, signed_out_id}), 3)
        self.assertEqual(self.app.state.session_store.session_ids(), [signed_out_id])
        stale = TestClient(self.app, cookies={"finmanager_session": signed_in_id})
        self.assertEqual(stale.get("/dashboard", follow_redirects=False).status_code, 303)

    def test_health(self):
        data = self.client.get("/health").json()

        self.assertEqual(data["status"], "ok")
        self.assertEqual(data["environment"], "test")


class TestEmployeePages(ConsoleTestCase):

    def setUp(self):
        super().setUp()
        self.login()
        self.api.routes[("GET", "/employees")] = (200, {"data": [EMPLOYEE], "total": 1})
        self.api.routes[("GET", "/employees/11")] = (200, EMPLOYEE)

    def valid_inputs(self, **overrides: str) -> Dict[str, str]:
        values = {
            "first_name": "Ada",
            "last_name": "Obi",
            "email": "ada@example.com",
            "subsidiaryId": "1",
            "employment_status": "ACTIVE",
            "hire_date": "2024-03-01",
            "bank_name": "GTBank",
            "account_number": "0123456789",
            "account_name": "Ada Obi",
            "net_salary": "250000",
        }
        values.update(overrides)
        return values

    def test_list(self):
        response = self.client.get("/employees?search=ada")

        self.assertEqual(response.status_code, 200)
        self.assertIn("Ada Obi", response.text)
        params = self.api.calls("GET", "/employees")[0].kwargs["params"]
        self.assertEqual(params["search"], "ada")

    def test_header_subsidiary_filters_lists(self):
        self.post("/subsidiary", {"subsidiary": "1"})

        self.client.get("/employees")

        self.assertEqual(self.api.calls("GET", "/employees")[-1].kwargs["params"]["subsidiary"], "1")

    def test_invalid_salary_is_not_sent(self):
        response = self.post("/employees", self.valid_inputs(net_salary="0"))

        self.assertEqual(response.status_code, 400)
        self.assertIn("Salary must be greater than 0", response.text)
        self.assertEqual(self.api.calls("POST", "/employees"), [])

    def test_create(self):
        response = self.post("/employees", self.valid_inputs(net_salary="250,000.50"))

        self.assertEqual(response.headers["location"], "/employees")
        payload = self.api.calls("POST", "/employees")[0].kwargs["json"]
        self.assertEqual(payload["net_salary_cents"], 25000050)
        self.assertIn("Employee created successfully", self.client.get("/employees").text)

    def test_create_failure_keeps_the_form(self):
        self.api.routes[("POST", "/employees")] = (409, {"message": "Email already exists"})

        response = self.post("/employees", self.valid_inputs())

        self.assertEqual(response.status_code, 400)
        self.assertIn("Operation failed. Please try again.", response.text)
        self.assertIn('value="ada@example.com"', response.text)

    def test_edit_and_delete(self):
        self.assertIn('value="250000.00"', self.client.get("/employees/11/edit").text)

        response = self.post("/employees/11/delete")

        self.assertEqual(response.headers["location"], "/employees")
        self.assertEqual(len(self.api.calls("DELETE", "/employees/11")), 1)
        self.assertIn("Ada Obi has been deleted", self.client.get("/employees").text)


class TestInvoicePages(ConsoleTestCase):

    def setUp(self):
        super().setUp()
        self.login()
        self.api.routes[("GET", "/invoices/7")] = (200, INVOICE)

    def test_detail(self):
        response = self.client.get("/invoices/7")

        self.assertEqual(response.status_code, 200)
        self.assertIn("INV-007", response.text)
        self.assertIn("₦1,500.00", response.text)

    def test_send(self):
        response = self.post("/invoices/7/send")

        self.assertEqual(response.headers["location"], "/invoices/7")
        self.assertEqual(len(self.api.calls("POST", "/invoices/7/send")), 1)
        self.assertIn("Invoice sent successfully", self.client.get("/invoices/7").text)

    def test_pdf_not_generated(self):
        response = self.client.get("/invoices/7/pdf", follow_redirects=False)

        self.assertEqual(response.headers["location"], "/invoices/7")
        self.assertIn("PDF not yet generated", self.client.get("/invoices/7").text)

    def test_pdf_redirect(self):
        self.api.routes[("GET", "/invoices/7")] = (200, dict(INVOICE, pdf_storage_url="https://files.example.com/7.pdf"))

        response = self.client.get("/invoices/7/pdf", follow_redirects=False)

        self.assertEqual(response.headers["location"], "https://files.example.com/7.pdf")

    def test_add_line_item_row(self):
        response = self.post("/invoices", {
            "action": "add_line",
            "lineItems-0-description": "Bags",
            "lineItems-0-quantity": "2",
            "lineItems-0-unitPrice": "750",
        })

        self.assertEqual(response.status_code, 200)
        self.assertIn('name="lineItems-1-description"', response.text)
        self.assertEqual(self.api.calls("POST", "/invoices"), [])

    def test_server_error_page(self):
        self.api.routes[("GET", "/invoices/8")] = (500, {"message": "db down"})

        response = self.client.get("/invoices/8")

        self.assertEqual(response.status_code, 500)
        self.assertIn("Server error. Please try again later.", response.text)

    def test_unreadable_response_page(self):
        self.api.routes[("GET", "/invoices")] = (200, {"data": [dict(INVOICE, status="PARTIALLY_PAID")], "total": 1})

        response = self.client.get("/invoices")

        self.assertEqual(response.status_code, 502)
        self.assertIn("Unexpected response from server", response.text)


class TestExpenseAndSubsidiaryPages(ConsoleTestCase):

    def setUp(self):
        super().setUp()
        self.login()
        self.api.routes[("GET", "/expenses/3")] = (200, {
            "id": "3", "status": "PENDING", "employee": {"id": "11", "first_name": "Ada", "last_name": "Obi"},
        })

    def test_approve_expense(self):
        self.api.routes[("POST", "/expenses/3/approve")] = (200, {"id": "3", "status": "APPROVED"})

        response = self.post("/expenses/3/approve")

        self.assertEqual(response.headers["location"], "/expenses")
        self.assertIn("Expense for Ada Obi has been approved", self.client.get("/expenses").text)

    def test_reject_failure(self):
        self.api.routes[("POST", "/expenses/3/reject")] = (400, {"message": "Already reimbursed"})

        self.post("/expenses/3/reject")

        self.assertIn("Failed to reject expense. Please try again.", self.client.get("/expenses").text)

    def test_toggle_subsidiary(self):
        self.api.routes[("GET", "/subsidiaries/1")] = (200, SUBSIDIARY)
        self.api.routes[("PATCH", "/subsidiaries/1")] = (200, dict(SUBSIDIARY, is_active=False))

        response = self.post("/subsidiaries/1/toggle")

        self.assertEqual(response.headers["location"], "/subsidiaries")
        self.assertEqual(self.api.calls("PATCH", "/subsidiaries/1")[0].kwargs["json"], {"is_active": False})
        self.assertIn("Cement has been deactivated", self.client.get("/subsidiaries").text)


class TestPayoutWizard(ConsoleTestCase):

    def setUp(self):
        super().setUp()
        self.login()
        self.api.routes[("GET", "/employees")] = (200, {"data": [EMPLOYEE], "total": 1})

    def test_full_run(self):
        self.assertIn("Ada Obi", self.client.get("/payouts/execute").text)

        self.post("/payouts/execute/select", {"employee_ids": ["11"]})
        dry_run = self.client.get("/payouts/execute").text
        self.assertIn("Sufficient funds available", dry_run)
        self.assertIn("₦250,000.00", dry_run)

        self.post("/payouts/execute/next")
        self.post("/payouts/execute/otp")
        self.assertIn("OTP sent to your email", self.client.get("/payouts/execute").text)

        self.post("/payouts/execute/run", {"otp": "123456"})
        results = self.client.get("/payouts/execute").text
        self.assertIn("1 successful, 0 failed", results)
        self.assertIn("Transfer successful", results)

        self.post("/payouts/execute/reset")
        self.assertIn('action="/payouts/execute/select"', self.client.get("/payouts/execute").text)

    def test_select_nothing(self):
        self.post("/payouts/execute/select", {})

        page = self.client.get("/payouts/execute").text
        self.assertIn("Please select at least one employee", page)
        self.assertIn('action="/payouts/execute/select"', page)

    def test_run_before_the_otp_step_is_refused(self):
        self.post("/payouts/execute/select", {"employee_ids": ["11"]})

        self.post("/payouts/execute/run", {"otp": "123456"})

        page = self.client.get("/payouts/execute").text
        self.assertIn("Complete the dry run and OTP verification before executing", page)
        self.assertIn("Sufficient funds available", page)

    def test_results_are_not_executed_twice(self):
        self.post("/payouts/execute/select", {"employee_ids": ["11"]})
        self.post("/payouts/execute/next")
        self.post("/payouts/execute/run", {"otp": "123456"})

        self.post("/payouts/execute/run", {"otp": "123456"})

        page = self.client.get("/payouts/execute").text
        self.assertIn("Complete the dry run and OTP verification before executing", page)
        self.assertIn("1 successful, 0 failed", page)

    def test_short_otp(self):
        self.post("/payouts/execute/select", {"employee_ids": ["11"]})
        self.post("/payouts/execute/next")

        self.post("/payouts/execute/run", {"otp": "12"})

        self.assertIn("Please enter a valid 6-digit OTP", self.client.get("/payouts/execute").text)


class TestSettingsPages(ConsoleTestCase):

    def setUp(self):
        super().setUp()
        self.login()

    def test_theme_preset(self):
        self.post("/settings/theme/preset/ocean")

        page = self.client.get("/settings/theme").text
        self.assertIn("Ocean theme applied!", page)
        self.assertIn("#0284c7", page)

    def test_template_edit(self):
        response = self.post("/settings/notifications/1", {"subject": "Your invoice", "body": "Hello"})

        self.assertEqual(response.status_code, 303)
        page = self.client.get("/settings/notifications").text
        self.assertIn("Template updated successfully", page)
        self.assertIn("Your invoice", page)

    def test_password_mismatch(self):
        response = self.post("/settings/password", {
            "current_password": "old-secret",
            "new_password": "new-secret",
            "confirm_password": "different",
        })

        self.assertEqual(response.status_code, 400)
        self.assertIn("Passwords do not match", response.text)


if __name__ == "__main__":
    unittest.main()
