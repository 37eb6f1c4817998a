"""
CLI interface for the FinManager console.

This module provides an interactive command-line interface over the same
session services the web console uses.
"""

import argparse
import cmd
import getpass
import logging
import shlex
from typing import Any, Dict, List, Optional, Sequence

from api.services import ConsoleServices, build_services
from forms.filters import ListFilters, page_count
from stores.session_store import SessionState
from stores.ui_store import ALL_SUBSIDIARIES
from utils.error_handling import ApiError
from utils.formatting import format_currency, format_date
from utils.logging_config import TraceContext

logger = logging.getLogger(__name__)

TOAST_PREFIX = {
    "success": "[ok]",
    "error": "[error]",
    "info": "[info]",
    "warning": "[warning]",
}


def _table(headers: Sequence[str], rows: List[Sequence[Any]]) -> str:
    """Left-aligned text table."""
    cells = [[str(h) for h in headers]] + [[str(c) for c in row] for row in rows]
    widths = [max(len(row[i]) for row in cells) for i in range(len(headers))]
    lines = ["  ".join(c.ljust(w) for c, w in zip(row, widths)).rstrip() for row in cells]
    lines.insert(1, "  ".join("-" * w for w in widths))
    return "\n".join(lines)


def _list_parser(prog: str, actions: Sequence[str], *filters: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog)
    parser.add_argument("action", nargs="?", default="list", choices=list(actions), help="Action to perform")
    parser.add_argument("id", nargs="?", help="Record ID")
    for name in filters:
        parser.add_argument(f"--{name}", dest=name)
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--page-size", dest="pageSize", type=int, default=10)
    return parser


class FinManagerCLI(cmd.Cmd):
    """Interactive CLI for the FinManager console."""

    intro = "Welcome to the FinManager CLI. Type help or ? to list commands.\n"
    prompt = "finmanager> "

    def __init__(self, config: Dict[str, Any], services: Optional[ConsoleServices] = None, **kwargs: Any):
        """
        Initialize the CLI.

        Args:
            config: Configuration dictionary
            services: Session services (a fresh in-memory session when None)
        """
        super().__init__(**kwargs)
        self.config = config
        self.services = services or build_services(config, SessionState())
        self.env = config.get("environment", "development")

    # Plumbing

    def emptyline(self):
        """Do nothing on empty line."""
        pass

    def onecmd(self, line):
        with TraceContext(label=f"cli {line.split(' ', 1)[0]}" if line.strip() else "cli"):
            return super().onecmd(line)

    def postcmd(self, stop, line):
        self._show_notifications()
        return stop

    def _show_notifications(self) -> None:
        for n in self.services.notifications.drain():
            text = f"{TOAST_PREFIX.get(n.type.value, '')} {n.title}"
            if n.description:
                text += f": {n.description}"
            print(text, file=self.stdout)

    def _print(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def _parse(self, parser: argparse.ArgumentParser, arg: str) -> Optional[argparse.Namespace]:
        try:
            return parser.parse_args(shlex.split(arg))
        except SystemExit:
            # argparse already printed the usage message
            return None

    def _require_login(self) -> bool:
        if not self.services.auth_store.is_authenticated:
            self._print("Not logged in. Use: login <username>")
            return False
        return True

    def _filters(self, parsed: argparse.Namespace) -> ListFilters:
        query = {k: v for k, v in vars(parsed).items() if k not in ("action", "id") and v is not None}
        if "subsidiary" not in query and self.services.ui_store.subsidiary_filter():
            query["subsidiary"] = self.services.ui_store.subsidiary_filter()
        return ListFilters.from_query(query)

    def _footer(self, total: int, filters: ListFilters) -> None:
        self._print(f"Page {filters.page} of {page_count(total, filters.page_size)} ({total} total)")

    def _run(self, action, *args: Any) -> Any:
        """Call a service; API failures print their message instead of ending the loop."""
        try:
            return action(*args)
        except ApiError as e:
            self._print(f"Error: {e.message}")
        return None

    # Session

    def do_login(self, arg):
        """Log in: login <username> [--password PASSWORD]"""
        parser = argparse.ArgumentParser(prog="login")
        parser.add_argument("username")
        parser.add_argument("--password")
        parsed = self._parse(parser, arg)
        if parsed is None:
            return
        password = parsed.password or getpass.getpass("Password: ")
        try:
            user, _ = self.services.auth.login(parsed.username, password)
        except ApiError as e:
            message = e.message if e.status_code and e.status_code < 500 else "Login failed"
            self.services.notifications.error(message)
            return
        self.services.notifications.success("Login successful")
        self._print(f"Logged in as {user.username}")

    def do_logout(self, arg):
        """Log out and clear cached data."""
        self.services.auth.logout()
        self.services.notifications.info("Logged out successfully")

    def do_subsidiary(self, arg):
        """Select the subsidiary used by list commands: subsidiary <id|all>"""
        value = arg.strip() or ALL_SUBSIDIARIES
        self.services.ui_store.set_current_subsidiary(value)
        self._print(f"Subsidiary: {value}")

    def do_refresh(self, arg):
        """Drop cached data so the next command refetches it."""
        self.services.refresh()
        self.services.notifications.success("Data refreshed")

    # Pages

    def do_dashboard(self, arg):
        """Show dashboard statistics and recent invoices."""
        if not self._require_login():
            return
        stats = self._run(self.services.dashboard.stats)
        if stats is None:
            return
        self._print(f"Wallet balance:      {format_currency(stats.wallet_balance)}")
        self._print(f"Pending invoices:    {stats.pending_invoices} ({format_currency(stats.pending_invoices_total)})")
        self._print(f"Payouts this month:  {stats.payouts_this_month} ({format_currency(stats.payouts_this_month_total)})")
        self._print(f"Active employees:    {stats.active_employees}")
        self._print(f"Subsidiaries:        {stats.subsidiaries_count}")
        page = self._run(self.services.invoices.list,
                         {"pageSize": 5, "subsidiary": self.services.ui_store.subsidiary_filter()})
        if page is not None:
            self._print()
            self._print(_table(
                ["Invoice #", "Client", "Amount", "Status", "Due"],
                [[i.invoice_number, i.client_name, format_currency(i.total_cents), i.status.value,
                  format_date(i.due_date)] for i in page.data],
            ))

    def do_employees(self, arg):
        """List employees: employees [--search S] [--subsidiary ID] [--status S] [--page N]"""
        parsed = self._parse(_list_parser("employees", ["list"], "search", "subsidiary", "status"), arg)
        if parsed is None or not self._require_login():
            return
        filters = self._filters(parsed)
        page = self._run(self.services.employees.list, filters.to_params())
        if page is None:
            return
        self._print(_table(
            ["ID", "Name", "Email", "Subsidiary", "Net Salary", "Status"],
            [[e.id, e.full_name, e.email, e.subsidiary.name if e.subsidiary else "-",
              format_currency(e.net_salary_cents), e.employment_status.value] for e in page.data],
        ))
        self._footer(page.total, filters)

    def do_invoices(self, arg):
        """Invoices: invoices [list|show|send] [ID] [--search S] [--status S] [--date-from D --date-to D]"""
        parser = _list_parser("invoices", ["list", "show", "send"], "search", "subsidiary", "status")
        parser.add_argument("--date-from", dest="date_from")
        parser.add_argument("--date-to", dest="date_to")
        parsed = self._parse(parser, arg)
        if parsed is None or not self._require_login():
            return

        if parsed.action == "list":
            filters = self._filters(parsed)
            page = self._run(self.services.invoices.list, filters.to_params())
            if page is None:
                return
            self._print(_table(
                ["ID", "Invoice #", "Client", "Amount", "Balance", "Status", "Due"],
                [[i.id, i.invoice_number, i.client_name, format_currency(i.total_cents),
                  format_currency(i.balance_due_cents), i.status.value, format_date(i.due_date)]
                 for i in page.data],
            ))
            self._footer(page.total, filters)
            return

        if not parsed.id:
            self._print(f"Invoice ID is required for {parsed.action}.")
            return

        if parsed.action == "show":
            invoice = self._run(self.services.invoices.get, parsed.id)
            if invoice is None:
                return
            self._print(f"Invoice {invoice.invoice_number} ({invoice.status.value})")
            self._print(f"Client: {invoice.client_name} <{invoice.client_email}>")
            self._print(f"Issued {format_date(invoice.issue_date)}, due {format_date(invoice.due_date)}, "
                        f"{invoice.payment_terms}")
            self._print(_table(
                ["Description", "Qty", "Unit Price", "Amount"],
                [[li.description, f"{li.quantity:g}", format_currency(li.unit_price_cents),
                  format_currency(li.amount_cents)] for li in invoice.line_items],
            ))
            self._print(f"Total: {format_currency(invoice.total_cents)}")
        elif parsed.action == "send":
            try:
                self.services.invoices.send(parsed.id)
            except ApiError:
                self.services.notifications.error("Failed to send invoice")
            else:
                self.services.notifications.success("Invoice sent successfully")

    def do_expenses(self, arg):
        """Expenses: expenses [list|approve|reject|reimburse] [ID] [--category C] [--status S]"""
        parser = _list_parser("expenses", ["list", "approve", "reject", "reimburse"],
                              "search", "category", "status")
        parsed = self._parse(parser, arg)
        if parsed is None or not self._require_login():
            return

        if parsed.action == "list":
            filters = self._filters(parsed)
            page = self._run(self.services.expenses.list, filters.to_params())
            if page is None:
                return
            self._print(_table(
                ["ID", "Date", "Employee", "Category", "Amount", "Status"],
                [[x.id, format_date(x.expense_date), x.employee_name or "-", x.category,
                  format_currency(x.amount_cents), x.status.value] for x in page.data],
            ))
            self._footer(page.total, filters)
            return

        if not parsed.id:
            self._print(f"Expense ID is required for {parsed.action}.")
            return

        action = getattr(self.services.expenses, parsed.action)
        titles = {
            "approve": ("Expense Approved", "approved", "Approval Failed"),
            "reject": ("Expense Rejected", "rejected", "Rejection Failed"),
            "reimburse": ("Expense Reimbursed", "reimbursed", "Reimbursement Failed"),
        }
        done_title, done_verb, failed_title = titles[parsed.action]
        try:
            expense = self.services.expenses.get(parsed.id)
            action(parsed.id)
        except ApiError:
            self.services.notifications.error(
                failed_title, f"Failed to {parsed.action} expense. Please try again."
            )
        else:
            self.services.notifications.success(
                done_title, f"Expense for {expense.employee_name} has been {done_verb}"
            )

    def do_payouts(self, arg):
        """Payouts: payouts [list|retry] [ID] [--status S] [--subsidiary ID]"""
        parsed = self._parse(_list_parser("payouts", ["list", "retry"], "search", "subsidiary", "status"), arg)
        if parsed is None or not self._require_login():
            return

        if parsed.action == "list":
            filters = self._filters(parsed)
            page = self._run(self.services.payouts.list, filters.to_params())
            if page is None:
                return
            self._print(_table(
                ["ID", "Date", "Employee", "Type", "Amount", "Status"],
                [[p.id, format_date(p.payout_date), p.employee_name or "-", p.payout_type.value,
                  format_currency(p.amount_cents), p.status.value] for p in page.data],
            ))
            self._footer(page.total, filters)
            return

        if not parsed.id:
            self._print("Payout ID is required for retry.")
            return
        try:
            self.services.payouts.retry(parsed.id)
        except ApiError:
            self.services.notifications.error("Retry Failed", "Failed to retry payout. Please try again.")
        else:
            self.services.notifications.success("Payout Retried", "The payout has been queued for retry")

    def do_subsidiaries(self, arg):
        """Subsidiaries: subsidiaries [list|toggle] [ID] [--search S]"""
        parsed = self._parse(_list_parser("subsidiaries", ["list", "toggle"], "search"), arg)
        if parsed is None or not self._require_login():
            return

        if parsed.action == "list":
            filters = ListFilters.from_query({k: v for k, v in vars(parsed).items()
                                              if k not in ("action", "id") and v is not None})
            page = self._run(self.services.subsidiaries.list, filters.to_params())
            if page is None:
                return
            self._print(_table(
                ["ID", "Name", "Code", "Template", "Active"],
                [[s.id, s.name, s.code, s.invoice_template_id, "yes" if s.is_active else "no"]
                 for s in page.data],
            ))
            self._footer(page.total, filters)
            return

        if not parsed.id:
            self._print("Subsidiary ID is required for toggle.")
            return
        subsidiary = self._run(self.services.subsidiaries.get, parsed.id)
        if subsidiary is None:
            return
        verb = "deactivate" if subsidiary.is_active else "activate"
        try:
            self.services.subsidiaries.toggle_status(parsed.id, not subsidiary.is_active)
        except ApiError:
            self.services.notifications.error("Error", f"Failed to {verb} subsidiary. Please try again.")
        else:
            self.services.notifications.success("Success", f"{subsidiary.name} has been {verb}d")

    # General

    def do_status(self, arg):
        """Show session status."""
        self._print(f"FinManager Status ({self.env} environment)")
        self._print("-" * 50)
        self._print(f"API: {self.services.client.base_url}")
        auth_store = self.services.auth_store
        self._print(f"User: {auth_store.username if auth_store.is_authenticated else '(not logged in)'}")
        self._print(f"Subsidiary: {self.services.ui_store.current_subsidiary or ALL_SUBSIDIARIES}")
        self._print(f"Cached queries: {len(self.services.cache)}")
        self._print("-" * 50)

    def do_exit(self, arg):
        """Exit the FinManager CLI."""
        self._print("Goodbye!")
        return True

    def do_quit(self, arg):
        """Exit the FinManager CLI."""
        return self.do_exit(arg)


def run_cli(config: Dict[str, Any]) -> None:
    """
    Run the FinManager CLI.

    Args:
        config: Configuration dictionary
    """
    cli = FinManagerCLI(config=config)
    try:
        cli.cmdloop()
    finally:
        cli.services.client.close()
