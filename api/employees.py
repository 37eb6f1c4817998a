"""Employees resource."""

from api.base_service import CrudService
from models.entities import Employee


class EmployeeService(CrudService[Employee]):
    path = "/employees"
    list_key = "employees"
    item_key = "employee"
    model = Employee
