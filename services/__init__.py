"""
services - Business-logic layer sitting between API/import engine and DB.
"""

from services.department_service import DepartmentService                      # noqa: F401
from services.employee_service import EmployeeService                          # noqa: F401
from services.sequence_service import SequenceAllocator, SequenceUnavailable   # noqa: F401
