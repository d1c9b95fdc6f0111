# This project was developed with assistance from AI tools.
"""Shared data scope filtering for service queries.

Centralizes the DataScope -> SQL WHERE logic so that each resource service
applies the same rules. The join_to_application parameter handles child
entity queries (Documents) that reach LoanApplication through a relationship.
"""

from db import LoanApplication
from sqlalchemy import false

from ..schemas.auth import DataScope, UserContext


def apply_data_scope(stmt, scope: DataScope, user: UserContext, *, join_to_application=None):
    """Apply data scope filtering to a SQLAlchemy query.

    Args:
        stmt: A SQLAlchemy select statement.
        scope: The caller's DataScope.
        user: The caller's UserContext.
        join_to_application: ORM relationship attribute to join to reach
            LoanApplication (e.g., ``Document.application``). Pass ``None``
            when querying LoanApplication directly.

    Returns:
        The filtered statement.
    """
    if scope.no_access:
        return stmt.where(false())
    if scope.originated_by:
        if join_to_application is not None:
            stmt = stmt.join(join_to_application)
        stmt = stmt.where(LoanApplication.relation_manager_id == scope.originated_by)
    return stmt
