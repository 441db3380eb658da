"""
Domain errors raised by the PR workflow, repository and stock ledger.

Routers translate NotFoundError to 404 and ValidationError to 400.
Persistence errors (e.g. IntegrityError on a duplicate PR number) are not
wrapped and reach the caller unchanged.
"""


class WorkflowError(ValueError):
    """Base class for PR workflow errors"""


class NotFoundError(WorkflowError):
    """A PR, PO or referenced entity does not exist"""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ValidationError(WorkflowError):
    """Input or state does not allow the requested operation"""
