from .submission import BulkSubmissionClient

__all__ = ["BulkSubmissionClient"]
