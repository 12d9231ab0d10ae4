"""Domain models for the candidate bulk upload flow.

This package contains the records that travel through the pipeline:
spreadsheet rows become CandidateRecords, the platform answers with an
UploadResult, and problems along the way are kept as ErrorRecords.
"""

from .candidate import CandidateRecord
from .error_record import ErrorRecord
from .upload_result import ResultDetail, UploadResult, UploadResults

__all__ = [
    "CandidateRecord",
    "ErrorRecord",
    "ResultDetail",
    "UploadResult",
    "UploadResults",
]
