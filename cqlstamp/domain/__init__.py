"""
Domain package for the timestamp harness.

Exports the record and read-back models shared by the writer, verifier and
scenarios. Keep this package focused on data definitions.
"""

from cqlstamp.domain.models import (
    TimestampedRecord,
    TimestampMode,
    VerificationReport,
    WriteTimeRow,
    current_timestamp_micros,
    make_record_pair,
)

__all__ = [
    "TimestampedRecord",
    "TimestampMode",
    "VerificationReport",
    "WriteTimeRow",
    "current_timestamp_micros",
    "make_record_pair",
]
