"""
Submission of finished survey responses to the external collector.
"""

from watersurvey.collector.interface import (
    ApplicationError,
    CollectorReceipt,
    ConfigurationError,
    NetworkError,
    SubmissionError,
    SurveyCollector,
)

__all__ = [
    "ApplicationError",
    "CollectorReceipt",
    "ConfigurationError",
    "NetworkError",
    "SubmissionError",
    "SurveyCollector",
]
