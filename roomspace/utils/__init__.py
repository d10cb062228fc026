from roomspace.utils.logging import get_logger, setup_logging, log_with_context
from roomspace.utils.api_response import ok, created
from roomspace.utils.file_classifier import FileClassifier


__all__= [
    "get_logger",
    "setup_logging",
    "log_with_context",
    "ok",
    "created",
    "FileClassifier",
]
