from .logger import get_logger, log_stage, setup_logging

__all__ = [
    "get_logger",
    "log_stage",
    "setup_logging",
]
