import logging


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


audit_logger = logging.getLogger("audit")
