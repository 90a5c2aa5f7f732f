import logging

from app.utils.logger import JsonFormatter, json_handler

# Azure SDK transport logs every HTTP request at INFO
NOISY_LOGGERS = (
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.identity",
)


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    if not any(isinstance(h.formatter, JsonFormatter) for h in root.handlers):
        root.addHandler(json_handler())

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
