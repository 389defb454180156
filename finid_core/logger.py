"""
finid_core.logger
-----------------
Structured JSON-line logging for FinID components.

Registry loggers are wrapped in RegistryLogAdapter, which stamps every
record with the registry namespace and the block height at the time of
the call; JsonFormatter emits those as their own fields.
"""

import logging, json, sys, time, os

CONTEXT_FIELDS = ("registry", "height")


class JsonFormatter(logging.Formatter):
    converter = time.gmtime  # UTC timestamps

    def __init__(self):
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%SZ")

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


class RegistryLogAdapter(logging.LoggerAdapter):
    def __init__(self, logger, registry: str, clock):
        super().__init__(logger, {"registry": registry})
        self.clock = clock

    def process(self, msg, kwargs):
        kwargs["extra"] = dict(kwargs.get("extra") or {},
                               registry=self.extra["registry"],
                               height=self.clock.current_height())
        return msg, kwargs


def get_logger(name="finid", level=None, to_file=None):
    """Unified structured logger for all FinID components."""
    logger = logging.getLogger(name)
    logger.setLevel(level or os.getenv("FINID_LOG_LEVEL", "INFO").upper())

    if not logger.handlers:
        formatter = JsonFormatter()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def registry_logger(registry: str, clock) -> RegistryLogAdapter:
    return RegistryLogAdapter(get_logger(f"FinID.{registry.capitalize()}"), registry, clock)
