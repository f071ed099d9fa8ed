import logging
import sys
from pythonjsonlogger import jsonlogger
from .config import settings

def setup_logger(name: str = "siterelay", level: str = "INFO") -> logging.Logger:
    """
    Configure JSON logging on stdout.

    Job context (job_id, row_id, step, ...) is passed through `extra=` and
    ends up as top-level keys of each log line.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())
    
    if logger.handlers:
        return logger
    
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(jsonlogger.JsonFormatter(
        fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        rename_fields={"levelname": "level"},
    ))
    logger.addHandler(handler)
    logger.propagate = False
    
    return logger

logger = setup_logger(level=settings.LOG_LEVEL)
