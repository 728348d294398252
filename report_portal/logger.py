import sys
from datetime import datetime
from typing import Optional

from loguru import logger as _logger

from report_portal.config import PROJECT_ROOT


_print_level = "INFO"


def define_log_level(
    print_level: str = "INFO",
    logfile_level: Optional[str] = "DEBUG",
    name: Optional[str] = None,
):
    """Adjust the log level to above level"""
    global _print_level
    _print_level = print_level

    _logger.remove()
    _logger.add(sys.stderr, level=print_level)

    if logfile_level:
        current_date = datetime.now()
        formatted_date = current_date.strftime("%Y%m%d%H%M%S")
        log_name = f"{name}_{formatted_date}" if name else formatted_date
        _logger.add(
            PROJECT_ROOT / "logs" / f"{log_name}.log",
            level=logfile_level,
            rotation="10 MB",
            retention=10,
        )
    return _logger


logger = define_log_level(logfile_level=None)
