import logging
import os
import sys
import traceback

import pendulum

from . import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging() -> None:

    if logging.getLogger().handlers:
        return  # already configured

    level = getattr(logging, config.log_level(), logging.WARNING)
    filename = config.log_file()
    if filename:
        logging.basicConfig(filename=filename, filemode="a", level=level, format=LOG_FORMAT)
    else:
        logging.basicConfig(stream=sys.stderr, level=level, format=LOG_FORMAT)

    sys.excepthook = log_uncaught_exceptions


def log_uncaught_exceptions(exctype, value, tb):
    now = pendulum.now().to_iso8601_string()

    lines = []
    for frame in traceback.extract_tb(tb):
        filename = os.path.basename(frame.filename)
        lines.append(
            f'  File "{filename}", line {frame.lineno}, in {frame.name}'
        )

    trace_summary = "\n".join(reversed(lines)) if lines else "  <no traceback>"
    error_msg = f"{exctype.__name__}: {value}"

    logging.getLogger("lockbox").error(
        "[%s] Uncaught exception: %s\nTraceback (most recent call last):\n%s\n%s\n",
        now, error_msg, trace_summary, error_msg,
    )

    print("\nError! Something went wrong.", file=sys.stderr)
