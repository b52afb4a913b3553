"""
Application logging.

Console output always; when a log directory is configured, errors also go to
``<log_dir>/<start time>/error.log`` and the whole run to
``<log_dir>/latest.log`` (truncated at every start).
"""
import logging
import os
from datetime import datetime

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str = 'INFO', log_dir: str = None, started_at: datetime = None) -> logging.Logger:
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Reconfiguring (e.g. one app per test) must not stack handlers
    for handler in list(root.handlers):
        if getattr(handler, '_taskapi_handler', False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler()]

    if log_dir:
        started_at = started_at or datetime.now()
        run_dir = os.path.join(log_dir, started_at.strftime('%Y-%m-%d'), started_at.strftime('%H-%M'))
        os.makedirs(run_dir, exist_ok=True)

        error_handler = logging.FileHandler(os.path.join(run_dir, 'error.log'))
        error_handler.setLevel(logging.ERROR)
        handlers.append(error_handler)
        handlers.append(logging.FileHandler(os.path.join(log_dir, 'latest.log'), mode='w'))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler._taskapi_handler = True
        root.addHandler(handler)

    return root
