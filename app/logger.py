import logging
from logging.handlers import RotatingFileHandler

from flask.logging import default_handler

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def setup_logging(app):
    """Attach handlers to ``app.logger`` according to the app config.

    Always logs to stderr; also writes to a rotating file when ``LOG_FILE``
    is set.
    """
    formatter = logging.Formatter(LOG_FORMAT)
    app.logger.removeHandler(default_handler)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # avoid adding multiple handlers if called multiple times
    if not any(getattr(h, '_tabi_handler', False) for h in app.logger.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        stream._tabi_handler = True
        app.logger.addHandler(stream)

        log_path = app.config.get('LOG_FILE')
        if log_path:
            handler = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=5, encoding='utf-8')
            handler.setFormatter(formatter)
            handler._tabi_handler = True
            app.logger.addHandler(handler)

    return app.logger
