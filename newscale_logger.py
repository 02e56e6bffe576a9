"""
Logging setup for scripts that build plots with several scales per aesthetic
"""
import logging
from logging.config import dictConfig
from typing import Optional, Union


def newscale_logger(filename: Optional[str] = None,
                    level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Configure the root logger with a stream handler and, optionally, a file handler

    Args:
        filename: Log file. No file handler when None
        level: Root logging level

    Returns:
        The root logger
    """
    logger_format = '|'.join([
        '%(asctime)s',
        '%(levelname)s',
        '%(pathname)s',
        '%(module)s',
        'line %(lineno)d',
        '%(message)s'])

    handlers = {
        'stream_handler': {
            'class': 'logging.StreamHandler',
            'formatter': 'formatter1',
            'level': logging.NOTSET
        }
    }
    if filename is not None:
        handlers['file_handler'] = {
            'class': 'logging.FileHandler',
            'filename': filename,
            'formatter': 'formatter1',
            'level': logging.NOTSET
        }

    logging_config = dict(
        version = 1,
        disable_existing_loggers = False,
        formatters = {
            'formatter1': {
                'format': logger_format,
                'datefmt': '%F %X'
            }
        },
        handlers = handlers,
        root = {
            'handlers': list(handlers),
            'level': level,
        },
    )
    dictConfig(logging_config)

    return logging.getLogger()


def logger_from_config(conf: dict) -> logging.Logger:
    """Configure logging from the 'logging' section of a newscale configuration"""
    section = conf.get('logging') or {}
    return newscale_logger(section.get('filename'), section.get('level', logging.INFO))
