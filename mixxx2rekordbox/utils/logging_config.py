"""
Logging Configuration for Mixxx to Rekordbox

This module provides centralized logging configuration for the exporter.
Library code only asks for named loggers; handlers are installed by the
command line entry point through setup_logging().
"""

import os
import sys
import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any, Optional

LOGGER_NAMESPACE = 'mixxx2rekordbox'


class ColoredFormatter(logging.Formatter):
    """Colored console formatter for better readability"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class ExportLogger:
    """Centralized logger configuration for Mixxx to Rekordbox"""

    def __init__(self, log_dir: Optional[str] = None, console_level: str = "INFO",
                 file_level: str = "DEBUG", enable_console: bool = True):
        """
        Initialize the logging system

        Args:
            log_dir: Directory for the rotating log file (no file logging if None)
            console_level: Console logging level
            file_level: File logging level
            enable_console: Whether to enable console logging
        """
        self.log_dir = os.path.expanduser(log_dir) if log_dir else None
        self.console_level = getattr(logging, console_level.upper())
        self.file_level = getattr(logging, file_level.upper())
        self.enable_console = enable_console
        self.log_file: Optional[str] = None

        if self.log_dir:
            Path(self.log_dir).mkdir(parents=True, exist_ok=True)

        self._setup_package_logger()
        self._setup_component_loggers()

    def _setup_package_logger(self):
        """Attach handlers to the package logger"""
        package_logger = logging.getLogger(LOGGER_NAMESPACE)
        package_logger.setLevel(logging.DEBUG)

        # Clear handlers from a previous setup
        for handler in list(package_logger.handlers):
            package_logger.removeHandler(handler)
            handler.close()

        if self.enable_console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(self.console_level)
            console_handler.setFormatter(ColoredFormatter(
                '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                datefmt='%H:%M:%S'
            ))
            package_logger.addHandler(console_handler)

        if self.log_dir:
            self.log_file = os.path.join(self.log_dir, 'mixxx2rekordbox.log')
            file_handler = logging.handlers.RotatingFileHandler(
                self.log_file, maxBytes=10*1024*1024, backupCount=5, encoding='utf-8'
            )
            file_handler.setLevel(self.file_level)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            package_logger.addHandler(file_handler)

        if not package_logger.handlers:
            package_logger.addHandler(logging.NullHandler())

    def _setup_component_loggers(self):
        """Setup loggers for specific components"""
        components = {
            f'{LOGGER_NAMESPACE}.engine': logging.INFO,
            f'{LOGGER_NAMESPACE}.database': logging.INFO,
            f'{LOGGER_NAMESPACE}.extractor': logging.DEBUG,
            f'{LOGGER_NAMESPACE}.beatgrid': logging.DEBUG,
            f'{LOGGER_NAMESPACE}.xml_generator': logging.DEBUG,
            f'{LOGGER_NAMESPACE}.cli': logging.INFO,
        }

        for component, level in components.items():
            logging.getLogger(component).setLevel(level)

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger for a specific component"""
        return get_logger(name)

    def log_export_summary(self, summary: Dict[str, Any]):
        """Log the counters of a finished export"""
        logger = self.get_logger('engine')
        logger.info("Export Summary:")
        logger.info(f"  Tracks: {summary.get('tracks_exported', 0)}")
        logger.info(f"  Position marks: {summary.get('position_marks_exported', 0)}")
        logger.info(f"  Playlists/crates: {summary.get('playlists_exported', 0)}")
        logger.info(f"  Time: {summary.get('processing_time', 0):.3f}s")

    def log_error(self, component: str, error: Exception, context: Dict[str, Any] = None):
        """Log errors with context"""
        logger = self.get_logger(component)

        logger.error(f"Error in {component}: {type(error).__name__}: {str(error)}")
        if context:
            logger.error(f"  Context: {context}")

        # Log stack trace at debug level
        logger.debug("Stack trace:", exc_info=True)


# Global logger instance
_logger_instance = None

def setup_logging(log_dir: Optional[str] = None, console_level: str = "INFO",
                  file_level: str = "DEBUG", enable_console: bool = True) -> ExportLogger:
    """Setup global logging configuration"""
    global _logger_instance
    _logger_instance = ExportLogger(log_dir, console_level, file_level, enable_console)
    return _logger_instance

def get_logger(name: str = 'main') -> logging.Logger:
    """Get a component logger"""
    return logging.getLogger(f'{LOGGER_NAMESPACE}.{name}')
