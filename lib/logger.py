"""Shared logging configuration for command line tools."""

import logging
import sys
from pathlib import Path
from typing import Optional


class SystemLogger:
    """Centralized logger configuration for all modules of a tool."""

    _initialized = False
    _shared_log_file: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        console_output: bool = True,
        console_level: Optional[int] = None,
        logging_dir: Optional[str] = None,
        format_string: Optional[str] = None,
    ) -> None:
        """Set up logging configuration for the entire application.

        Calling it again replaces the handlers installed by a previous call,
        so a tool can reconfigure once its command line has been parsed.

        Args:
            level: Root logging level (default: INFO)
            console_output: Whether to output to console (default: True)
            console_level: Console handler level (default: same as level)
            logging_dir: Directory for the shared <script>.log file; no file
                output when empty
            format_string: Custom format string (optional)
        """
        if logging_dir:
            logs_dir = Path(logging_dir).expanduser()
            logs_dir.mkdir(parents=True, exist_ok=True)
            cls._shared_log_file = logs_dir / f"{cls._get_main_script_name()}.log"
        else:
            cls._shared_log_file = None

        if format_string is None:
            format_string = "%(levelname)s:%(module)s.%(lineno)d:%(asctime)s: %(message)s"

        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        root_logger.setLevel(level)

        formatter = logging.Formatter(format_string)

        if console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level if console_level is None else console_level)
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

        if cls._shared_log_file is not None:
            file_handler = logging.FileHandler(cls._shared_log_file)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def _get_main_script_name(cls) -> str:
        """Get the name of the main script being executed."""
        try:
            import __main__

            if hasattr(__main__, "__file__") and __main__.__file__:
                return Path(__main__.__file__).stem
        except (ImportError, AttributeError):
            pass

        if sys.argv and sys.argv[0]:
            return Path(sys.argv[0]).stem

        return "application"

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger instance, setting up defaults on first use.

        Args:
            name: Module name (typically __name__)

        Returns:
            Configured logger instance
        """
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(name)

    @classmethod
    def reset(cls) -> None:
        """Reset logger configuration (mainly for testing)."""
        cls._initialized = False
        cls._shared_log_file = None

        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        root_logger.setLevel(logging.WARNING)
