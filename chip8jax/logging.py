"""Console logging utilities for chip8jax hosts.

Provides a small leveled console logger and an interpreter-specific logger
used by `Chip8Runner` to report program loads, configuration, frame
statistics and execution errors.
"""

import time
import sys
from typing import Any, Dict, Optional

from chip8jax.errors import Chip8Error


class ConsoleLogger:
    """Flexible console logger with levels, colors and timestamps."""

    def __init__(
        self,
        name: str = "chip8jax",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


class InterpreterLogger(ConsoleLogger):
    """Logger for interpreter lifecycle events."""

    def __init__(self, name: str = "Chip8", **kwargs):
        super().__init__(name, **kwargs)
        self.frames_logged = 0

    def log_configuration(self, config: Dict[str, Any]):
        """Log the host configuration."""
        self.debug("Configuration:")
        for key, value in config.items():
            self.debug(f"  {key}: {value}")

    def log_program_loaded(self, size: int, source: Optional[str] = None):
        """Log a program image being loaded."""
        origin = f" from {source}" if source else ""
        self.info(f"Loaded {size} byte program{origin}")

    def log_reset(self):
        self.info("Interpreter reset")

    def log_frame(self, frame: int, instructions: int, pc: int, sound: bool):
        """Log per-frame statistics."""
        self.frames_logged += 1
        self.debug(
            f"Frame {frame:6d} | instructions={instructions} | pc=0x{pc:03X} | "
            f"sound={'on' if sound else 'off'}"
        )

    def log_run_summary(self, frames: int, instructions: int, elapsed: float):
        """Log a summary after a batch of frames."""
        rate = instructions / elapsed if elapsed > 0 else 0.0
        self.info(
            f"Ran {frames} frames ({instructions} instructions) in {elapsed:.2f}s "
            f"({rate:.0f} instructions/s)"
        )

    def log_execution_error(self, error: Chip8Error):
        """Log an interpreter failure before it reaches the host."""
        self.error(f"{type(error).__name__}: {error}")
