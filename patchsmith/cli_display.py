import logging
import os
from datetime import datetime

from .diff_display import format_colored_diff


def setup_logger(log_dir: str = ".patchsmith/logs",
                 level: int = logging.DEBUG) -> logging.Logger:
    """Attach a file handler to the ``patchsmith`` logger.

    All verbose output goes to a timestamped file under *log_dir*; the
    terminal only shows tool results.
    """
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"patchsmith_{timestamp}.log")

    logger = logging.getLogger("patchsmith")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()

    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%H:%M:%S"
    ))
    logger.addHandler(fh)

    return logger


def print_tool_result(result, color: bool = True) -> None:
    """Print a ToolResult to the terminal, colouring any diff it contains."""
    if result.success:
        text = result.output
        print(format_colored_diff(text) if color else text)
    else:
        message = f"Error: {result.error}"
        print(f"\033[31m{message}\033[0m" if color else message)


def print_stats(stats: dict, color: bool = True) -> None:
    """Print the rolling statistics returned by ``read_patch_stats``."""
    bold = "\033[1m" if color else ""
    reset = "\033[0m" if color else ""
    print(f"{bold}Patch statistics{reset} (last {stats['total_edits']} operations)")
    print(f"  Success rate : {stats['success_rate']:.1f}%")
    print(f"  Partial rate : {stats['partial_rate']:.1f}%")
    print(f"  Fuzzy rate   : {stats['fuzzy_rate']:.1f}%")
    print(f"  Hunks        : {stats['hunks_applied']} applied, "
          f"{stats['hunks_failed']} failed")
    for tool, count in stats["tools"].items():
        print(f"  {tool:<14}: {count}")
