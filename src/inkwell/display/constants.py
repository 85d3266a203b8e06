"""Constants for the Rich display system."""

# Emoji mappings for log levels
EMOJI_MAP = {
    "debug": "🔍",
    "info": "ℹ️",  # noqa: RUF001
    "success": "✓",
    "warning": "⚠️",
    "error": "✗",
    "critical": "🚨",
    "book": "📚",
}

# Rich markup styles for different message types
STYLES = {
    "debug": "dim cyan",
    "info": "blue",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "critical": "bold white on red",
    "book_title": "bold cyan",
}

# Log format
LOG_FORMAT = "%(message)s"
FILE_LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "[%Y-%m-%d %H:%M:%S]"
