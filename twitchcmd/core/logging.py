import logging

from rich.console import Console
from rich.logging import RichHandler

# Library loggers: (level in debug mode, level otherwise)
LIBRARY_LEVELS: dict[str, tuple[int, int]] = {
    "twitchio": (logging.DEBUG, logging.INFO),
    "twitchio.eventsub": (logging.DEBUG, logging.INFO),
    "twitchio.http": (logging.DEBUG, logging.WARNING),
    "twitchio.websockets": (logging.DEBUG, logging.WARNING),
    "httpx": (logging.INFO, logging.WARNING),
    "uvicorn.access": (logging.WARNING, logging.WARNING),
    "asyncio": (logging.ERROR, logging.ERROR),
}


def setup_logging(level_name: str = "INFO", *, verbose: bool = False) -> None:
    """Route every logger through one RichHandler.

    ``verbose`` forces DEBUG so dispatch steps and the rate counter show up.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)
    if verbose:
        level = logging.DEBUG

    handler = RichHandler(
        console=Console(force_terminal=True, width=120),
        show_path=False,
        markup=True,
        rich_tracebacks=True,
        tracebacks_width=120,
        log_time_format="[%Y-%m-%d %H:%M:%S]",
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s"))

    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)

    debug = level == logging.DEBUG
    for name, (debug_level, normal_level) in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(debug_level if debug else normal_level)

    logging.getLogger("Bot").info(
        f"[bold green]✓[/bold green] Logging at {logging.getLevelName(level)}",
        extra={"markup": True},
    )
