"""Hunt the Wumpus, with an optional AI companion."""

from .config import API_KEY_ENV, Config
from .logging import configure_logging, get_logger

__all__ = ["main", "Config"]


def main() -> int:
    """Entry point for the console game."""
    from .cli import start
    from .companion import OpenAICompanion

    try:
        config = Config.from_env()
        configure_logging(
            log_level=config.log_level,
            log_file=config.log_file,
            json_logs=config.json_logs,
        )
        logger = get_logger(__name__)

        companion = OpenAICompanion.from_config(config)
        logger.info(
            "application_starting",
            model=config.model,
            save_file=str(config.save_file),
            api_key=config.api_key,
        )
        session = start(companion, save_file=config.save_file)
        try:
            outcome = session.run()
        finally:
            companion.close()
    except (EOFError, KeyboardInterrupt):
        print()
        return 0
    except Exception as exc:
        print(f"Error: {exc}")
        print(f"Make sure you've set the {API_KEY_ENV} environment variable")
        return 1

    logger.info("application_finished", outcome=outcome.value)
    return 0
