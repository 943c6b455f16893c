# quiz_bot.py :: Champion Quiz bot with QuizMind + Discord + LLM oracle hints
import logging

from dotenv import dotenv_values

from catalog import DEFAULT_CATALOG_FILE, load_catalog
from quiz_engine import QuizEngine
from quizmind.discord import DiscordBot
from quizmind.pipeline import ModelProvider

logger = logging.getLogger(__name__)

DEFAULTS = {
    "SERVER_TYPE": "ollama",
    "SERVER_URL": "http://localhost:11434",
    "CATALOG_FILE": str(DEFAULT_CATALOG_FILE),
    "TICK_SECONDS": "1",
    "PROMISCUOUS": "true",
    "DEBUG": "false",
}


def _flag(value) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_settings(path=".env") -> dict:
    """Read the .env file on top of DEFAULTS; empty values keep the default."""
    cfg = dict(DEFAULTS)
    cfg.update({k: v for k, v in dotenv_values(path).items() if v})
    cfg["TICK_SECONDS"] = float(cfg["TICK_SECONDS"])
    cfg["PROMISCUOUS"] = _flag(cfg["PROMISCUOUS"])
    cfg["DEBUG"] = _flag(cfg["DEBUG"])
    return cfg


def build_engine(cfg: dict) -> QuizEngine:
    provider = ModelProvider(
        type     = cfg.get("SERVER_TYPE"),
        base_url = cfg.get("SERVER_URL"),
        api_key  = cfg.get("SERVER_API_KEY"),
        model    = cfg.get("SERVER_MODEL"),
    )
    catalog = load_catalog(cfg["CATALOG_FILE"])
    return QuizEngine(
        id="champion-quiz",
        catalog=catalog,
        model_provider=provider,
        tick_seconds=cfg["TICK_SECONDS"],
    )


if __name__ == "__main__":
    cfg = load_settings(".env")
    logging.basicConfig(
        level=logging.DEBUG if cfg["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("→ %s %s %s", cfg.get("SERVER_TYPE"), cfg.get("SERVER_URL"), cfg.get("SERVER_MODEL"))

    engine = build_engine(cfg)
    bot = DiscordBot(
        token=cfg.get("DISCORD_TOKEN"),
        engine=engine,
        promiscuous=cfg["PROMISCUOUS"],
        debug=cfg["DEBUG"],
    )
    bot.run()
