import logging
import os

import uvicorn

from tourney.settings import configure_logging, load_settings

logger = logging.getLogger(__name__)
APP_MODULE = "tourney.main:app"
DEFAULT_PORT = 8000


def _port_from_env() -> int:
    for key in ("APP_PORT", "PORT"):
        value = os.getenv(key)
        if value:
            try:
                return int(value)
            except ValueError:
                logger.warning("Ignoring %s=%s (not an integer)", key, value)
    return DEFAULT_PORT


def _ssl_kwargs() -> dict[str, str]:
    """uvicorn TLS options from SSL_* variables; empty means plain HTTP."""
    cert = os.getenv("SSL_CERT_FILE")
    key = os.getenv("SSL_KEY_FILE")
    if not cert and not key:
        return {}
    if not cert or not key:
        logger.warning(
            "SSL_CERT_FILE and SSL_KEY_FILE must both be set; serving the leaderboard over HTTP."
        )
        return {}

    options = {"ssl_certfile": cert, "ssl_keyfile": key}
    for env_key, option in (
        ("SSL_CA_FILE", "ssl_ca_certs"),
        ("SSL_KEY_PASSWORD", "ssl_keyfile_password"),
    ):
        value = os.getenv(env_key)
        if value:
            options[option] = value
    return options


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    host = os.getenv("APP_HOST", "0.0.0.0")
    port = _port_from_env()
    ssl_options = _ssl_kwargs()
    if settings.uses_memory_store:
        logger.info("No DATABASE_URL configured; leaderboard will use demo data.")
    logger.info(
        "Serving leaderboard on %s://%s:%s", "https" if ssl_options else "http", host, port
    )
    uvicorn.run(
        APP_MODULE,
        host=host,
        port=port,
        log_level=os.getenv("UVICORN_LOG_LEVEL", settings.log_level.lower()),
        **ssl_options,
    )


if __name__ == "__main__":
    main()
