# /app/__init__.py
import os
import time
import logging
from flask import Flask, g
from dotenv import load_dotenv
from config import ProductionConfig
from services.settings import ChangeLogSettings
from services.change_log.commands import change_log_command
from app.routes import changes_bp


load_dotenv()

logger = logging.getLogger(__name__)


def init_sentry():
    """Initialize Sentry error tracking if SENTRY_DSN is configured."""
    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        return

    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration

        # Determine environment from ENV variable or default to development
        environment = os.getenv("FLASK_ENV") or os.getenv("ENV") or "development"

        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            integrations=[
                FlaskIntegration(),
                LoggingIntegration(
                    level=logging.INFO,       # Capture info and above as breadcrumbs
                    event_level=logging.ERROR  # Send errors and above as events
                ),
            ],
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
            # request headers carry the report API credentials
            send_default_pii=False,
            attach_stacktrace=True,
            debug=os.getenv("SENTRY_DEBUG", "0") == "1",
        )
        logging.info(f"Sentry initialized for environment: {environment}")
    except ImportError:
        logging.warning("sentry-sdk not installed, error tracking disabled")
    except Exception as e:
        logging.error(f"Failed to initialize Sentry: {e}")


def create_app(config_name: str = "", settings: ChangeLogSettings = None):
    # Initialize Sentry before creating app to catch initialization errors
    init_sentry()

    app = Flask(__name__)
    app.config.from_object(ProductionConfig)

    if config_name:
        app.config.from_object(f"config.{config_name}Config")

    # Flask >= 2.3 reads this from the JSON provider rather than the config
    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)

    logging.basicConfig(
        level=logging.DEBUG if app.config.get("DEBUG") else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,  # prevent duplicate handlers in some reload scenarios
    )

    # Read once here; request handlers only ever see this object
    settings = settings or ChangeLogSettings.from_env()
    app.extensions["change_log_settings"] = settings
    logging.debug(f"change log settings: {settings}")

    @app.before_request
    def before_request():
        """Track the start time of each request."""
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        if hasattr(g, "start_time"):
            duration = time.time() - g.start_time
            g.request_duration = f"{duration:.3f} seconds"
            logger.debug(f"request took {g.request_duration}")
        return response

    # Blueprints
    app.register_blueprint(changes_bp)

    # CLI
    app.cli.add_command(change_log_command)  # type: ignore

    return app
