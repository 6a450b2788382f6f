"""
Rent Ledger Application
Application factory, logging setup and health check
"""

from flask import Flask, jsonify
from flask_cors import CORS
import os
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Import configuration
from rent_application.config import Config, config

# Import blueprints
from rent_application.ledger_backend import ledger_bp


CONSOLE_HANDLER_NAME = 'rent_app_console'


def setup_logging(log_dir: Path, log_file_name: str = Config.LOG_FILE_NAME,
                  max_bytes: int = Config.LOG_MAX_BYTES, backup_count: int = Config.LOG_BACKUP_COUNT):
    """Setup application logging"""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / log_file_name

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    log_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Repeated app creation (tests) adds each handler once
    has_file_handler = any(
        isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename) == log_file.resolve()
        for handler in root_logger.handlers
    )
    has_console_handler = any(handler.get_name() == CONSOLE_HANDLER_NAME for handler in root_logger.handlers)

    # File handler with rotation
    if not has_file_handler:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(log_formatter)
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)

    # Console handler
    if not has_console_handler:
        console_handler = logging.StreamHandler()
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setFormatter(log_formatter)
        console_handler.setLevel(logging.INFO)
        root_logger.addHandler(console_handler)

    # Suppress werkzeug request noise below WARNING
    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    return root_logger


def create_app(config_name=None, test_config=None):
    """Application factory pattern"""
    app = Flask(__name__)

    # Load configuration
    config_name = config_name or os.environ.get('FLASK_ENV', 'default')
    app.config.from_object(config.get(config_name, config['default']))
    if test_config:
        app.config.update(test_config)
    app.json.ensure_ascii = app.config.get('JSON_AS_ASCII', False)

    # Setup logging
    logger = setup_logging(
        Path(app.config['LOG_DIR']),
        app.config['LOG_FILE_NAME'],
        app.config['LOG_MAX_BYTES'],
        app.config['LOG_BACKUP_COUNT'],
    )
    logger.info(f"🚀 Initializing Rent Ledger Application ({config_name})...")

    # Initialize CORS
    cors_origins = app.config.get('CORS_ORIGINS', ['*'])
    if isinstance(cors_origins, str):
        cors_origins = cors_origins.split(',')

    CORS(app,
         resources={r"/api/*": {"origins": cors_origins, "methods": ["GET", "POST", "OPTIONS"], "allow_headers": ["Content-Type"]}})

    # Register blueprints
    app.register_blueprint(ledger_bp)
    logger.info("✅ Blueprints registered")

    @app.route('/health')
    def health():
        return jsonify({'success': True, 'status': 'ok'})

    logger.info("✅ Application created successfully")
    return app


if __name__ == '__main__':
    app = create_app()
    logger = logging.getLogger(__name__)

    logger.info("══════════════════════════════════════════════════════════════")
    logger.info("   📒 Rent Ledger Service - Starting Server")
    logger.info("══════════════════════════════════════════════════════════════")
    logger.info(f"📍 API Endpoint: http://{app.config['API_HOST']}:{app.config['API_PORT']}/api/")
    logger.info("   - /api/calculate_ledger - Tenant ledger")
    logger.info("   - /api/ledger_table - Ledger export rows")
    logger.info("   - /api/portfolio_stats - Dashboard figures")
    logger.info(f"📝 Logs: {app.config['LOG_DIR']}/{app.config['LOG_FILE_NAME']}")
    logger.info("══════════════════════════════════════════════════════════════")

    app.run(
        debug=app.config['DEBUG'],
        host=app.config['API_HOST'],
        port=app.config['API_PORT']
    )
