import os
from pathlib import Path
from dotenv import load_dotenv

# Project root: holds .env and the optional configs/ directory
BASE_DIR = Path(__file__).resolve().parents[2]


def load_env_files(config_dir: Path = BASE_DIR / 'configs'):
    """
    Load .env, then configs/<FLASK_ENV>.env, then the remaining configs/*.env.

    Values already set are never overridden, so the process environment
    beats .env, which beats the environment-specific file.
    """
    load_dotenv(BASE_DIR / '.env')

    if not config_dir.is_dir():
        return

    environment = os.getenv('FLASK_ENV', 'development')
    env_specific = config_dir / f'{environment}.env'
    if env_specific.exists():
        load_dotenv(env_specific)

    per_environment = {'development.env', 'production.env', 'testing.env'}
    for env_file in sorted(config_dir.glob('*.env')):
        if env_file.name not in per_environment:
            load_dotenv(env_file)


# Load environment variables
load_env_files()


class Settings:
    # Flask settings
    SECRET_KEY = os.getenv('SECRET_KEY')
    FLASK_ENV = os.getenv('FLASK_ENV', 'development')
    DEBUG = FLASK_ENV == 'development'
    PORT = int(os.getenv('PORT', 3001))

    # CORS settings
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*').split(',')

    # Session tokens
    JWT_SECRET = os.getenv('JWT_SECRET')
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRES_IN = int(os.getenv('JWT_EXPIRES_IN', 3600))  # seconds

    # Task ids
    TASK_ID_TIMEZONE = os.getenv('TASK_ID_TIMEZONE', 'UTC')
    TASK_ID_MAX_ATTEMPTS = int(os.getenv('TASK_ID_MAX_ATTEMPTS', 999))
    TASKS_COLLECTION = os.getenv('TASKS_COLLECTION', 'tasks')

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    LOG_DIR = os.getenv('LOG_DIR')  # file logging disabled when unset

    # Firebase settings
    DEV_MODE = os.getenv('DEV_MODE', 'false').lower() == 'true'
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH', './serviceAccountKey.json')

    @classmethod
    def as_flask_config(cls) -> dict:
        """Settings as a dict suitable for ``app.config.update``"""
        return {
            name: getattr(cls, name)
            for name in dir(cls)
            if name.isupper()
        }

    @classmethod
    def validate(cls):
        """Validate required settings"""
        required_vars = ['JWT_SECRET']
        if not cls.DEV_MODE:
            required_vars.append('FIREBASE_PROJECT_ID')

        missing_vars = [var for var in required_vars if not getattr(cls, var)]
        if missing_vars:
            raise ValueError(f"Missing required environment variables: {', '.join(missing_vars)}")

        # Validate JWT_SECRET strength
        if len(cls.JWT_SECRET) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters long")

        if cls.TASK_ID_MAX_ATTEMPTS < 1:
            raise ValueError("TASK_ID_MAX_ATTEMPTS must be at least 1")

        return True
