import os
from dotenv import load_dotenv

# Load environment variables from .env file before the config is read
load_dotenv()

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _default_data_dir():
    # Mounted volume on hosted deployments, local folder otherwise
    return '/data' if os.path.isdir('/data') else BASE_DIR


def _database_uri():
    if os.environ.get('DATABASE_URL'):
        return os.environ['DATABASE_URL']

    if os.environ.get('DB_HOST'):
        db_user = os.environ.get('DB_USER') or 'root'
        db_password = os.environ.get('DB_PASSWORD') or ''
        db_name = os.environ.get('DB_NAME') or 'recipes'
        return f"mysql+pymysql://{db_user}:{db_password}@{os.environ['DB_HOST']}/{db_name}"

    data_dir = os.environ.get('DATA_DIR') or _default_data_dir()
    db_file = os.environ.get('DB_FILE') or 'database.db'
    return f"sqlite:///{os.path.join(data_dir, db_file)}"


class Config:
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS') or '*'
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
