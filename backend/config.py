import os
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse
from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = 'postgresql://localhost:5432/transactions'
DEFAULT_SEED_SOURCE_URL = 'https://s3.amazonaws.com/roxiler.com/product_transaction.json'


def get_database_url():
    """
    Get and normalize DATABASE_URL.

    PostgreSQL is the deployment target. SQLite URLs are accepted for local
    runs and the test suite.

    For cloud PostgreSQL, automatically adds sslmode=require if missing.
    """
    database_url = os.getenv('DATABASE_URL') or DEFAULT_DATABASE_URL

    # Handle Render's postgres:// format (SQLAlchemy requires postgresql://)
    if database_url.startswith('postgres://'):
        database_url = database_url.replace('postgres://', 'postgresql://', 1)

    if not is_postgres_url(database_url):
        return database_url

    parsed = urlparse(database_url)
    is_localhost = parsed.hostname in ('localhost', '127.0.0.1', None)

    if not is_localhost:
        query_params = parse_qs(parsed.query)
        if 'sslmode' not in query_params:
            query_params['sslmode'] = ['require']
            new_query = urlencode(query_params, doseq=True)
            database_url = urlunparse((
                parsed.scheme, parsed.netloc, parsed.path,
                parsed.params, new_query, parsed.fragment
            ))

    return database_url


def is_postgres_url(database_url):
    return database_url.startswith(('postgresql://', 'postgresql+psycopg2://'))


def engine_options_for(database_url):
    """
    Engine options for the given URL.

    Pool sizing and timeouts only apply to PostgreSQL; SQLite gets the
    SQLAlchemy defaults.
    """
    if not is_postgres_url(database_url):
        return {}

    statement_timeout_ms = int(os.getenv('STATEMENT_TIMEOUT_MS', '30000'))
    return {
        'pool_pre_ping': True,      # Verify connection is alive before using
        'pool_recycle': 300,        # Recycle connections every 5 minutes
        'pool_timeout': 30,         # Wait up to 30s for a connection from pool
        'pool_size': 5,
        'max_overflow': 10,
        'connect_args': {
            'connect_timeout': 10,
            'options': f'-c statement_timeout={statement_timeout_ms}',
        }
    }


def _csv(value):
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    DEBUG = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    CORS_ORIGINS = _csv(os.getenv('CORS_ORIGINS', '*'))

    SQLALCHEMY_DATABASE_URI = get_database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = engine_options_for(SQLALCHEMY_DATABASE_URI)

    # Month selectors without a year resolve against this year
    DEFAULT_SALES_YEAR = int(os.getenv('SALES_YEAR', '2022'))

    # Seed source (outbound fetch is bounded and retried on transient errors)
    SEED_SOURCE_URL = os.getenv('SEED_SOURCE_URL', DEFAULT_SEED_SOURCE_URL)
    SEED_TIMEOUT_SECONDS = float(os.getenv('SEED_TIMEOUT_SECONDS', '30'))
    SEED_MAX_RETRIES = int(os.getenv('SEED_MAX_RETRIES', '3'))

    # Combined endpoint fan-out
    COMBINED_MAX_WORKERS = int(os.getenv('COMBINED_MAX_WORKERS', '4'))
    COMBINED_TIMEOUT_SECONDS = float(os.getenv('COMBINED_TIMEOUT_SECONDS', '30'))
