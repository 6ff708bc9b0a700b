from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """SQLite only honours ON DELETE CASCADE with foreign keys switched on."""
    if dbapi_conn.__class__.__module__ == "sqlite3":
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def price_value(price):
    """Whole-number prices are rendered as ints, so 50 stays 50 in JSON."""
    if price is not None and float(price).is_integer():
        return int(price)
    return price


from .recipe import Recipe
from .recipe_material import RecipeMaterial
