from flask_cors import CORS
from .db import db, redis_connection

cors = CORS()

__all__ = [
    "cors",
    "db",
    "redis_connection",
]
