# Overview: Flask extension instances for database and migrations.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

db = SQLAlchemy()
migrate = Migrate()

# Key under app.extensions holding the ShopRepository for this app
REPOSITORY_EXTENSION_KEY = "quickpos.repository"
