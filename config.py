import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///anchornotes.db").replace("postgres://", "postgresql://", 1)
SQLALCHEMY_DATABASE_URI = DATABASE_URL

SECRET_KEY = os.getenv("SECRET_KEY")

# Bearer token verification (tokens are issued by the external auth service)
JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# A note with a time reminder stays relevant this many minutes either side of it
RELEVANCE_WINDOW_MINUTES = int(os.getenv("RELEVANCE_WINDOW_MINUTES", "60"))
