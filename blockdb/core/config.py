from os import getenv

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://blockdb:blockdb@db:5432/blockdb")
    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "15"))  # expire au bout de 15 minutes

    # pagination des lignes
    ROWS_DEFAULT_PAGE_SIZE = int(getenv("ROWS_DEFAULT_PAGE_SIZE", "50"))
    ROWS_MAX_PAGE_SIZE = int(getenv("ROWS_MAX_PAGE_SIZE", "100"))

    # nb de chiffres aléatoires ajoutés à chaque position
    POSITION_JITTER_DIGITS = int(getenv("POSITION_JITTER_DIGITS", "8"))

    # si True, une valeur qui ne colle pas au schéma est refusée (sinon juste loggée)
    STRICT_PROPERTIES = getenv("BLOCKDB_STRICT_PROPERTIES", "false").lower() in ("1", "true", "yes")

    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

settings = Settings()
