import os
from dotenv import load_dotenv

load_dotenv()

db_backend = os.getenv("DB_BACKEND", "postgres")
user = os.getenv("DB_USER", "postgres")
password = os.getenv("DB_PASSWORD", "postgres")
host = os.getenv("DB_HOST", "localhost")
port = os.getenv("DB_PORT", "5432")
db_name = os.getenv("DB_NAME", "dungeon_crawl")
sqlite_path = os.getenv("SQLITE_PATH", "dungeon_crawl.sqlite3")
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
seed_defaults = os.getenv("SEED_DEFAULTS", "true").lower() in ("1", "true", "yes")

if __name__ == "__main__":
    print(db_backend, user, host, port, db_name, sqlite_path, log_level, seed_defaults)
