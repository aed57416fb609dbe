import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:////tmp/foodexpress.db")
CLIENT_STORAGE_URL = os.getenv("CLIENT_STORAGE_URL", "sqlite:////tmp/foodexpress-client.db")
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000")
APP_ENV = os.getenv("APP_ENV", "development")
PORT = int(os.getenv("PORT", "3000"))
FRONTEND_DIR = os.getenv("FRONTEND_DIR", "frontend")
ESTIMATE_TIMEOUT = float(os.getenv("ESTIMATE_TIMEOUT", "5"))

IS_PRODUCTION = APP_ENV == "production"
