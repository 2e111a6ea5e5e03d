import os
from urllib.parse import quote_plus
from dotenv import load_dotenv

load_dotenv()


def _build_database_url():
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    host = os.getenv("DB_HOST")
    name = os.getenv("DB_NAME")
    if host and name:
        user = os.getenv("DB_USER", "postgres")
        password = quote_plus(os.getenv("DB_PASSWORD", ""))
        port = os.getenv("DB_PORT", "5432")
        return f"postgresql://{user}:{password}@{host}:{port}/{name}"

    # Local fallback for development
    return "sqlite:///./clients_finder.db"


class Settings:
    APP_ENV = os.getenv("APP_ENV", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = [
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if o.strip()
    ]

    # DATABASE
    DATABASE_URL = _build_database_url()

    # GEOAPIFY (places + geocoding)
    GEOAPIFY_API_KEY = os.getenv("GEOAPIFY_API_KEY")
    GEOAPIFY_PLACES_URL = os.getenv("GEOAPIFY_PLACES_URL", "https://api.geoapify.com/v2/places")
    GEOAPIFY_GEOCODE_URL = os.getenv("GEOAPIFY_GEOCODE_URL", "https://api.geoapify.com/v1/geocode/search")

    # INGESTION
    AUTO_FETCH_DELAY_SECONDS = float(os.getenv("AUTO_FETCH_DELAY_SECONDS", "0.3"))
    AUTO_FETCH_INTERVAL_HOURS = int(os.getenv("AUTO_FETCH_INTERVAL_HOURS", "0"))  # 0 = scheduler off

    # EMAIL SETTINGS (SMTP)
    SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_SECURE = os.getenv("SMTP_SECURE", "false").lower() == "true"
    SMTP_USER = os.getenv("SMTP_USER")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")  # App Password, NOT login password
    SMTP_FROM = os.getenv("SMTP_FROM") or os.getenv("SMTP_USER")

    # BREVO (transactional email API)
    BREVO_API_URL = os.getenv("BREVO_API_URL", "https://api.brevo.com/v3/smtp/email")
    BREVO_API_KEY = os.getenv("BREVO_API_KEY")
    BREVO_SENDER_EMAIL = os.getenv("BREVO_SENDER_EMAIL")
    BREVO_SENDER_NAME = os.getenv("BREVO_SENDER_NAME", "Clients Finder")

    # S3-COMPATIBLE STORAGE
    S3_ENDPOINT = os.getenv("S3_ENDPOINT", "")
    S3_BUCKET = os.getenv("S3_BUCKET", "clients-finder")
    S3_ACCESS_KEY = os.getenv("S3_ACCESS_KEY", "")
    S3_SECRET_KEY = os.getenv("S3_SECRET_KEY", "")
    S3_REGION = os.getenv("S3_REGION", "us-east-1")

    # STORAGE UPLOAD API (template attachments)
    STORAGE_API_URL = os.getenv("STORAGE_API_URL", "")
    STORAGE_BASE_URL = os.getenv("STORAGE_BASE_URL", "")
    STORAGE_API_KEY = os.getenv("STORAGE_API_KEY")
    STORAGE_PROJECT_NAME = os.getenv("STORAGE_PROJECT_NAME", "clients-finder-templates")

    # LIMITS
    MAX_UPLOAD_BYTES = 10 * 1024 * 1024


settings = Settings()
