from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str

    # If DEV and you hit SSL cert issues with the pooler, set DB_SSL_VERIFY=false in .env
    DB_SSL_VERIFY: bool = True

    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    SUPER_ADMIN_USERNAME: str | None = None
    SUPER_ADMIN_EMAIL: str | None = None
    SUPER_ADMIN_PASSWORD: str | None = None
    ENV: str = "dev"  # "dev" or "prod"

    # --- EMAIL SETTINGS ---
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USER: str | None = None
    SMTP_PASSWORD: str | None = None
    EMAILS_FROM_EMAIL: str = "no-reply@sciencetechclub.org"
    EMAILS_FROM_NAME: str = "Science & Tech Club"
    FRONTEND_URL: str = "http://localhost:5173"

    # --- OBJECT STORAGE (report formats) ---
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None
    REPORTS_BUCKET: str = "report-formats"

    # --- RATE LIMITING ---
    REDIS_URL: str | None = None
    RATE_LIMIT_ENABLED: bool = True

    # --- PDF ---
    WKHTMLTOPDF_PATH: str | None = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
