from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Required from environment (.env / deployment secrets)
    database_url: str
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days
    app_env: str = "development"  # development, staging, production

    # CORS origins as comma-separated values
    # Example: "https://app.example.com,https://admin.example.com"
    cors_allow_origins: str = "http://localhost:5173"

    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # SerpAPI Google Jobs
    serpapi_key: str = ""
    serpapi_endpoint: str = "https://serpapi.com/search.json"
    serpapi_timeout_seconds: float = 20.0

    # Open jobs ingestion defaults
    ingest_source: str = "serpapi_google_jobs"
    ingest_job_titles: str = (
        "Frontend Engineer,Backend Engineer,Full Stack Developer,Software Engineer,Client Administrator"
    )
    # Semicolon-separated: locations themselves contain commas
    ingest_locations: str = (
        "Seattle, WA, United States;"
        "Bellevue, WA, United States;"
        "Redmond, WA, United States;"
        "Kirkland, WA, United States;"
        "Everett, WA, United States"
    )
    ingest_max_results_per_title: int = 25
    ingest_interval_seconds: int = 6 * 3600

    # Shared bearer token for the scheduled trigger (e.g. a cron job). Empty = admin only.
    ingest_token: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
