from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Repository Status Dashboard"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENV: str = "dev"  # Environment: "dev", "staging", "prod"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:3001"]

    # GitHub
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_API_VERSION: str = "2022-11-28"
    GITHUB_HTTP_TIMEOUT_SECONDS: float = 30.0
    GITHUB_TOKEN: Optional[str] = None  # Seeds the dashboard credential when none is stored

    # Redis (settings persistence)
    REDIS_URL: str = "redis://localhost:6379/0"
    SETTINGS_KEY_PREFIX: str = "statusboard:"

    # Security
    SECRET_KEY: str = "your-secret-key-change-in-production"

    # ==========================================================================
    # Dashboard defaults
    # ==========================================================================

    DEFAULT_WORKFLOW_FILE: str = "trivy-scan.yml"
    DEFAULT_ENVIRONMENTS: List[str] = ["service-stack", "stage", "canary", "prod"]

    # --- Fetching ---
    DEPLOYMENTS_PER_PAGE: int = 100  # Deployments scanned for the last success
    SCAN_RUNS_PER_REPOSITORY: int = 5  # Workflow runs shown per repository
    SCAN_JOB_KEYWORDS: List[str] = ["trivy", "scan"]  # Job name substrings

    # --- Deployment freshness (weeks since last successful deployment) ---
    FRESH_DEPLOYMENT_WEEKS: float = 2.0
    STALE_DEPLOYMENT_WEEKS: float = 4.0

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
