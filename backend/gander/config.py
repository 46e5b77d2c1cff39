from pydantic_settings import BaseSettings

# Values treated as "no key configured" (demo mode)
PLACEHOLDER_API_KEYS = {"", "demo-mode", "your-openai-api-key", "sk-your-key-here"}


class Settings(BaseSettings):
    # Redis
    redis_url: str = "redis://localhost:6379/0"
    recommendation_cache_enabled: bool = True

    # OpenAI
    openai_api_key: str = ""

    # Anthropic
    anthropic_api_key: str = ""

    # Email: simulation | gmail | sendgrid | mailtrap
    email_provider: str = "simulation"
    email_from: str = "noreply@ganderaviation.com"
    email_from_name: str = "Gander Maintenance System"
    email_simulation_failure_rate: float = 0.05
    email_simulation_min_delay_ms: int = 100
    email_simulation_max_delay_ms: int = 300

    # Gmail SMTP
    gmail_user: str = ""
    gmail_app_password: str = ""

    # SendGrid SMTP
    sendgrid_api_key: str = ""

    # Mailtrap: SMTP (user/pass) or HTTP API (token, optional sandbox inbox)
    mailtrap_user: str = ""
    mailtrap_pass: str = ""
    mailtrap_api_token: str = ""
    mailtrap_inbox_id: str = ""

    # Links in notification emails
    dashboard_base_url: str = "http://localhost:3000"

    # Scheduler
    scheduler_enabled: bool = True
    reminder_sweep_interval_minutes: int = 15
    reminder_interval_hours: int = 4

    # CORS
    cors_origins: str = "http://localhost:3000"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def openai_configured(self) -> bool:
        return self.openai_api_key.strip() not in PLACEHOLDER_API_KEYS

    @property
    def anthropic_configured(self) -> bool:
        return self.anthropic_api_key.strip() not in PLACEHOLDER_API_KEYS

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
