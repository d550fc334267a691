from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Metrics provider: "mock" | "birdeye" | "dexscreener"
    metrics_provider: str = "mock"
    mock_latency_sec: float = 0.3  # Simulated upstream delay for the mock provider

    # Birdeye Data Services API
    birdeye_api_key: str = ""
    birdeye_max_rps: float = 15.0

    # DexScreener (public, no key)
    dexscreener_max_rps: float = 4.0

    # Scan endpoint: per-client ceiling in slowapi/limits syntax
    scan_rate_limit: str = "10/minute"

    # Result cache
    scan_cache_ttl_sec: int = 60
    scan_cache_sweep_interval_sec: int = 60
    scan_cache_max_age_sec: int = 600  # Sweeper drops entries older than 10x TTL
    redis_url: str = ""  # Empty = in-process cache

    # HTTP server
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_debug: bool = False
    cors_origins: str = "*"  # Comma-separated

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False
    log_file: str = "logs/scanner_{time:YYYY-MM-DD}.log"  # Empty = console only


settings = Settings()
