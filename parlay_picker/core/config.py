from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_BROWSER_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    app_name: str = "Parlay Picker API"
    environment: str = "development"
    log_level: str = "INFO"
    cors_allow_origins: str = Field(default="http://localhost:3000,http://localhost:3001", validation_alias="CORS_ALLOW_ORIGINS")

    # stats.nba.com client
    nba_stats_api_url: str = Field(default="https://stats.nba.com/stats", validation_alias="NBA_STATS_API_URL")
    nba_stats_timeout_seconds: int = Field(default=20, validation_alias="NBA_STATS_TIMEOUT_SECONDS")
    nba_stats_max_retries: int = Field(default=3, validation_alias="NBA_STATS_MAX_RETRIES")
    nba_stats_backoff_seconds: float = Field(default=1.5, validation_alias="NBA_STATS_BACKOFF_SECONDS")
    nba_stats_impersonate: str = Field(default="chrome", validation_alias="NBA_STATS_IMPERSONATE")
    nba_stats_user_agent: str = Field(default=_BROWSER_UA, validation_alias="NBA_STATS_USER_AGENT")
    nba_stats_origin: str = Field(default="https://www.nba.com", validation_alias="NBA_STATS_ORIGIN")
    nba_stats_referer: str = Field(
        default="https://www.nba.com/stats/players/boxscores-traditional",
        validation_alias="NBA_STATS_REFERER",
    )
    nba_stats_proxy: str | None = Field(default=None, validation_alias="NBA_STATS_PROXY")
    nba_season: str | None = Field(default=None, validation_alias="NBA_SEASON")
    nba_season_type: str = Field(default="Regular Season", validation_alias="NBA_SEASON_TYPE")

    # Stats source: "json" (player stat records), "gamelogs" (JSONL game logs), "nba_stats" (live API)
    stats_source: str = Field(default="json", validation_alias="STATS_SOURCE")
    player_stats_path: str = Field(default="data/player_stats.json", validation_alias="PLAYER_STATS_PATH")
    game_logs_dir: str = Field(default="data/official", validation_alias="GAME_LOGS_DIR")
    player_name_overrides_path: str = Field(default="data/name_overrides.json", validation_alias="PLAYER_NAME_OVERRIDES_PATH")

    # Medians / pricing
    min_games: int = Field(default=5, validation_alias="MIN_GAMES")
    last_n_games: int | None = Field(default=20, validation_alias="LAST_N_GAMES")
    stabilization_games: float = Field(default=10.0, validation_alias="STABILIZATION_GAMES")
    probability_floor: float = Field(default=0.01, validation_alias="PROBABILITY_FLOOR")
    probability_ceiling: float = Field(default=0.99, validation_alias="PROBABILITY_CEILING")

    # Builder
    top_players_limit: int = Field(default=10, validation_alias="TOP_PLAYERS_LIMIT")
    max_legs: int = Field(default=3, validation_alias="MAX_LEGS")
    generated_parlays_limit: int | None = Field(default=None, validation_alias="GENERATED_PARLAYS_LIMIT")

    collection_log_path: str = Field(default="logs/collection.jsonl", validation_alias="COLLECTION_LOG_PATH")

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
    )


settings = Settings()
