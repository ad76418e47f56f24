from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Ethereum JSON-RPC node
    rpc_url: str = "https://eth.llamarpc.com"
    rpc_timeout_sec: float = 15.0

    # Token served when a request has no ?token=
    default_token: str = "0xf4A509313437dfC64E2EFeD14e2b607B1AED30c5"
    token_decimals: int = 18  # used when decimals() is missing or reverts

    # Etherscan (transaction history per holder)
    etherscan_api_key: str = ""
    etherscan_api_url: str = "https://api.etherscan.io/v2/api"
    etherscan_chain_id: int = 1
    etherscan_max_rps: float = 4.0  # free tier allows 5

    # Ethplorer (top holders list)
    ethplorer_api_key: str = "freekey"
    ethplorer_api_url: str = "https://api.ethplorer.io"
    ethplorer_max_rps: float = 2.0

    # Outbound HTTP
    http_timeout_sec: float = 10.0

    # Parallel Etherscan lookups per request (1 = sequential)
    holder_lookup_concurrency: int = 1

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False


settings = Settings()
