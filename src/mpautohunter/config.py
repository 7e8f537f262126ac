from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False

    # eBay application credentials (required)
    ebay_client_id: str = ""
    ebay_client_secret: str = ""

    # eBay endpoints
    ebay_oauth_url: str = "https://api.ebay.com/identity/v1/oauth2/token"
    ebay_search_url: str = "https://api.ebay.com/buy/browse/v1/item_summary/search"
    ebay_scope: str = "https://api.ebay.com/oauth/api_scope"
    upstream_timeout: float = 10.0
    token_safety_margin: float = 5.0  # seconds before expiry a token is treated as stale

    # eBay Partner Network
    epn_campaign_id: str = ""  # required
    epn_custom_id: str = ""    # default customid tag on search results; empty = none

    # Search
    search_default_limit: int = 25
    search_min_limit: int = 1
    search_max_limit: int = 100

    # Log
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def missing_credentials(self) -> list[str]:
        """Names of the required environment variables that are not set."""
        required = {
            "EBAY_CLIENT_ID": self.ebay_client_id,
            "EBAY_CLIENT_SECRET": self.ebay_client_secret,
            "EPN_CAMPAIGN_ID": self.epn_campaign_id,
        }
        return [name for name, value in required.items() if not value.strip()]


settings = Settings()
