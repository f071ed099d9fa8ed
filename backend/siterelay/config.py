from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Shared secret expected in the X-Api-Key header
    API_KEY: str = ""

    V0_API_KEY: str = ""
    V0_BASE_URL: str = "https://api.v0.dev/v1"
    SITE_TIMEOUT_SECONDS: float = 600.0

    AI_GATEWAY_API_KEY: str = ""
    AI_GATEWAY_BASE_URL: str = "https://ai-gateway.vercel.sh/v1"
    IMAGE_MODEL: str = "google/gemini-2.5-flash-image"
    IMAGE_TIMEOUT_SECONDS: float = 120.0
    GENERATE_IMAGES: bool = True

    CALLBACK_TIMEOUT_SECONDS: float = 30.0

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
