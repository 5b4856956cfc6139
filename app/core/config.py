from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # SQL echo для отладки
    db_echo: bool = False
    log_level: str = "INFO"

    # Значения по умолчанию для списков документов
    default_page_size: int = 20
    max_page_size: int = 100

    model_config = {"env_file": ".env", "extra": "ignore"}

settings = Settings()
