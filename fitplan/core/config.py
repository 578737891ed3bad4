from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://fitplan_user:fitplan_password@db:5432/fitplan_db"
    # При продакшн/обычной разработке лучше не пересоздавать БД на каждом старте
    RESET_DATABASE: bool = False
    LOG_LEVEL: str = "INFO"
    SQL_ECHO: bool = False

    # День недели каталога: 0 = воскресенье ... 6 = суббота
    REST_DAY_OF_WEEK: int = 0

    # Нейтральные значения для незаполненных полей анкеты
    DEFAULT_WEIGHT_KG: float = 70.0
    DEFAULT_HEIGHT_CM: float = 170.0
    DEFAULT_AGE_BRACKET: str = "30-39"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"

settings = Settings()
