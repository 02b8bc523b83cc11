# config/settings.py
"""
Configuración centralizada de la aplicación usando Pydantic Settings.
Las variables se cargan desde el archivo .env
"""

from pydantic_settings import BaseSettings
from typing import Dict, List


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # Base de datos
    DATABASE_URL: str = "sqlite:///./aquapulse.db"

    # CORS
    CORS_ALLOW_ORIGINS: List[str] = ["http://localhost:3000"]

    # Zona horaria usada para el "ahora" de tendencias y rangos por defecto
    DEFAULT_TZ: str = "America/Mazatlan"

    # Logging
    LOG_LEVEL: str = "info"
    LOG_FORMAT: str = "json"  # json | console

    # Tendencias: ventana (días) y tamaño de bucket por rango de tiempo
    TREND_WINDOW_DAYS: Dict[str, int] = {"week": 7, "month": 30, "quarter": 90}
    TREND_BUCKET_SIZE: Dict[str, str] = {"week": "day", "month": "day", "quarter": "day"}

    # Comparación de estanques
    RELATIVE_ORIGIN: str = "season_start"  # season_start | stocking_date
    COMPARISON_DEFAULT_RANGE_DAYS: int = 30

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
