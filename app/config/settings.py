from typing import Any

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuración de la aplicación utilizando Pydantic BaseSettings.
    Carga automáticamente las variables de entorno.
    """

    # API Configuration
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Doctor Appointments API"
    PROJECT_DESCRIPTION: str = "Booking and lifecycle of doctor consultation slots"
    VERSION: str = "0.1.0"

    # Environment
    DEBUG: bool = Field(False, description="Modo debug")
    ENVIRONMENT: str = Field("production", description="Entorno de ejecución")
    LOG_LEVEL: str = Field("INFO", description="Nivel de logging")

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="Host de PostgreSQL")
    DB_PORT: int = Field(5432, description="Puerto de PostgreSQL")
    DB_NAME: str = Field("appointments", description="Nombre de la base de datos")
    DB_USER: str = Field("postgres", description="Usuario de PostgreSQL")
    DB_PASSWORD: str | None = Field(None, description="Contraseña de PostgreSQL")
    DB_ECHO: bool = Field(False, description="Log SQL queries (solo para debug)")

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(20, description="Tamaño del pool de conexiones")
    DB_MAX_OVERFLOW: int = Field(30, description="Máximo overflow del pool")
    DB_POOL_RECYCLE: int = Field(3600, description="Reciclar conexiones cada X segundos")
    DB_POOL_TIMEOUT: int = Field(30, description="Timeout para obtener conexión del pool")

    # Backends
    STORAGE_BACKEND: str = Field(
        "postgres",
        description="Where slots and appointments live: 'postgres' or 'memory' (local development / tests)",
    )
    NOTIFICATION_BACKEND: str = Field(
        "database",
        description="Notification sink: 'log', 'database' (notifications table) or 'memory'",
    )
    CREATE_TABLES_ON_STARTUP: bool = Field(
        False, description="Create missing tables at startup (postgres backend only)"
    )

    # JWT Settings
    JWT_SECRET_KEY: str = Field("change-me-in-production", description="Clave secreta para firmar tokens JWT")
    JWT_ALGORITHM: str = Field("HS256", description="Algoritmo de firma JWT")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60, description="Minutos de expiración del token de acceso")

    # Appointments
    APPOINTMENTS_ADMIN_STATUS_UPDATES: bool = Field(
        False, description="Allow admins to confirm / complete / mark no-show appointments"
    )
    APPOINTMENT_REASON_MAX_LENGTH: int = Field(500, description="Maximum length of the visit reason")

    # CORS
    CORS_ORIGINS: list[str] = Field(default=["*"], description="Orígenes permitidos para CORS")

    # Sentry
    SENTRY_DSN: str | None = Field(None, description="Sentry DSN; monitoring is disabled when empty")
    SENTRY_TRACES_SAMPLE_RATE: float = Field(0.1, description="Fraction of transactions traced by Sentry")

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignorar campos extras en lugar de generar un error
    )

    def __init__(self, **data: Any):
        super().__init__(**data)

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def validate_storage_backend(cls, v):
        v = v.lower()
        if v not in ("postgres", "memory"):
            raise ValueError("STORAGE_BACKEND must be 'postgres' or 'memory'")
        return v

    @field_validator("NOTIFICATION_BACKEND")
    @classmethod
    def validate_notification_backend(cls, v):
        v = v.lower()
        if v not in ("log", "database", "memory"):
            raise ValueError("NOTIFICATION_BACKEND must be 'log', 'database' or 'memory'")
        return v

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @field_validator("DB_MAX_OVERFLOW")
    @classmethod
    def validate_max_overflow(cls, v):
        if v < 0:
            raise ValueError("DB_MAX_OVERFLOW must be 0 or greater")
        if v > 200:
            raise ValueError("DB_MAX_OVERFLOW should not exceed 200")
        return v

    @field_validator("APPOINTMENT_REASON_MAX_LENGTH")
    @classmethod
    def validate_reason_max_length(cls, v):
        if v < 1:
            raise ValueError("APPOINTMENT_REASON_MAX_LENGTH must be at least 1")
        return v

    @computed_field
    @property
    def database_url(self) -> str:
        """Construye la URL de conexión a PostgreSQL"""
        if self.DB_PASSWORD:
            return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return f"postgresql://{self.DB_USER}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @computed_field
    @property
    def is_development(self) -> bool:
        """Determina si está en modo desarrollo"""
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @computed_field
    @property
    def uses_memory_storage(self) -> bool:
        return self.STORAGE_BACKEND == "memory"


# Singleton para configuración
_settings_instance = None


def get_settings() -> Settings:
    """
    Retorna una instancia cacheada de la configuración.
    Esto evita cargar las variables de entorno múltiples veces.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
