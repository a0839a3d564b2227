from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional

class Settings(BaseSettings):
    app_env: str = Field("dev", alias="APP_ENV")
    app_host: str = Field("0.0.0.0", alias="APP_HOST")
    app_port: int = Field(8000, alias="APP_PORT")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # --- File content ---
    # Relative request paths are resolved under this directory.
    files_storage_root: Optional[str] = Field(None, alias="FILES_STORAGE_ROOT")
    files_public: bool = Field(True, alias="FILES_PUBLIC")
    # Transfer buffer for range copies (16 KiB).
    file_buffer_size: int = Field(16 * 1024, gt=0, alias="FILE_BUFFER_SIZE")

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
