"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""
    
    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./event_creator.db")
    
    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    
    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]
    
    # File limits
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024  # 5MB
    
    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30
    
    # Event generation
    GENERATION_DELAY_SECONDS: float = 2.0
    DEFAULT_GENERATED_CAPACITY: int = 50
    
    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
