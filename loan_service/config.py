"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import List


class LoanServiceConfig(BaseSettings):
    """Loan service configuration"""
    
    # Storage configuration
    storage_backend: str = "sqlite"  # sqlite or memory
    database_path: str = "bank.db"
    
    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_prefix: str = "/api/v1"
    cors_allow_origins: List[str] = ["*"]
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    
    # Demo data
    seed_demo_data: bool = True
    
    class Config:
        env_prefix = "LOANS_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = LoanServiceConfig()


def get_config() -> LoanServiceConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LoanServiceConfig:
    """Reload configuration from environment"""
    global config
    config = LoanServiceConfig()
    return config
