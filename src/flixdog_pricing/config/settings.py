"""
Centralized settings and path configuration for the pricing service.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


DEFAULT_ALLOWED_ORIGINS = (
    'https://flixdog.com',
    'https://www.flixdog.com',
    'https://flixdog.vercel.app',
)


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def get_data_dir() -> Path:
    """Directory holding the bundled sample catalog and availability."""
    return Path(__file__).resolve().parent.parent / 'data'


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    project_root: Path

    # Input files
    products_file: Path
    availability_file: Path

    # CORS
    allowed_origins: tuple = DEFAULT_ALLOWED_ORIGINS
    environment: str = "production"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Checkout constraints
    currency: str = "eur"
    min_charge_cents: int = 50  # Stripe minimum is 0.50 EUR
    max_party_size: int = 100

    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()
        data_dir = get_data_dir()

        products_file = os.environ.get('FLIXDOG_PRODUCTS_FILE')
        availability_file = os.environ.get('FLIXDOG_AVAILABILITY_FILE')

        origins = os.environ.get('ALLOWED_ORIGINS')
        if origins:
            allowed_origins = tuple(o.strip() for o in origins.split(',') if o.strip())
        else:
            allowed_origins = DEFAULT_ALLOWED_ORIGINS

        return cls(
            project_root=root,
            products_file=Path(products_file) if products_file else data_dir / 'products.csv',
            availability_file=Path(availability_file) if availability_file else data_dir / 'availability_slots.csv',
            allowed_origins=allowed_origins,
            environment=os.environ.get('ENVIRONMENT', 'production'),
            api_host=os.environ.get('FLIXDOG_API_HOST', '0.0.0.0'),
            api_port=int(os.environ.get('PORT', '8000')),
            log_level=os.environ.get('FLIXDOG_LOG_LEVEL', 'INFO').upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
