import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Application configuration settings"""
    
    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///warboard.db')
    
    # Logging settings
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')  # Empty disables the file handler
    
    # War board settings
    SAVED_FEEDBACK_SECONDS = float(os.getenv('SAVED_FEEDBACK_SECONDS', 3))
    EXPORT_FILENAME = os.getenv('EXPORT_FILENAME', 'cwl-leaderboard.csv')
    
    @classmethod
    def get_async_database_url(cls, database_url: str = None) -> str:
        """Get the database URL (configured one by default) rewritten for the async driver"""
        database_url = database_url or cls.DATABASE_URL
        if database_url.startswith('sqlite:///'):
            database_url = database_url.replace('sqlite:///', 'sqlite+aiosqlite:///')
        return database_url
    
    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DATABASE_URL:
            raise ValueError("DATABASE_URL is required")
        if cls.SAVED_FEEDBACK_SECONDS < 0:
            raise ValueError("SAVED_FEEDBACK_SECONDS must not be negative")
