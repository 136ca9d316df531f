from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from warboard.config import Config
from warboard.database.models import Base
from warboard.utils.logger import setup_logger

class Database:
    def __init__(self, database_url: Optional[str] = None):
        self.logger = setup_logger(__name__)
        self.database_url = database_url
        self.engine = None
        self.async_session = None
        
    async def initialize(self):
        """Initialize the database connection and create tables"""
        self.logger.info("Initializing database...")
        
        # Convert sqlite URL to async if needed
        database_url = Config.get_async_database_url(self.database_url)
        
        self.engine = create_async_engine(
            database_url,
            echo=Config.DEBUG
        )
        
        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )
        
        # Create all tables
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            
        self.logger.info("Database initialized successfully")
    
    @property
    def session_factory(self):
        """Async session factory handed to the operations layer"""
        if self.async_session is None:
            raise RuntimeError("Database.initialize() must be awaited first")
        return self.async_session
    
    async def close(self):
        """Close the database connection"""
        if self.engine:
            await self.engine.dispose()
            self.logger.info("Database connection closed")
