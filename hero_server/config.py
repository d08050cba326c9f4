import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Server configuration settings"""

    # Redis settings
    REDIS_URL = os.getenv('REDIS_URL')
    REDIS_TIMEOUT_SECONDS = float(os.getenv('REDIS_TIMEOUT_SECONDS', '2.0'))

    # Server settings
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    API_PREFIX = os.getenv('API_PREFIX', '/api')
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', 8000))

    # Level unlock settings
    TOTAL_LEVELS = int(os.getenv('TOTAL_LEVELS', 32))  # Tutorial (0) + 31 regular levels
    INITIALLY_UNLOCKED_LEVELS = int(os.getenv('INITIALLY_UNLOCKED_LEVELS', 2))  # Tutorial + Level 1

    # Scoring settings
    HERO_POINTS_FORMULA = os.getenv('HERO_POINTS_FORMULA', 'standard')
    SUBMISSION_MODE = os.getenv('SUBMISSION_MODE', 'best_score')
    SUBMIT_MAX_RETRIES = int(os.getenv('SUBMIT_MAX_RETRIES', 5))

    # Logging settings
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    LOG_FILE_PREFIX = os.getenv('LOG_FILE_PREFIX', 'hero_server')

    # Leaderboard settings
    LEADERBOARD_DEFAULT_LIMIT = int(os.getenv('LEADERBOARD_DEFAULT_LIMIT', 50))
    LEADERBOARD_MAX_LIMIT = int(os.getenv('LEADERBOARD_MAX_LIMIT', 100))

    @classmethod
    def validate(cls):
        """Validate that configuration values are consistent"""
        if cls.TOTAL_LEVELS <= 0:
            raise ValueError("TOTAL_LEVELS must be positive")
        if not 0 <= cls.INITIALLY_UNLOCKED_LEVELS <= cls.TOTAL_LEVELS:
            raise ValueError("INITIALLY_UNLOCKED_LEVELS must be between 0 and TOTAL_LEVELS")
        if cls.HERO_POINTS_FORMULA not in ('standard', 'steep_retry'):
            raise ValueError("HERO_POINTS_FORMULA must be 'standard' or 'steep_retry'")
        if cls.SUBMISSION_MODE not in ('best_score', 'first_completion'):
            raise ValueError("SUBMISSION_MODE must be 'best_score' or 'first_completion'")
        if cls.SUBMIT_MAX_RETRIES <= 0:
            raise ValueError("SUBMIT_MAX_RETRIES must be positive")
        if cls.REDIS_TIMEOUT_SECONDS <= 0:
            raise ValueError("REDIS_TIMEOUT_SECONDS must be positive")
