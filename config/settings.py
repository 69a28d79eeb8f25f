import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

# ------------- Database -------------
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///./gatesphere.db')

# ------------- JWT -------------
JWT_SECRET = os.getenv('JWT_SECRET_KEY', 'CHANGE_THIS_TO_A_LONG_RANDOM_STRING')
JWT_ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
ACCESS_TOKEN_TTL_MINUTES = int(os.getenv('ACCESS_TOKEN_TTL_MINUTES', '1440'))

# ------------- Realtime -------------
HEARTBEAT_INTERVAL_SECONDS = int(os.getenv('HEARTBEAT_INTERVAL_SECONDS', '30'))

# ------------- OTP / SMS -------------
DEMO_OTP = os.getenv('DEMO_OTP', '123456')
DEFAULT_SOCIETY_ID = int(os.getenv('DEFAULT_SOCIETY_ID', '1'))
SMS_GATEWAY_URL = os.getenv('SMS_GATEWAY_URL')
SMS_GATEWAY_TIMEOUT = float(os.getenv('SMS_GATEWAY_TIMEOUT', '10'))

# Society-local day boundaries (attendance, today's visitors)
SOCIETY_TIMEZONE = os.getenv('SOCIETY_TIMEZONE', 'Asia/Kolkata')

# ------------- CORS -------------
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv('CORS_ORIGINS', 'http://localhost:5173,http://localhost:3000').split(',')
    if origin.strip()
]


def warn_on_insecure_defaults():
    """Log loudly when running with development-only secrets"""
    if JWT_SECRET == 'CHANGE_THIS_TO_A_LONG_RANDOM_STRING':
        logger.warning('⚠️ WARNING: Using default JWT_SECRET. Set JWT_SECRET_KEY in .env for production!')
