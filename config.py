# Configuration for Grievance Portal
import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Debug flag gating diagnostic logging
DEBUG = os.getenv('GRIEVANCE_DEBUG', 'false').lower() == 'true'

# JWT Authentication Configuration
JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'grievance-portal-secret-key-change-in-production')
JWT_ALGORITHM = 'HS256'
JWT_EXPIRY_HOURS = 24

# Frontend Configuration (for CORS)
FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:5173')

# Simulated round trip for login/register, in seconds
AUTH_DELAY_SECONDS = float(os.getenv('AUTH_DELAY_SECONDS', 0.5))

# Case handling
DEFAULT_ADMIN_DEPARTMENT = os.getenv('DEFAULT_ADMIN_DEPARTMENT', 'Hostel')
TIMEZONE = os.getenv('TIMEZONE', 'Asia/Kolkata')
MIN_PASSWORD_LENGTH = 6
CONFIRMATION_TIMEOUT_MINUTES = int(os.getenv('CONFIRMATION_TIMEOUT_MINUTES', 10))
SEED_DEMO_DATA = os.getenv('SEED_DEMO_DATA', 'true').lower() == 'true'


def configure_logging():
    """Set the root log level from the debug flag"""
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.INFO,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
