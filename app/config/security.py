# app/config/security.py
# Security configuration for tokens, password hashing and HTTP headers

import os
from datetime import timedelta
from typing import List

from dotenv import load_dotenv

load_dotenv()

_EXPIRE_UNITS = {
    's': 1,
    'm': 60,
    'h': 60 * 60,
    'd': 24 * 60 * 60,
}


def parse_expiry(value: str) -> timedelta:
    """Parse an expiry like '7d', '12h', '30m', '45s' or plain seconds"""
    value = (value or '').strip().lower()
    if not value:
        raise ValueError('Empty token expiry')
    unit = value[-1]
    if unit in _EXPIRE_UNITS:
        amount = value[:-1]
        multiplier = _EXPIRE_UNITS[unit]
    else:
        amount = value
        multiplier = 1
    if not amount.isdigit():
        raise ValueError(f"Invalid token expiry: {value!r}")
    return timedelta(seconds=int(amount) * multiplier)


class SecurityConfig:
    """Security configuration for the application"""

    # JWT settings
    JWT = {
        'secret': os.getenv('JWT_SECRET', 'your-secret-key'),
        'algorithm': os.getenv('JWT_ALGORITHM', 'HS256'),
        'expire': os.getenv('JWT_EXPIRE', '7d'),
    }

    # Password hashing settings
    PASSWORDS = {
        'bcrypt_rounds': int(os.getenv('BCRYPT_ROUNDS', 10)),
        'min_length': 6,
    }

    # Security headers
    SECURITY_HEADERS = {
        'X-Content-Type-Options': 'nosniff',
        'X-Frame-Options': 'DENY',
        'X-XSS-Protection': '1; mode=block',
        'Referrer-Policy': 'no-referrer',
    }

    @classmethod
    def get_token_lifetime(cls) -> timedelta:
        """Get the access token lifetime"""
        return parse_expiry(cls.JWT['expire'])

    @classmethod
    def get_cors_origins(cls) -> List[str]:
        """Get allowed CORS origins"""
        raw = os.getenv('CORS_ORIGINS')
        if raw:
            return [origin.strip() for origin in raw.split(',') if origin.strip()]
        return [
            "http://localhost:3000",   # Local development frontend
            "http://127.0.0.1:3000",   # Alternative localhost
            "http://localhost:5173",   # Vite dev server
        ]
