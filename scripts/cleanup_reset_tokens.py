"""
python -m scripts.cleanup_reset_tokens
"""

import sys

sys.path.insert(0, ".")

from dotenv import load_dotenv
load_dotenv()

from app.database import SessionLocal
from app.services.password_reset import password_reset_service


def cleanup_reset_tokens():
    """Delete every password reset token whose expiry has passed."""
    db = SessionLocal()

    try:
        removed = password_reset_service.cleanup_expired_tokens(db)
        print(f"Removed {removed} expired reset tokens")
        return removed
    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    cleanup_reset_tokens()
