import sys
import os
import argparse
import logging
from werkzeug.security import generate_password_hash

# Add parent directory to path so we can import app modules
current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
sys.path.append(parent_dir)

from settings import save_section

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def set_admin_password(password):
    """Store a hash of `password` as the admin login password."""
    if len(password) < 8:
        logger.error("Password must be at least 8 characters")
        return False

    try:
        save_section("auth", {"admin_password_hash": generate_password_hash(password)})
    except OSError as e:
        logger.error(f"Failed to write settings: {e}")
        return False

    logger.info("Admin password updated successfully.")
    return True


def main():
    parser = argparse.ArgumentParser(description="Set the admin panel password")
    parser.add_argument("password", help="New password")

    args = parser.parse_args()

    if set_admin_password(args.password):
        print("SUCCESS")
        sys.exit(0)
    else:
        print("FAILURE")
        sys.exit(1)


if __name__ == "__main__":
    main()
