#!/usr/bin/env python3
"""
Environment Configuration Generator for the procurement system

This script generates a .env file with:
- Cryptographically secure SECRET_KEY for Flask sessions
- Database configuration
- Procurement settings (numbering, currency rounding, reception retries)

Usage:
    python generate_env.py              # Refuses to overwrite an existing .env
    python generate_env.py --force      # Overwrite existing .env
    python generate_env.py --dev        # Development mode (predictable key, HTTPS off)
"""

import argparse
import secrets
import sys
from pathlib import Path


class EnvGenerator:
    """Generate environment configuration"""

    def __init__(self, dev_mode=False):
        self.dev_mode = dev_mode
        self.env_file = Path(__file__).parent / '.env'

    def generate_secret_key(self, length=64):
        """Generate a cryptographically secure secret key"""
        if self.dev_mode:
            return "dev-secret-key-DO-NOT-USE-IN-PRODUCTION"
        return secrets.token_hex(length)

    def render(self):
        https = 'False' if self.dev_mode else 'True'
        lines = [
            "# Flask",
            f"SECRET_KEY={self.generate_secret_key()}",
            "# DATABASE_URL=sqlite:////absolute/path/to/procurement.db",
            f"ENABLE_HTTPS={https}",
            f"FORCE_HTTPS_REDIRECT={https}",
            "RATELIMIT_ENABLED=True",
            "",
            "# Procurement",
            "CURRENCY_DECIMALS=2",
            "RECEPTION_MAX_RETRIES=3",
            "NUMBER_PADDING=6",
            "EXPRESSION_NUMBER_PREFIX=EB",
            "ORDER_NUMBER_PREFIX=BC",
            "RECEPTION_NUMBER_PREFIX=REC",
            "",
            "# Logging",
            "LOG_LEVEL=INFO",
        ]
        return "\n".join(lines) + "\n"

    def write(self, force=False):
        if self.env_file.exists() and not force:
            print(f"{self.env_file} already exists. Use --force to overwrite.")
            return False
        self.env_file.write_text(self.render())
        print(f"Wrote {self.env_file}")
        return True


def main():
    parser = argparse.ArgumentParser(description='Generate .env for the procurement system')
    parser.add_argument('--force', action='store_true', help='Overwrite an existing .env')
    parser.add_argument('--dev', action='store_true', help='Development settings')
    args = parser.parse_args()

    ok = EnvGenerator(dev_mode=args.dev).write(force=args.force)
    sys.exit(0 if ok else 1)


if __name__ == '__main__':
    main()
