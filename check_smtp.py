#!/usr/bin/env python3
"""
Check the mail relay configuration by sending a test email.
Usage: python check_smtp.py admin@example.com

The password is read from ADMIN_PASSWORD, or prompted for when unset.
"""
import getpass
import os
import sys
from api.services.email_service import EmailService
from config import get_smtp_config


def check_smtp(email: str, password: str) -> bool:
    """Send a test email to verify SMTP configuration"""
    config = get_smtp_config()
    try:
        print("📧 Initializing SMTP email service...")
        print(f"   Host: {config['SMTP_HOST']}:{config['SMTP_PORT']} ({config['SMTP_SECURITY']})")
        print(f"   Account: {email}")
        email_service = EmailService(config)
    except ValueError as e:
        print(f"❌ Configuration error: {e}")
        return False

    print(f"\n📤 Sending test email to {email}...")
    success, message = email_service.send_test_email(email, password)
    if success:
        print(f"✅ {message}")
        print(f"\nCheck {email} for the test email.")
    else:
        print(f"❌ {message}")
    return success


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python check_smtp.py admin@example.com")
        sys.exit(1)

    email = sys.argv[1]
    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("SMTP password: ")
    sys.exit(0 if check_smtp(email, password) else 1)
