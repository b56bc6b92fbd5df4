#!/usr/bin/env python3
"""
Transport diagnostic script to identify setup issues.

Usage:
    python diagnose_transport.py [--env-file config/.env] [--send]
"""

import argparse
import asyncio
import os
import sys
import traceback


def check_python_version():
    """Check Python version compatibility."""
    print(f"Python version: {sys.version}")
    if sys.version_info < (3, 8):
        print("❌ Python 3.8+ required")
        return False
    print("✅ Python version OK")
    return True


def check_dependencies():
    """Check if required dependencies are installed."""
    required_packages = {
        'discord.py': 'discord',
        'python-dotenv': 'dotenv',
        'aiohttp': 'aiohttp'
    }

    missing = []
    for package, module in required_packages.items():
        try:
            __import__(module)
            print(f"✅ {package} installed")
        except ImportError:
            print(f"❌ {package} missing")
            missing.append(package)

    return len(missing) == 0


def check_env_variables(env_file):
    """Report which destination variables are set."""
    from discord_transport.core.config import (
        BOT_CHANNEL_ENV,
        BOT_TOKEN_ENV,
        WEBHOOK_URL_ENV,
        load_environment
    )

    if env_file or os.path.exists(os.path.join('config', '.env')):
        load_environment(env_file)

    for var in (WEBHOOK_URL_ENV, BOT_CHANNEL_ENV, BOT_TOKEN_ENV):
        print(f"{'✅' if os.getenv(var) else '➖'} {var} {'set' if os.getenv(var) else 'not set'}")

    return True


def check_handler_resolution():
    """Resolve the handler the transport would use."""
    from discord_transport.core.config import TransportOptions
    from discord_transport.handlers import resolve_destination, resolve_handler

    destination = resolve_destination(TransportOptions())
    if destination is None:
        print("❌ No webhook URL or bot channel/token found")
        return False

    handler = resolve_handler(TransportOptions())
    if handler is None:
        print(f"❌ Found a {destination.kind} configuration but the handler could not be created")
        return False

    print(f"✅ Using {handler.kind} handler")
    return True


def send_test_entry():
    """Send one test entry through the resolved handler."""
    from discord_transport import DiscordTransport, LogEntry

    transport = DiscordTransport({'metadata': {'context': 'diagnose_transport'}})
    if transport.discord_handler is None:
        print("❌ Nothing to send through")
        return False

    async def _send():
        return await transport.discord_handler.log(
            LogEntry(level='info', message='This is an automated diagnostic message.'),
            transport.metadata
        )

    if asyncio.run(_send()):
        print("✅ Test message delivered")
        return True

    print("❌ Test message failed, see the error above")
    return False


def main(argv=None):
    """Run all diagnostic checks."""
    parser = argparse.ArgumentParser(description="Diagnose Discord logging transport setup")
    parser.add_argument('--env-file', help="Path to a .env file (default: config/.env)")
    parser.add_argument('--send', action='store_true', help="Send a test message")
    args = parser.parse_args(argv)

    print("🔍 Discord Transport Diagnostic Tool")
    print("=" * 40)

    checks = [
        ("Python Version", check_python_version),
        ("Dependencies", check_dependencies),
        ("Environment Variables", lambda: check_env_variables(args.env_file)),
        ("Handler Resolution", check_handler_resolution)
    ]
    if args.send:
        checks.append(("Test Delivery", send_test_entry))

    all_passed = True
    for check_name, check_func in checks:
        print(f"\n🔍 Checking {check_name}...")
        try:
            if not check_func():
                all_passed = False
        except Exception as e:
            print(f"❌ {check_name} failed with error: {str(e)}")
            print(f"Traceback:\n{traceback.format_exc()}")
            all_passed = False

    print("\n" + "=" * 40)
    if all_passed:
        print("✅ All checks passed! Log entries will be forwarded to Discord.")
    else:
        print("❌ Some checks failed. Fix the issues above before relying on Discord logging.")

    return all_passed


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
