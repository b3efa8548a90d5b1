"""
Command Line Interface for the Membaza Users API
================================================

Operator commands for running the service and seeding user records.

Usage:
------
    # Run the HTTP API
    python cli.py serve --port 8000

    # Store a confirmed user (prompts for the password)
    python cli.py create-user u1 a@x.com --confirmed

    # Print a bcrypt digest
    python cli.py hash-password

    # Mint a token for an existing user id
    python cli.py issue-token u1

Exit codes: 0 on success, 1 on errors, 130 when interrupted.
"""

import argparse
import getpass
import json
import logging
import sys
from typing import Optional

from config import Settings, get_settings
from core.passwords import create_password_hasher
from core.tokens import create_jwt_service
from core.user_store import create_user_store
from exceptions import MembazaError
from models import User


logger = logging.getLogger(__name__)


# ANSI colors for terminal output
class Colors:
    """ANSI color codes for pretty terminal output."""
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    ENDC = '\033[0m'


def colorize(text: str, color: str) -> str:
    """Add color to text if terminal supports it."""
    if sys.stdout.isatty():
        return f"{color}{text}{Colors.ENDC}"
    return text


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="membaza-users",
        description="Membaza user service: authentication API and operator tools",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Minimal output"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output with debug info"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", type=str, help="Bind address (overrides config)")
    serve.add_argument("--port", type=int, help="Bind port (overrides config)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    create_user = subparsers.add_parser("create-user", help="Store a new user record")
    create_user.add_argument("user_id", help="Unique user id")
    create_user.add_argument("email", help="Unique email address")
    create_user.add_argument(
        "--password",
        type=str,
        help="Plaintext password (prompted for if omitted)"
    )
    create_user.add_argument(
        "--confirmed",
        action="store_true",
        help="Mark the account as confirmed"
    )
    create_user.add_argument(
        "--disabled",
        action="store_true",
        help="Create the account disabled"
    )

    hash_password = subparsers.add_parser("hash-password", help="Print a bcrypt digest")
    hash_password.add_argument(
        "--password",
        type=str,
        help="Plaintext password (prompted for if omitted)"
    )

    issue_token = subparsers.add_parser("issue-token", help="Mint a login token for a user id")
    issue_token.add_argument("user_id", help="Subject of the token")
    issue_token.add_argument(
        "--json",
        action="store_true",
        help="Output the token body as JSON"
    )

    return parser


def setup_logging_for_cli(verbose: bool, quiet: bool) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
    )


def _read_password(provided: Optional[str]) -> str:
    if provided:
        return provided
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Repeat password: "):
        raise ValueError("Passwords do not match")
    return password


def run_serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


def run_create_user(args: argparse.Namespace, settings: Settings) -> int:
    password = _read_password(args.password)
    hasher = create_password_hasher(settings)
    store = create_user_store(settings)

    user = store.save(User(
        id=args.user_id,
        email=args.email,
        password_hash=hasher.hash(password),
        confirmed=args.confirmed,
        enabled=not args.disabled,
    ))
    if not args.quiet:
        print(colorize(f"Created {user!r}", Colors.GREEN))
    if store.backend_name == "memory":
        logger.warning("In-memory user store: the record is lost when this process exits")
    return 0


def run_hash_password(args: argparse.Namespace, settings: Settings) -> int:
    password = _read_password(args.password)
    print(create_password_hasher(settings).hash(password))
    return 0


def run_issue_token(args: argparse.Namespace, settings: Settings) -> int:
    token = create_jwt_service(settings).issue(args.user_id)
    if args.json:
        print(json.dumps(token.model_dump()))
    else:
        print(token.token)
    return 0


COMMANDS = {
    "serve": run_serve,
    "create-user": run_create_user,
    "hash-password": run_hash_password,
    "issue-token": run_issue_token,
}


def main(args: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    setup_logging_for_cli(parsed_args.verbose, parsed_args.quiet)

    try:
        settings = get_settings()
        return COMMANDS[parsed_args.command](parsed_args, settings)

    except MembazaError as e:
        print(colorize(f"Error: {e.message}", Colors.RED))
        if parsed_args.verbose and e.details:
            print(colorize(f"   Details: {e.details}", Colors.YELLOW))
        return 1

    except ValueError as e:
        print(colorize(f"Error: {e}", Colors.RED))
        return 1

    except KeyboardInterrupt:
        print(colorize("\nInterrupted by user", Colors.YELLOW))
        return 130


if __name__ == "__main__":
    sys.exit(main())
