"""Command-line interface for totp-auth."""

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from totp_auth.account import Account, AccountNotFoundError
from totp_auth.secret import DecodeError
from totp_auth.storage import FileSecretStore
from totp_auth.totp import DEFAULT_DIGITS, remaining_seconds


logger = logging.getLogger(__name__)


def _store(args: argparse.Namespace) -> FileSecretStore:
    return FileSecretStore(args.store)


def _prompt_secret(name: str) -> str:
    return getpass.getpass(f"Secret for '{name}' (hex or Base32): ")


def code_command(args: argparse.Namespace) -> int:
    """Handle the code command."""
    store = _store(args)
    try:
        try:
            account = Account.lookup(args.name, provider=store)
        except AccountNotFoundError:
            if not args.prompt:
                raise
            account = Account.create(args.name, _prompt_secret(args.name), provider=store)

        print(account.code(digits=args.digits))
        if args.remaining:
            print(f"({remaining_seconds()}s remaining)", file=sys.stderr)
        return 0
    except AccountNotFoundError as e:
        print(f"✗ {e}. Add it first using:", file=sys.stderr)
        print(f"  totp-auth add {args.name}", file=sys.stderr)
        return 1
    except DecodeError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("Code generation failed", exc_info=True)
        print(f"✗ Failed to generate code: {e}", file=sys.stderr)
        return 1


def add_command(args: argparse.Namespace) -> int:
    """Handle the add command."""
    try:
        secret = args.secret if args.secret is not None else _prompt_secret(args.name)
        account = Account.create(args.name, secret, provider=_store(args))
        print(f"✓ Account '{account.name}' saved")
        return 0
    except Exception as e:
        logger.debug("Saving account failed", exc_info=True)
        print(f"✗ Failed to save account: {e}", file=sys.stderr)
        return 1


def list_command(args: argparse.Namespace) -> int:
    """Handle the list command."""
    try:
        names = Account.names(provider=_store(args))
        if not names:
            print("No accounts found. Add one first using:")
            print("  totp-auth add <name>")
            return 0

        print("Available accounts:")
        for name in names:
            print(f"  {name}")
        return 0
    except Exception as e:
        print(f"✗ Failed to list accounts: {e}", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its sub-commands."""
    parser = argparse.ArgumentParser(
        prog="totp-auth",
        description="TOTP code generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--store",
        default=None,
        help="Directory holding account files (default: user data directory)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Code command
    code_parser = subparsers.add_parser(
        "code",
        aliases=["generate", "gen"],
        help="Print the current TOTP code for an account",
    )
    code_parser.add_argument("name", help="Account name")
    code_parser.add_argument(
        "--digits",
        "-d",
        type=int,
        default=DEFAULT_DIGITS,
        help=f"Number of digits in the code (default: {DEFAULT_DIGITS})",
    )
    code_parser.add_argument(
        "--prompt",
        "-p",
        action="store_true",
        help="Prompt for the secret and save it if the account is unknown",
    )
    code_parser.add_argument(
        "--remaining",
        "-r",
        action="store_true",
        help="Also print the seconds left in the current time step",
    )

    # Add command
    add_parser = subparsers.add_parser(
        "add",
        aliases=["new"],
        help="Add or replace an account",
    )
    add_parser.add_argument("name", help="Account name")
    add_parser.add_argument(
        "--secret",
        "-s",
        default=None,
        help="Secret as hex or Base32 (prompted for if omitted)",
    )

    # List command
    subparsers.add_parser(
        "list",
        aliases=["ls"],
        help="List all known accounts",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    if args.command in ("code", "generate", "gen"):
        return code_command(args)
    elif args.command in ("add", "new"):
        return add_command(args)
    elif args.command in ("list", "ls"):
        return list_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
