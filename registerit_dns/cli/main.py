#!/usr/bin/env python3
"""
register.it DNS Manager - Command Line Interface

Main entry point for the register.it DNS Manager CLI.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Optional

import yaml
from rich.prompt import Prompt

from .. import __version__
from ..core.dns_manager import DNSManager
from ..core.models import DnsRecord
from ..utils.validators import sanitize_fqdn

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "configs/config.yaml"
DEFAULT_MAX_LOGIN_ATTEMPTS = 10


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its list/create/update/delete commands."""
    parser = argparse.ArgumentParser(
        prog="registerit-dns",
        description="register.it DNS Manager - manage DNS records through the register.it control panel",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG_PATH,
        help=f"Configuration file path (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--username", "-u", help="Control panel username")
    parser.add_argument("--password", "-p", help="Control panel password")
    parser.add_argument("--domain", "-d", help="Domain whose records are managed")
    parser.add_argument(
        "--max-login-attempts",
        type=int,
        default=None,
        help=f"Login attempts before giving up, 0 for a single attempt (default: {DEFAULT_MAX_LOGIN_ATTEMPTS})",
    )
    parser.add_argument(
        "--headless",
        "-H",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Hide the browser window (default: on)",
    )
    parser.add_argument(
        "--debug", "-D", action="store_true", help="Display debug messages"
    )

    commands = parser.add_subparsers(dest="command", metavar="command")

    commands.add_parser(
        "list",
        aliases=["list-dns-records", "list-dns", "list-records"],
        help="List all DNS records (default)",
    )

    create = commands.add_parser(
        "create", aliases=["create-dns-record", "create-dns"], help="Create DNS record"
    )
    create.add_argument("name", help="Record name, e.g. www")
    create.add_argument("ttl", help="Time to live in seconds")
    create.add_argument("type", help="Record type, e.g. A or CNAME")
    create.add_argument("value", help="Record value")

    update = commands.add_parser(
        "update",
        aliases=["update-dns-record", "update-dns"],
        help="Edit DNS record, keeping any field left out",
    )
    update.add_argument("id", type=int, help="Record id as shown by `list`")
    update.add_argument("name", nargs="?", default=None)
    update.add_argument("ttl", nargs="?", default=None)
    update.add_argument("type", nargs="?", default=None)
    update.add_argument("value", nargs="?", default=None)

    delete = commands.add_parser(
        "delete", aliases=["delete-dns-record", "delete-dns"], help="Delete DNS record"
    )
    delete.add_argument("id", type=int, help="Record id as shown by `list`")
    delete.add_argument(
        "--no-confirm",
        dest="confirm",
        action="store_false",
        help="Delete without asking for confirmation",
    )

    return parser


COMMAND_ALIASES = {
    "list-dns-records": "list",
    "list-dns": "list",
    "list-records": "list",
    "create-dns-record": "create",
    "create-dns": "create",
    "update-dns-record": "update",
    "update-dns": "update",
    "delete-dns-record": "delete",
    "delete-dns": "delete",
}


def main(argv: Optional[list] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    command = COMMAND_ALIASES.get(args.command, args.command) or "list"

    config_path = Path(args.config)
    if not config_path.exists() and args.config != DEFAULT_CONFIG_PATH:
        print(f"Error: Configuration file '{args.config}' not found")
        sys.exit(1)

    config = load_config(args.config)
    config_logger(config, debug=args.debug)

    try:
        apply_overrides(config, args)
        dns_manager = DNSManager(config)

        if command == "list":
            success = dns_manager.list_records()
        elif command == "create":
            record = DnsRecord(name=args.name, ttl=args.ttl, type=args.type, value=args.value)
            success = dns_manager.create_record(record)
        elif command == "update":
            success = dns_manager.update_record(
                args.id, name=args.name, ttl=args.ttl, record_type=args.type, value=args.value
            )
        else:
            success = dns_manager.delete_record(args.id, confirm=args.confirm)

        sys.exit(0 if success else 1)

    except (ValueError, KeyboardInterrupt) as e:
        print(f"Error: {e}" if str(e) else "Aborted")
        if args.debug:
            import traceback

            traceback.print_exc()
        sys.exit(1)


def apply_overrides(config: Dict, args: argparse.Namespace) -> Dict:
    """Merge command line options into the active provider's config, prompting for missing credentials."""
    provider_name = config.setdefault("default_provider", "registerit")
    providers = config.setdefault("dns_providers", {})
    provider_config = providers.get(provider_name) or {}
    providers[provider_name] = provider_config

    for key in ("username", "password", "domain"):
        if getattr(args, key):
            provider_config[key] = getattr(args, key)
    if args.max_login_attempts is not None:
        if args.max_login_attempts < 0:
            raise ValueError("--max-login-attempts must be 0 or more")
        provider_config["max_login_attempts"] = args.max_login_attempts
    if args.headless is not None:
        provider_config["headless"] = args.headless
    provider_config.setdefault("max_login_attempts", DEFAULT_MAX_LOGIN_ATTEMPTS)

    if provider_name == "registerit":
        if not provider_config.get("username"):
            provider_config["username"] = Prompt.ask("What is the username?")
        if not provider_config.get("password"):
            provider_config["password"] = Prompt.ask("What is the password?", password=True)
        if not provider_config.get("domain"):
            provider_config["domain"] = Prompt.ask("What is the domain?")

    if provider_config.get("domain"):
        provider_config["domain"] = sanitize_fqdn(provider_config["domain"])

    return config


def load_config(config_path: str) -> Dict:
    """Load configuration from YAML file."""
    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}
        logger.info(f"Configuration loaded from {config_path}")
        return config
    except FileNotFoundError:
        logger.warning(f"Config file {config_path} not found, using defaults")
        return get_default_config()
    except yaml.YAMLError as e:
        logger.error(f"Error parsing config file: {e}")
        print(f"Error: could not parse configuration file '{config_path}': {e}")
        sys.exit(1)


def get_default_config() -> Dict:
    """Return default configuration."""
    return {
        "dns_providers": {
            "registerit": {
                "max_login_attempts": DEFAULT_MAX_LOGIN_ATTEMPTS,
                "headless": True,
            }
        },
        "default_provider": "registerit",
        "logging": {"level": "INFO", "file": "registerit_dns.log"},
    }


def config_logger(config: Dict, debug: bool = False):
    """Configure logging."""
    logging_config = config.get("logging", None)
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    if logging_config:
        log_level = "DEBUG" if debug else logging_config.get("level", "INFO")
        log_file = logging_config.get("file", "registerit_dns.log")

        logging.basicConfig(
            level=log_level,
            format=log_format,
            handlers=[
                logging.FileHandler(log_file),
                logging.StreamHandler(sys.stdout),
            ],
        )
        return

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


if __name__ == "__main__":
    main()
