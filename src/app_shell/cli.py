import argparse
import json
import logging
import sys

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import get_auth_service, get_rules, get_settings
from src.app_shell.config import configure_logging
from src.components.bootstrap import BootstrapInput, run_bootstrap, run_check_owner_status

logger = logging.getLogger("cli")


def handle_migrate(args: argparse.Namespace) -> int:
    applied = SQLiteMigrator(get_settings().db_path).run_migrations()
    print(f"Applied {len(applied)} migration(s).")
    for filename in applied:
        print(f"  {filename}")
    return 0


def handle_bootstrap(args: argparse.Namespace) -> int:
    settings = get_settings()
    SQLiteMigrator(settings.db_path).run_migrations()
    result = run_bootstrap(
        BootstrapInput(
            bootstrap_email=args.email or settings.bootstrap_email,
            bootstrap_password=args.password or settings.bootstrap_password,
        ),
        get_auth_service(),
        get_rules().owner,
    )
    if result.created:
        print("Owner account created.")
        return 0
    if not result.success:
        for error in result.errors:
            logger.error("%s: %s", error.field, error.message)
        return 1
    print(f"Skipped: {result.skipped_reason}")
    return 0


def handle_owner_status(args: argparse.Namespace) -> int:
    status = run_check_owner_status(get_auth_service())
    payload: dict[str, object] = dict(status.to_dict())
    if status.error is not None:
        payload["error"] = status.error
    print(json.dumps(payload))
    return 1 if status.error is not None else 0


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    parser = argparse.ArgumentParser(description="Folio Sync CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply pending database migrations")

    bootstrap_parser = subparsers.add_parser(
        "bootstrap", help="Create the owner account if none exists"
    )
    bootstrap_parser.add_argument("--email", help="Defaults to FOLIO_BOOTSTRAP_EMAIL")
    bootstrap_parser.add_argument("--password", help="Defaults to FOLIO_BOOTSTRAP_PASSWORD")

    subparsers.add_parser("owner-status", help="Report whether sign-up is still open")

    args = parser.parse_args(argv)

    handlers = {
        "migrate": handle_migrate,
        "bootstrap": handle_bootstrap,
        "owner-status": handle_owner_status,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
