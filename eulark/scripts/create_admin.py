"""
Provisionnement d'un compte administrateur (hors HTTP).

Usage:
    python -m eulark.scripts.create_admin <username>            # mot de passe demandé au prompt
    python -m eulark.scripts.create_admin <username> --password <pw>

La base ciblée est celle de `DATABASE_URL` (.env / environnement); les tables manquantes
sont créées au passage.
"""
import argparse
import getpass
import sys

from eulark.config.settings import settings
from eulark.deps.services import build_services
from eulark.services.errors import ServiceError


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create an admin account.")
    parser.add_argument("username")
    parser.add_argument("--password", default=None)
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    services = build_services(settings)
    services.db.create_schema()
    try:
        admin = services.auth.provision_admin(args.username, password)
    except ServiceError as e:
        print(f"error: {e.detail}", file=sys.stderr)
        return 1
    finally:
        services.db.dispose()
    print(f"admin created: id={admin['id']} username={admin['username']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
