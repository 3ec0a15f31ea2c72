from __future__ import annotations

import argparse
from getpass import getpass

from account_console.registry import AccountRegistry, RegistryError
from account_console.shared.config import ConsoleConfig


def main() -> int:
    parser = argparse.ArgumentParser(description="Add an account to the registry")
    parser.add_argument("name", help="account name")
    parser.add_argument("--hardware", metavar="ADDRESS", help="add a hardware address")
    parser.add_argument("--storage-dir", help="registry directory")
    args = parser.parse_args()

    config = ConsoleConfig.load(args.storage_dir)
    registry = AccountRegistry(config.storage_dir)

    try:
        if args.hardware:
            account = registry.add_hardware_account(args.hardware, args.name)
        else:
            password = getpass("Account password: ")
            if password != getpass("Repeat password: "):
                print("passwords do not match")
                return 1
            secret = getpass("Secret key (hex, empty to generate): ").strip() or None
            account = registry.create_account(args.name, password, secret=secret)
    except RegistryError as exc:
        print(f"failed to add account: {exc}")
        return 1

    print(f"updated {registry.accounts_file}")
    print(f"address: {account.address}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
