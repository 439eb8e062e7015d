"""Example: drive the session and accessors without Flask.

Controllers are a thin layer; everything below works the same from a script.
"""

import importlib
import sys

from config import get_settings_module

from src.employee_portal.employee_portal.container import build_container


def main(email: str, password: str) -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        storage_root=settings.STORAGE_ROOT,
        storage_public_url=settings.STORAGE_PUBLIC_URL,
    )
    container.session.restore()
    container.session.sign_in(email, password)

    scope = container.portal.require_scope()
    failures = scope.load()
    print("profile:", scope.profile.record)
    print("passes expiring soon:", [p.to_dict() for p in scope.passes.expiring_soon()])
    print("failures:", {name: str(exc) for name, exc in failures.items()})

    container.session.sign_out()


if __name__ == "__main__":
    main(sys.argv[1], sys.argv[2])
