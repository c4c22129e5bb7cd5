#!/usr/bin/env python
"""Idempotent seed script for the initial administrator account.

Usage:
    python backend/scripts/seed_admin.py             # create admin if missing
    python backend/scripts/seed_admin.py --dry-run   # run logic then rollback (no DB changes)
    python backend/scripts/seed_admin.py --show      # print accounts per role/status after seeding

Environment:
    SEED_ADMIN_EMAIL (default admin@medimart.com)
    SEED_ADMIN_PASSWORD (default ChangeMe123!)
"""
from __future__ import annotations
import os, sys, argparse
from sqlalchemy import select, func, text

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from medimart import create_app, get_db  # type: ignore
from medimart.models.account import Account, Base
from medimart.constants.accounts import ROLE_ADMIN, STATUS_APPROVED
import medimart.models.catalog_item  # noqa: F401
import medimart.models.banner  # noqa: F401
import medimart.models.audit  # noqa: F401


def ensure_initial_admin(session) -> bool:
    admin_email = os.getenv('SEED_ADMIN_EMAIL', 'admin@medimart.com').strip().lower()
    existing = session.execute(select(Account).where(Account.email==admin_email)).scalar_one_or_none()
    if existing:
        print(f"[INFO] Admin {admin_email} already present (role={existing.role}, status={existing.status})")
        return False
    admin = Account(
        name='Super Admin',
        email=admin_email,
        phone=os.getenv('SEED_ADMIN_PHONE', '00000000000'),
        address='Head Office',
        shop_name='Medi Mart',
        role=ROLE_ADMIN,
        # bootstrap account: the only row ever created outside the PENDING state
        status=STATUS_APPROVED,
        password_hash='',
    )
    admin.set_password(os.getenv('SEED_ADMIN_PASSWORD', 'ChangeMe123!'))
    session.add(admin)
    session.flush()
    print(f"[INFO] Created initial admin {admin_email} with temporary password.")
    return True


def summarize_accounts(session):
    return session.execute(
        select(Account.role, Account.status, func.count(Account.id)).group_by(Account.role, Account.status)
    ).all()


def main():
    parser = argparse.ArgumentParser(description='Seed the initial administrator account')
    parser.add_argument('--dry-run', action='store_true', help='Rollback instead of commit')
    parser.add_argument('--show', action='store_true', help='Print account counts per role/status')
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        session = get_db()
        try:
            # Ensure tables exist (lightweight fallback if migrations not run yet)
            session.execute(text('SELECT 1 FROM accounts LIMIT 1'))
        except Exception:
            session.rollback()
            # Auto-create schema for bootstrap; in real env prefer alembic upgrade
            Base.metadata.create_all(session.get_bind())

    with app.app_context():
        session = get_db()
        try:
            created = ensure_initial_admin(session)
            if args.show:
                print('\nAccounts by role/status:')
                for role, status, count in summarize_accounts(session):
                    print(f"  {role:<14} {status:<10} {count}")
            if args.dry_run:
                session.rollback()
                print(f"[DRY-RUN] (rolled back) Admin would be created: {created}")
            else:
                session.commit()
                print(f"[DONE] Admin created: {created}")
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

if __name__ == '__main__':
    main()
