import sys
import os
import random
from argparse import ArgumentParser
from sqlalchemy.orm import Session
from datetime import date, datetime, timedelta
from decimal import Decimal
from faker import Faker

# Add the project root to the Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from expense_tracker.db.core import session_local, init_db, UserDB, CategoryDB, ExpenseDB
from expense_tracker.crud.crud_user import hash_password

fake = Faker()

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "password123"

# Rough spending range per category, in dollars
AMOUNT_RANGES = {
    "Food": (4, 80),
    "Transportation": (2, 60),
    "Housing": (800, 2200),
    "Utilities": (30, 250),
    "Entertainment": (8, 120),
    "Healthcare": (15, 400),
    "Shopping": (10, 300),
    "Education": (20, 500),
    "Personal Care": (5, 90),
    "Other": (1, 150),
}


def _random_amount(category_name: str) -> Decimal:
    low, high = AMOUNT_RANGES.get(category_name, (1, 100))
    return Decimal(str(round(random.uniform(low, high), 2)))


def _make_user(name: str, email: str) -> UserDB:
    now = datetime.utcnow()
    return UserDB(
        name=name,
        email=email,
        password_hash=hash_password(DEMO_PASSWORD),
        created_at=now,
        updated_at=now,
    )


def seed_database(users: int = 3, expenses_per_user: int = 200, days: int = 365):
    """
    Fills the database with a demo account plus random users and a year of expenses.
    """
    init_db()
    db: Session = session_local()

    try:
        # Check if data exists to prevent duplicate seeding
        if db.query(UserDB).count() > 0:
            print("Database appears to be already seeded. Exiting.")
            return

        print("Seeding database with sample data...")

        categories = db.query(CategoryDB).all()

        print("Creating users...")
        db_users = [_make_user("Demo User", DEMO_EMAIL)]
        for _ in range(users):
            db_users.append(_make_user(fake.name(), fake.unique.email().lower()))
        db.add_all(db_users)
        db.commit()

        print("Creating expenses...")
        today = date.today()
        total_expenses = 0
        for user in db_users:
            batch = []
            for _ in range(expenses_per_user):
                # A few expenses are left uncategorized
                category = random.choice(categories) if random.random() > 0.05 else None
                created = fake.date_time_between(start_date=f"-{days}d", end_date="now")
                batch.append(ExpenseDB(
                    user_id=user.id,
                    category_id=category.id if category else None,
                    description=fake.sentence(nb_words=3).rstrip("."),
                    amount=_random_amount(category.name if category else "Other"),
                    expense_date=today - timedelta(days=random.randint(0, days)),
                    created_at=created,
                    updated_at=created,
                ))
            db.add_all(batch)
            db.commit()
            total_expenses += len(batch)
            print(f"  {user.email}: {len(batch)} expenses")

        print("\n" + "=" * 60)
        print("Seeding complete!")
        print(f"  Users created: {len(db_users)}")
        print(f"  Expenses created: {total_expenses}")
        print(f"  Demo login: {DEMO_EMAIL} / {DEMO_PASSWORD}")
        print("=" * 60)

    except Exception as e:
        print(f"An error occurred: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def main():
    parser = ArgumentParser(description="Seed the expense tracker database with sample data")

    parser.add_argument(
        '--users',
        type=int,
        default=3,
        help='Number of random users besides the demo account (default: 3)'
    )

    parser.add_argument(
        '--expenses',
        type=int,
        default=200,
        help='Expenses per user (default: 200)'
    )

    parser.add_argument(
        '--days',
        type=int,
        default=365,
        help='Spread expenses over this many past days (default: 365)'
    )

    args = parser.parse_args()

    seed_database(users=args.users, expenses_per_user=args.expenses, days=args.days)


if __name__ == "__main__":
    main()
