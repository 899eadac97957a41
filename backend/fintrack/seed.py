"""
Seed script for a demo plan with accounts and recurring transactions.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from fintrack.database import SessionLocal, init_db
from fintrack.models import Account, AccountType, CreditAccount, Loan, InvestmentAccount, InvestmentType, Plan
from fintrack.services.recurrence import add_months
from fintrack.services.recurring_repository import RecurringRepository
from fintrack.services import recurring_service


def seed_demo_data(db: Optional[Session] = None, today: Optional[date] = None) -> Optional[Plan]:
    """Seed one plan over every account category, fed by a few monthly series."""
    owns_session = db is None
    db = db or SessionLocal()
    today = today or date.today()

    try:
        # Check if a plan already exists
        existing_count = db.query(Plan).count()
        if existing_count > 0:
            print(f"Demo data already seeded ({existing_count} plans exist)")
            return None

        checking = Account(name="Everyday Checking", account_type=AccountType.checking, balance=Decimal("2500.00"))
        savings = Account(
            name="High Yield Savings", account_type=AccountType.savings, balance=Decimal("10000.00"), apr=Decimal("4.5")
        )
        card = CreditAccount(
            name="Rewards Card", balance=Decimal("450.00"), credit_limit=Decimal("5000.00"), interest_rate=Decimal("22.9")
        )
        car_loan = Loan(name="Car Loan", balance=Decimal("12000.00"), interest_rate=Decimal("6.4"), term_months=60)
        brokerage = InvestmentAccount(
            name="Index Fund",
            account_type=InvestmentType.brokerage,
            balance=Decimal("15000.00"),
            expected_return=Decimal("7.0"),
        )

        start = today.replace(day=1)
        plan = Plan(
            name="Next 12 Months",
            description="Cash flow across all accounts for the coming year",
            start_date=start,
            end_date=add_months(start, 12),
            target_amount=Decimal("25000.00"),
        )
        plan.accounts.extend([checking, savings])
        plan.credit_accounts.append(card)
        plan.loans.append(car_loan)
        plan.investment_accounts.append(brokerage)
        db.add(plan)
        db.commit()

        repo = RecurringRepository(db)
        series_data = [
            (
                {"name": "Paycheck", "recurrence_type": "weekly", "recurrence_interval": 2, "start_date": start},
                {"transaction_type": "deposit", "to_account_id": checking.id, "amount": "2100.00"},
            ),
            (
                {"name": "Rent", "recurrence_type": "monthly", "start_date": start},
                {"transaction_type": "withdraw", "from_account_id": checking.id, "amount": "1650.00"},
            ),
            (
                {"name": "Card Payment", "recurrence_type": "monthly", "start_date": start.replace(day=20)},
                {
                    "transaction_type": "credit_card_payment",
                    "from_account_id": checking.id,
                    "to_account_id": card.id,
                    "amount": "400.00",
                },
            ),
            (
                {"name": "Monthly Investing", "recurrence_type": "monthly", "start_date": start.replace(day=15)},
                {
                    "transaction_type": "transfer",
                    "from_account_id": checking.id,
                    "to_account_id": brokerage.id,
                    "amount": "300.00",
                },
            ),
        ]
        for series_fields, template_fields in series_data:
            recurring_service.create_recurring_series(
                repo, series_fields, template_fields, horizon_hint=plan.end_date, today=today
            )

        print(f"Successfully seeded plan '{plan.name}' with {len(series_data)} recurring series")
        return plan

    except Exception as e:
        print(f"Error seeding demo data: {e}")
        db.rollback()
        return None
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    init_db()
    seed_demo_data()
