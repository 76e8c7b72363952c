"""Data access layer for finance entities"""

import uuid
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from finance_gateway.domain.models import BenefitBalance, TransactionDraft
from finance_gateway.infrastructure.database.mappers import from_benefits
from finance_gateway.infrastructure.database.models import (
    FinancialProfileRecord,
    RecurringCostRecord,
    StockItemRecord,
    SubscriptionRecord,
    TransactionRecord,
)


class ProfileRepository:
    """Repository for financial profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_owner(self, owner_id: str, for_update: bool = False) -> Optional[FinancialProfileRecord]:
        """
        Fetch the owner's profile.

        for_update locks the row until commit so concurrent benefit
        deductions against the same profile are serialised.
        """
        query = self.db.query(FinancialProfileRecord).filter(FinancialProfileRecord.owner_id == owner_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def save_benefits(self, profile: FinancialProfileRecord, balances: List[BenefitBalance]) -> None:
        profile.benefits = from_benefits(balances)
        self.db.flush()


class TransactionRepository:
    """Repository for transactions and installment groups"""

    def __init__(self, db: Session):
        self.db = db

    def create_many(self, owner_id: str, drafts: Sequence[TransactionDraft]) -> List[TransactionRecord]:
        """Add every draft to the session; committed by the caller together with balances"""
        rows = [
            TransactionRecord(
                owner_id=owner_id,
                name=draft.name,
                amount=draft.amount,
                type=draft.type.value,
                category=draft.category.value,
                payment_method=draft.payment_method.value,
                date=draft.date,
                installments=draft.installments,
                current_installment=draft.current_installment,
                installment_group_id=draft.installment_group_id,
            )
            for draft in drafts
        ]
        self.db.add_all(rows)
        self.db.flush()  # Get IDs without committing
        return rows

    def list_by_owner(
        self,
        owner_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[TransactionRecord]:
        query = self.db.query(TransactionRecord).filter(TransactionRecord.owner_id == owner_id)
        if start is not None:
            query = query.filter(TransactionRecord.date >= start)
        if end is not None:
            query = query.filter(TransactionRecord.date <= end)
        return query.order_by(TransactionRecord.date.asc()).all()

    def get(self, owner_id: str, transaction_id: uuid.UUID) -> Optional[TransactionRecord]:
        return (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.owner_id == owner_id, TransactionRecord.id == transaction_id)
            .first()
        )

    def delete_with_group(self, owner_id: str, transaction_ids: Sequence[uuid.UUID]) -> int:
        """
        Delete the given transactions; any installment among them takes its
        whole group along. Returns the number of rows removed.
        """
        rows = (
            self.db.query(TransactionRecord)
            .filter(TransactionRecord.owner_id == owner_id, TransactionRecord.id.in_(list(transaction_ids)))
            .all()
        )
        if not rows:
            return 0

        group_ids = {row.installment_group_id for row in rows if row.installment_group_id}
        single_ids = [row.id for row in rows if not row.installment_group_id]

        deleted = 0
        if group_ids:
            deleted += (
                self.db.query(TransactionRecord)
                .filter(
                    TransactionRecord.owner_id == owner_id,
                    TransactionRecord.installment_group_id.in_(group_ids),
                )
                .delete(synchronize_session=False)
            )
        if single_ids:
            deleted += (
                self.db.query(TransactionRecord)
                .filter(TransactionRecord.owner_id == owner_id, TransactionRecord.id.in_(single_ids))
                .delete(synchronize_session=False)
            )
        return deleted


class CostRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_owner(self, owner_id: str) -> List[RecurringCostRecord]:
        return self.db.query(RecurringCostRecord).filter(RecurringCostRecord.owner_id == owner_id).all()


class SubscriptionRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_owner(self, owner_id: str) -> List[SubscriptionRecord]:
        return self.db.query(SubscriptionRecord).filter(SubscriptionRecord.owner_id == owner_id).all()


class StockRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_owner(self, owner_id: str) -> List[StockItemRecord]:
        return self.db.query(StockItemRecord).filter(StockItemRecord.owner_id == owner_id).all()
