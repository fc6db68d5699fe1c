import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.security import get_current_user_id
from app.db import dynamo
from app.models.transaction import (
    TransactionCreate,
    TransactionInDB,
    TransactionPublic,
    TransactionUpdate,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[TransactionPublic])
def list_transactions(user_id: str = Depends(get_current_user_id)):
    """All transactions for the caller, newest first."""
    transactions = dynamo.get_transactions_for_user(user_id)
    return sorted(transactions, key=lambda tx: tx["transaction_id"], reverse=True)


@router.post("/", response_model=TransactionPublic, status_code=status.HTTP_201_CREATED)
def create_transaction(transaction: TransactionCreate, user_id: str = Depends(get_current_user_id)):
    transaction_db = TransactionInDB(user_id=user_id, **transaction.model_dump())
    success = dynamo.put_transaction(transaction_db.model_dump(mode="json"))
    if not success:
        raise HTTPException(status_code=500, detail="Failed to save transaction")
    logger.info(f"Created transaction {transaction_db.transaction_id} for user {user_id}")
    return TransactionPublic(**transaction_db.model_dump())


@router.put("/{transaction_id}", response_model=TransactionPublic)
def update_transaction(
    transaction_id: str,
    transaction_update: TransactionUpdate,
    user_id: str = Depends(get_current_user_id),
):
    mutable_fields = transaction_update.model_dump(mode="json", exclude_unset=True)
    if not mutable_fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    if "date" not in mutable_fields:
        updated = dynamo.update_transaction(user_id, transaction_id, mutable_fields)
        if not updated:
            raise HTTPException(status_code=404, detail="Transaction not found")
        return TransactionPublic(**updated)

    # The sort key embeds the date, so a new date means a new item.
    existing = dynamo.get_transaction(user_id, transaction_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Transaction not found")

    existing.pop("transaction_id")
    existing.update(mutable_fields)
    moved = TransactionInDB(**existing)
    if not dynamo.put_transaction(moved.model_dump(mode="json")):
        raise HTTPException(status_code=500, detail="Failed to save transaction")
    dynamo.delete_transaction(user_id, transaction_id)
    return TransactionPublic(**moved.model_dump())


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(transaction_id: str, user_id: str = Depends(get_current_user_id)):
    deleted = dynamo.delete_transaction(user_id, transaction_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return None
