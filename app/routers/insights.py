"""
Insights Router
Spending patterns, expense predictions, recommendations and the dashboard
summary, all derived from the caller's stored transactions.
"""
import logging
from datetime import date
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException

from app.core.config import settings
from app.core.security import get_current_user_id
from app.db import dynamo
from app.utils.aggregator import months_ago
from app.utils.analyzer import FinanceAnalyzer

router = APIRouter()
logger = logging.getLogger(__name__)
finance_analyzer = FinanceAnalyzer(
    savings_target=settings.SAVINGS_TARGET_PERCENT,
    category_share_limit=settings.CATEGORY_SHARE_LIMIT_PERCENT,
    spike_ratio=settings.SPENDING_SPIKE_RATIO,
    forecast_minimum_transactions=settings.FORECAST_MIN_TRANSACTIONS,
)


def _load_transactions(user_id: str, months: Optional[int] = None):
    since = months_ago(date.today(), months) if months else None
    transactions = dynamo.get_transactions_for_user(user_id, since)
    logger.info(f"Loaded {len(transactions)} transactions for user {user_id}")
    return transactions


@router.get("/patterns")
def get_patterns(user_id: str = Depends(get_current_user_id)) -> Dict:
    try:
        transactions = _load_transactions(user_id, months=6)
        return finance_analyzer.patterns(transactions).to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error computing patterns for user {user_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/predictions")
def get_predictions(user_id: str = Depends(get_current_user_id)) -> Dict:
    try:
        transactions = _load_transactions(user_id, months=6)
        return finance_analyzer.predictions(transactions).to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error computing predictions for user {user_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/recommendations")
def get_recommendations(user_id: str = Depends(get_current_user_id)) -> Dict:
    try:
        transactions = _load_transactions(user_id, months=3)
        return finance_analyzer.recommendations(transactions).to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error computing recommendations for user {user_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/dashboard")
def get_dashboard(user_id: str = Depends(get_current_user_id)) -> Dict:
    try:
        transactions = _load_transactions(user_id)
        return finance_analyzer.dashboard(transactions)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error building dashboard for user {user_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
