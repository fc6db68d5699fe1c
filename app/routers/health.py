"""
Health Check Router
Simple health check endpoint
"""
from fastapi import APIRouter
from datetime import datetime
import logging

from app.core.config import settings
from app.db import dynamo

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns API status.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get("/status")
def storage_status():
    """
    Check that both DynamoDB tables are reachable.
    """
    tables = {
        "transactions": (dynamo.transactions_table, settings.DYNAMO_TRANSACTIONS_TABLE),
        "tax_data": (dynamo.tax_table, settings.DYNAMO_TAX_TABLE),
    }

    table_status = {}
    for key, (table, name) in tables.items():
        try:
            table.scan(Limit=1)
            table_status[key] = {"name": name, "status": "accessible", "region": settings.DYNAMO_REGION}
        except Exception as e:
            logger.error(f"DynamoDB check failed for {name}: {str(e)}")
            table_status[key] = {"name": name, "status": "error", "error": str(e)}

    connected = all(table["status"] == "accessible" for table in table_status.values())
    return {
        "timestamp": datetime.utcnow().isoformat(),
        "services": {"dynamodb": {"connected": connected, "tables": table_status}},
        "overall_status": "healthy" if connected else "degraded",
    }
