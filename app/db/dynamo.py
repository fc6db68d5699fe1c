import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from app.core.config import settings

logger = logging.getLogger(__name__)

# Initialize DynamoDB resource
dynamodb = boto3.resource("dynamodb", region_name=settings.DYNAMO_REGION)

# Get table references
transactions_table = dynamodb.Table(settings.DYNAMO_TRANSACTIONS_TABLE)
tax_table = dynamodb.Table(settings.DYNAMO_TAX_TABLE)


def put_transaction(transaction_item: dict):
    """Insert or replace a transaction for a user."""
    try:
        transactions_table.put_item(Item=_convert_for_dynamo(transaction_item))
        return True
    except ClientError as e:
        logger.error(f"put_transaction failed: {e.response['Error']['Message']}")
        return False


def get_transactions_for_user(user_id: str, since: Optional[date] = None):
    """
    Query all transactions for a user, optionally only those dated on or after
    ``since``. The sort key starts with the ISO date, so 'YYYY-MM-DD#...'
    compares chronologically.
    """
    condition = Key("user_id").eq(user_id)
    if since is not None:
        condition = condition & Key("transaction_id").gte(since.isoformat())

    items = []
    query_kwargs = {"KeyConditionExpression": condition}
    try:
        while True:
            response = transactions_table.query(**query_kwargs)
            items.extend(response["Items"])
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            query_kwargs["ExclusiveStartKey"] = last_key
    except ClientError as e:
        logger.error(f"get_transactions_for_user failed: {e.response['Error']['Message']}")
        return []
    return [_from_dynamo(item) for item in items]


def get_transaction(user_id: str, transaction_id: str):
    """Fetch a single transaction item."""
    try:
        response = transactions_table.get_item(Key={"user_id": user_id, "transaction_id": transaction_id})
        item = response.get("Item")
        return _from_dynamo(item) if item else None
    except ClientError as e:
        logger.error(f"get_transaction failed: {e.response['Error']['Message']}")
        return None


def update_transaction(user_id: str, transaction_id: str, updates: dict):
    """
    Apply partial updates to a transaction. Returns the updated item or None.
    """
    if not updates:
        return None

    update_expression_parts = []
    expression_attribute_values = {}
    expression_attribute_names = {}

    for idx, (key, value) in enumerate(updates.items()):
        placeholder = f"#f{idx}"
        value_placeholder = f":v{idx}"
        update_expression_parts.append(f"{placeholder} = {value_placeholder}")
        expression_attribute_names[placeholder] = key
        expression_attribute_values[value_placeholder] = value

    update_expression = "SET " + ", ".join(update_expression_parts)

    try:
        response = transactions_table.update_item(
            Key={"user_id": user_id, "transaction_id": transaction_id},
            UpdateExpression=update_expression,
            ConditionExpression="attribute_exists(transaction_id)",
            ExpressionAttributeNames=expression_attribute_names,
            ExpressionAttributeValues=_convert_for_dynamo(expression_attribute_values),
            ReturnValues="ALL_NEW",
        )
        attributes = response.get("Attributes")
        return _from_dynamo(attributes) if attributes else None
    except ClientError as e:
        logger.error(f"update_transaction failed: {e.response['Error']['Message']}")
        return None


def delete_transaction(user_id: str, transaction_id: str):
    """Delete a specific transaction item."""
    try:
        response = transactions_table.delete_item(
            Key={"user_id": user_id, "transaction_id": transaction_id},
            ReturnValues="ALL_OLD",
        )
        return "Attributes" in response
    except ClientError as e:
        logger.error(f"delete_transaction failed: {e.response['Error']['Message']}")
        return False


def get_tax_data(user_id: str, financial_year: str):
    """Get the tax profile stored for (user, financial year)."""
    try:
        response = tax_table.get_item(Key={"user_id": user_id, "financial_year": financial_year})
        item = response.get("Item")
        return _from_dynamo(item) if item else None
    except ClientError as e:
        logger.error(f"get_tax_data failed: {e.response['Error']['Message']}")
        return None


def put_tax_data(tax_item: dict):
    """Upsert a tax profile; one item per (user, financial year)."""
    item = dict(tax_item)
    item["updated_at"] = datetime.utcnow().isoformat()
    try:
        tax_table.put_item(Item=_convert_for_dynamo(item))
        return True
    except ClientError as e:
        logger.error(f"put_tax_data failed: {e.response['Error']['Message']}")
        return False


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal and dates to ISO strings for DynamoDB.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj
