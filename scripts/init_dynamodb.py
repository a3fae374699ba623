import os
import time

import boto3
from botocore.exceptions import ClientError


def get_resource():
    return boto3.resource(
        "dynamodb",
        endpoint_url=os.getenv("DYNAMODB_ENDPOINT_URL", "http://localhost:8000"),
        region_name=os.getenv("AWS_DEFAULT_REGION", "us-east-1"),
        aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", "fake"),
        aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", "fake"),
    )


def create_table_if_not_exists(table_name="CommunityApp", dynamodb=None):
    """Create DynamoDB table with GSIs if it doesn't exist"""
    dynamodb = dynamodb or get_resource()

    try:
        # Check if table exists
        table = dynamodb.Table(table_name)
        table.table_status
        print(f"Table {table_name} already exists")
        return table
    except ClientError as e:
        if e.response["Error"]["Code"] != "ResourceNotFoundException":
            raise

    table = dynamodb.create_table(
        TableName=table_name,
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
            {"AttributeName": "GSI_EventsByDate_PK", "AttributeType": "S"},
            {"AttributeName": "GSI_EventsByDate_SK", "AttributeType": "S"},
            {"AttributeName": "GSI_PostsByDate_PK", "AttributeType": "S"},
            {"AttributeName": "GSI_PostsByDate_SK", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
        GlobalSecondaryIndexes=[
            {
                # Upcoming events, ordered by start
                "IndexName": "GSI_EventsByDate",
                "KeySchema": [
                    {"AttributeName": "GSI_EventsByDate_PK", "KeyType": "HASH"},
                    {"AttributeName": "GSI_EventsByDate_SK", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
            {
                # Published posts only, ordered by publication date and creation time
                "IndexName": "GSI_PostsByDate",
                "KeySchema": [
                    {"AttributeName": "GSI_PostsByDate_PK", "KeyType": "HASH"},
                    {"AttributeName": "GSI_PostsByDate_SK", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
    )

    print(f"Creating table {table_name}...")
    table.wait_until_exists()

    print("Waiting for GSIs to be active...")
    while True:
        table.reload()
        gsi_statuses = [gsi["IndexStatus"] for gsi in table.global_secondary_indexes]
        if all(status == "ACTIVE" for status in gsi_statuses):
            break
        time.sleep(1)

    print(f"Table {table_name} created successfully")
    return table


def delete_table(table_name="CommunityApp", dynamodb=None):
    """Delete DynamoDB table"""
    dynamodb = dynamodb or get_resource()

    try:
        table = dynamodb.Table(table_name)
        table.delete()
        table.wait_until_not_exists()
        print(f"Table {table_name} deleted successfully")
    except ClientError as e:
        if e.response["Error"]["Code"] != "ResourceNotFoundException":
            raise
        print(f"Table {table_name} does not exist")


if __name__ == "__main__":
    create_table_if_not_exists()
