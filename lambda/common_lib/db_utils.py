from decimal import Decimal, DecimalException

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from exceptions import StorageError

serializer = TypeSerializer()
deserializer = TypeDeserializer()

# Raised by TypeSerializer for unsupported types and numbers beyond DynamoDB's 38 digits
SERIALIZATION_ERRORS = (TypeError, ValueError, DecimalException)
STORE_ERRORS = (ClientError, BotoCoreError) + SERIALIZATION_ERRORS


def get_dynamodb_client(settings):
    """Create the DynamoDB client, pointed at the local endpoint when offline"""
    if settings.dynamodb_endpoint_url:
        print(f"Creating DynamoDB client with endpoint: {settings.dynamodb_endpoint_url}")
        return boto3.client('dynamodb', region_name=settings.region,
                            endpoint_url=settings.dynamodb_endpoint_url)
    return boto3.client('dynamodb', region_name=settings.region)


def to_dynamodb_value(obj):
    """Convert floats (including nested ones) to Decimal, the only number type the serializer accepts"""
    if isinstance(obj, bool):
        return obj
    elif isinstance(obj, float):
        return Decimal(str(obj))
    elif isinstance(obj, dict):
        return {k: to_dynamodb_value(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [to_dynamodb_value(item) for item in obj]
    return obj

def serialize_value(value):
    return serializer.serialize(to_dynamodb_value(value))

def serialize_item(item):
    return {k: serialize_value(v) for k, v in item.items()}

def deserialize_item(item):
    return {k: deserializer.deserialize(v) for k, v in item.items()} if item else None


def _describe_error(e):
    if isinstance(e, ClientError):
        error = e.response.get('Error', {})
        return f"{error.get('Code')} - {error.get('Message')}"
    return str(e)


class RecordStore:
    """
    Single-item reads and writes plus secondary-index queries against DynamoDB

    Every failure of the underlying client surfaces as StorageError, and so
    does a record the serializer cannot encode. No retries happen here.
    """

    def __init__(self, client):
        self.client = client

    def get(self, table, key):
        """Return the record for key, or None when absent"""
        try:
            result = self.client.get_item(
                TableName=table,
                Key=serialize_item(key),
                ConsistentRead=True
            )
        except STORE_ERRORS as e:
            print(f"get: Error reading {key} from {table}: {_describe_error(e)}")
            raise StorageError(f"Failed to read from {table}", e)
        return deserialize_item(result.get('Item'))

    def put(self, table, record):
        """Unconditional upsert of the whole record"""
        try:
            self.client.put_item(
                TableName=table,
                Item=serialize_item(record)
            )
        except STORE_ERRORS as e:
            print(f"put: Error writing to {table}: {_describe_error(e)}")
            raise StorageError(f"Failed to write to {table}", e)
        return True

    def update_field(self, table, key, field, value, must_exist=False):
        """
        Set a single attribute and return the full updated record

        Args:
            table (str): Table name
            key (dict): Primary key of the record
            field (str): Attribute to set
            value: New value
            must_exist (bool): When False a missing key is created holding
                only the key and the field. When True a missing key leaves
                the table untouched and None is returned.

        Returns:
            dict: Updated record, or None if must_exist and the key is absent
        """
        names = {'#field': field}
        params = {
            'TableName': table,
            'UpdateExpression': 'SET #field = :value',
            'ReturnValues': 'ALL_NEW'
        }
        if must_exist:
            key_name = next(iter(key))
            names['#key'] = key_name
            params['ConditionExpression'] = 'attribute_exists(#key)'
        params['ExpressionAttributeNames'] = names

        try:
            params['Key'] = serialize_item(key)
            params['ExpressionAttributeValues'] = {':value': serialize_value(value)}
            result = self.client.update_item(**params)
        except ClientError as e:
            if must_exist and e.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException':
                print(f"update_field: {key} not found in {table}")
                return None
            print(f"update_field: Error updating {field} on {key} in {table}: {_describe_error(e)}")
            raise StorageError(f"Failed to update {table}", e)
        except (BotoCoreError,) + SERIALIZATION_ERRORS as e:
            print(f"update_field: Error updating {field} on {key} in {table}: {_describe_error(e)}")
            raise StorageError(f"Failed to update {table}", e)
        return deserialize_item(result.get('Attributes'))

    def delete(self, table, key):
        """Delete by key; deleting an absent key succeeds"""
        try:
            self.client.delete_item(
                TableName=table,
                Key=serialize_item(key)
            )
        except STORE_ERRORS as e:
            print(f"delete: Error deleting {key} from {table}: {_describe_error(e)}")
            raise StorageError(f"Failed to delete from {table}", e)
        return True

    def query_by_index(self, table, index_name, field, value):
        """Return every record whose index attribute equals value"""
        items = []
        try:
            params = {
                'TableName': table,
                'IndexName': index_name,
                'KeyConditionExpression': '#field = :value',
                'ExpressionAttributeNames': {'#field': field},
                'ExpressionAttributeValues': {':value': serialize_value(value)}
            }
            while True:
                result = self.client.query(**params)
                items.extend(deserialize_item(item) for item in result.get('Items', []))
                last_key = result.get('LastEvaluatedKey')
                if not last_key:
                    break
                params['ExclusiveStartKey'] = last_key
        except STORE_ERRORS as e:
            print(f"query_by_index: Error querying {index_name} on {table}: {_describe_error(e)}")
            raise StorageError(f"Failed to query {table}", e)
        return items


def get_record_store(settings):
    """Factory function to get a RecordStore bound to the configured DynamoDB endpoint"""
    return RecordStore(get_dynamodb_client(settings))
