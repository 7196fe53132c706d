from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from auth_utils import CallerIdentity
from config_utils import Settings
from db_utils import RecordStore, get_dynamodb_client
from exceptions import BusinessLogicError, StorageError
from order_manager import OrderManager


def client_error(code, operation='UpdateItem'):
    return ClientError({'Error': {'Code': code, 'Message': f'{code} happened'}}, operation)


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def record_store(client):
    return RecordStore(client)


class TestGet:

    def test_deserializes_item(self, record_store, client):
        client.get_item.return_value = {'Item': {
            'orderId': {'S': 'o-1'},
            'products': {'L': [{'M': {'productId': {'S': 'p'}, 'quantity': {'N': '2'}}}]},
        }}

        record = record_store.get('orders', {'orderId': 'o-1'})

        assert record == {'orderId': 'o-1', 'products': [{'productId': 'p', 'quantity': Decimal('2')}]}
        client.get_item.assert_called_once_with(
            TableName='orders', Key={'orderId': {'S': 'o-1'}}, ConsistentRead=True
        )

    def test_absent_item(self, record_store, client):
        client.get_item.return_value = {}
        assert record_store.get('orders', {'orderId': 'missing'}) is None

    def test_client_error_becomes_storage_error(self, record_store, client):
        client.get_item.side_effect = client_error('ProvisionedThroughputExceededException', 'GetItem')
        with pytest.raises(StorageError) as excinfo:
            record_store.get('orders', {'orderId': 'o-1'})
        assert excinfo.value.status_code == 500

    def test_connection_error_becomes_storage_error(self, record_store, client):
        client.get_item.side_effect = EndpointConnectionError(endpoint_url='http://localhost:8000')
        with pytest.raises(StorageError):
            record_store.get('orders', {'orderId': 'o-1'})


class TestPutAndDelete:

    def test_put_serializes_record(self, record_store, client):
        record_store.put('products', {'productId': 'p-1', 'name': 'Widget'})
        client.put_item.assert_called_once_with(
            TableName='products', Item={'productId': {'S': 'p-1'}, 'name': {'S': 'Widget'}}
        )

    def test_put_failure(self, record_store, client):
        client.put_item.side_effect = client_error('ResourceNotFoundException', 'PutItem')
        with pytest.raises(StorageError):
            record_store.put('products', {'productId': 'p-1', 'name': 'Widget'})

    def test_put_converts_floats_to_numbers(self, record_store, client):
        record_store.put('orders', {'orderId': 'o-1', 'products': [{'productId': 'p', 'quantity': 1, 'price': 9.99}]})

        item = client.put_item.call_args.kwargs['Item']
        assert item['products'] == {'L': [{'M': {
            'productId': {'S': 'p'}, 'quantity': {'N': '1'}, 'price': {'N': '9.99'},
        }}]}

    @pytest.mark.parametrize('value', [10 ** 40, float('nan'), object()])
    def test_unserializable_record_is_storage_error(self, record_store, client, value):
        with pytest.raises(StorageError) as excinfo:
            record_store.put('orders', {'orderId': 'o-1', 'quantity': value})
        assert excinfo.value.status_code == 500
        client.put_item.assert_not_called()

    def test_delete(self, record_store, client):
        assert record_store.delete('products', {'productId': 'p-1'}) is True
        client.delete_item.assert_called_once_with(TableName='products', Key={'productId': {'S': 'p-1'}})


class TestUpdateField:

    def test_upsert_update(self, record_store, client):
        client.update_item.return_value = {'Attributes': {'productId': {'S': 'p-1'}, 'name': {'S': 'New'}}}

        record = record_store.update_field('products', {'productId': 'p-1'}, 'name', 'New')

        assert record == {'productId': 'p-1', 'name': 'New'}
        kwargs = client.update_item.call_args.kwargs
        assert kwargs['UpdateExpression'] == 'SET #field = :value'
        assert kwargs['ExpressionAttributeNames'] == {'#field': 'name'}
        assert kwargs['ExpressionAttributeValues'] == {':value': {'S': 'New'}}
        assert kwargs['ReturnValues'] == 'ALL_NEW'
        assert 'ConditionExpression' not in kwargs

    def test_must_exist_adds_condition(self, record_store, client):
        client.update_item.return_value = {'Attributes': {'orderId': {'S': 'o-1'}, 'status': {'S': 'CANCELLED'}}}

        record_store.update_field('orders', {'orderId': 'o-1'}, 'status', 'CANCELLED', must_exist=True)

        kwargs = client.update_item.call_args.kwargs
        assert kwargs['ConditionExpression'] == 'attribute_exists(#key)'
        assert kwargs['ExpressionAttributeNames'] == {'#field': 'status', '#key': 'orderId'}

    def test_must_exist_missing_key_returns_none(self, record_store, client):
        client.update_item.side_effect = client_error('ConditionalCheckFailedException')
        assert record_store.update_field('orders', {'orderId': 'x'}, 'status', 'PENDING', must_exist=True) is None

    def test_conditional_failure_without_must_exist_is_storage_error(self, record_store, client):
        client.update_item.side_effect = client_error('ConditionalCheckFailedException')
        with pytest.raises(StorageError):
            record_store.update_field('orders', {'orderId': 'x'}, 'status', 'PENDING')


class TestQueryByIndex:

    def test_follows_pagination(self, record_store, client):
        client.query.side_effect = [
            {'Items': [{'orderId': {'S': 'o-1'}, 'userId': {'S': 'u'}}], 'LastEvaluatedKey': {'orderId': {'S': 'o-1'}}},
            {'Items': [{'orderId': {'S': 'o-2'}, 'userId': {'S': 'u'}}]},
        ]

        records = record_store.query_by_index('orders', 'UserIdIndex', 'userId', 'u')

        assert [r['orderId'] for r in records] == ['o-1', 'o-2']
        first, second = client.query.call_args_list
        assert first.kwargs['IndexName'] == 'UserIdIndex'
        assert first.kwargs['KeyConditionExpression'] == '#field = :value'
        assert 'ExclusiveStartKey' not in first.kwargs
        assert second.kwargs['ExclusiveStartKey'] == {'orderId': {'S': 'o-1'}}

    def test_query_failure(self, record_store, client):
        client.query.side_effect = client_error('ValidationException', 'Query')
        with pytest.raises(StorageError):
            record_store.query_by_index('orders', 'UserIdIndex', 'userId', 'u')


class TestOrderCreationThroughRecordStore:

    @pytest.fixture
    def order_manager(self, record_store, publisher, queue, settings):
        return OrderManager(record_store, publisher, queue, settings)

    def test_float_in_line_item_is_stored(self, order_manager, client, queue):
        order = order_manager.create_order(
            CallerIdentity('u', 'customer'), [{'productId': 'p', 'quantity': 1, 'price': 9.99}]
        )

        item = client.put_item.call_args.kwargs['Item']
        assert item['products']['L'][0]['M']['price'] == {'N': '9.99'}
        assert len(queue.messages) == 1
        assert order['products'][0]['price'] == 9.99

    def test_oversized_quantity_reports_create_failure(self, order_manager, client, publisher, queue):
        with pytest.raises(BusinessLogicError) as excinfo:
            order_manager.create_order(CallerIdentity('u', 'customer'), [{'productId': 'p', 'quantity': 10 ** 40}])

        assert excinfo.value.status_code == 500
        assert excinfo.value.message == 'Could not create order'
        client.put_item.assert_not_called()
        assert publisher.messages == []
        assert queue.messages == []


def test_client_uses_local_endpoint(monkeypatch):
    created = {}

    def fake_client(service, **kwargs):
        created.update(service=service, **kwargs)
        return MagicMock()

    monkeypatch.setattr('db_utils.boto3.client', fake_client)
    get_dynamodb_client(Settings(is_offline=True, dynamodb_endpoint_url='http://localhost:8000'))

    assert created == {'service': 'dynamodb', 'region_name': 'us-east-1', 'endpoint_url': 'http://localhost:8000'}
