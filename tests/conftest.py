import importlib.util
import json
import os

import pytest

from config_utils import Settings
from exceptions import EnqueueError, PublishError, StorageError
from notification_manager import build_order_event
from order_manager import OrderManager, OrderProcessor
from product_manager import ProductManager

LAMBDA_DIR = os.path.join(os.path.dirname(__file__), '..', 'lambda')


class InMemoryRecordStore:
    """Dict-backed stand-in for RecordStore with the same semantics"""

    def __init__(self):
        self.tables = {}
        self.updates = []
        self.fail_on = set()

    def _check(self, operation):
        if operation in self.fail_on:
            raise StorageError(f"{operation} failed", RuntimeError('boom'))

    @staticmethod
    def _key(key):
        return tuple(sorted(key.items()))

    def get(self, table, key):
        self._check('get')
        record = self.tables.get(table, {}).get(self._key(key))
        return json.loads(json.dumps(record)) if record else None

    def put(self, table, record):
        self._check('put')
        key_name = 'orderId' if 'orderId' in record else 'productId'
        self.tables.setdefault(table, {})[self._key({key_name: record[key_name]})] = json.loads(json.dumps(record))
        return True

    def update_field(self, table, key, field, value, must_exist=False):
        self._check('update_field')
        rows = self.tables.setdefault(table, {})
        record = rows.get(self._key(key))
        if record is None:
            if must_exist:
                return None
            record = dict(key)
            rows[self._key(key)] = record
        record[field] = value
        self.updates.append((table, dict(key), field, value))
        return json.loads(json.dumps(record))

    def delete(self, table, key):
        self._check('delete')
        self.tables.get(table, {}).pop(self._key(key), None)
        return True

    def query_by_index(self, table, index_name, field, value):
        self._check('query_by_index')
        return [json.loads(json.dumps(r)) for r in self.tables.get(table, {}).values() if r.get(field) == value]


class RecordingPublisher:
    def __init__(self):
        self.messages = []
        self.fail = False

    def publish(self, message):
        if self.fail:
            raise PublishError("Failed to publish notification", RuntimeError('boom'))
        self.messages.append(message)
        return f"msg-{len(self.messages)}"

    def publish_order_event(self, event_type, order):
        return self.publish(build_order_event(event_type, order))

    def types(self):
        return [m['type'] for m in self.messages]


class RecordingQueue:
    def __init__(self):
        self.messages = []
        self.fail = False

    def enqueue(self, order):
        if self.fail:
            raise EnqueueError("Failed to queue order for processing", RuntimeError('boom'))
        self.messages.append(json.dumps(order))
        return f"sqs-{len(self.messages)}"


@pytest.fixture
def settings():
    return Settings(
        products_table='products-test',
        orders_table='orders-test',
        orders_topic_arn='arn:aws:sns:us-east-1:123456789012:orders',
        orders_queue_url='https://sqs.us-east-1.amazonaws.com/123456789012/orders',
        processing_delay_seconds=0
    )


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def queue():
    return RecordingQueue()


@pytest.fixture
def product_manager(store, settings):
    return ProductManager(store, settings)


@pytest.fixture
def order_manager(store, publisher, queue, settings):
    return OrderManager(store, publisher, queue, settings)


@pytest.fixture
def order_processor(store, publisher, settings):
    return OrderProcessor(store, publisher, settings, sleep=lambda seconds: None)


@pytest.fixture
def aws_env(monkeypatch):
    """Keep boto3 client construction at import time away from real credentials"""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')
    monkeypatch.delenv('IS_OFFLINE', raising=False)


@pytest.fixture
def load_lambda(aws_env):
    """Import lambda/<name>/main.py as a fresh module"""
    def _load(name):
        path = os.path.join(LAMBDA_DIR, name, 'main.py')
        module_name = 'lambda_' + name.replace('-', '_')
        spec = importlib.util.spec_from_file_location(module_name, path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module
    return _load


def api_event(user_id=None, role=None, body=None, path=None):
    """API Gateway proxy event carrying Cognito authorizer claims"""
    claims = {}
    if user_id is not None:
        claims['sub'] = user_id
    if role is not None:
        claims['custom:custom:role'] = role
    return {
        'headers': {'Content-Type': 'application/json'},
        'pathParameters': path,
        'body': json.dumps(body) if body is not None else None,
        'requestContext': {'authorizer': {'claims': claims}}
    }


def response_body(response):
    return json.loads(response['body'])
