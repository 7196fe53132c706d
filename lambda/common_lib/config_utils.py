"""
Runtime configuration resolved once per cold start
"""

import os

LOCAL_QUEUE_NAME = 'serverless-product-catalog-api-orders-queue-local'


class Settings:
    """Holds every environment-derived value the functions need"""

    def __init__(self, products_table='products', orders_table='orders',
                 orders_user_index='UserIdIndex', orders_topic_arn='',
                 orders_queue_url='', region='us-east-1', is_offline=False,
                 dynamodb_endpoint_url=None, sqs_endpoint_url=None,
                 local_user_id='test-user-123', processing_delay_seconds=1.0):
        self.products_table = products_table
        self.orders_table = orders_table
        self.orders_user_index = orders_user_index
        self.orders_topic_arn = orders_topic_arn
        self.orders_queue_url = orders_queue_url
        self.region = region
        self.is_offline = is_offline
        self.dynamodb_endpoint_url = dynamodb_endpoint_url
        self.sqs_endpoint_url = sqs_endpoint_url
        self.local_user_id = local_user_id
        self.processing_delay_seconds = processing_delay_seconds


def _parse_bool(value):
    return str(value).strip().lower() in ('1', 'true', 'yes')


def _parse_delay(value, default):
    try:
        delay = float(value)
    except (TypeError, ValueError):
        print(f"Invalid ORDER_PROCESSING_DELAY_SECONDS value {value!r}, using {default}")
        return default
    return max(delay, 0.0)


def load_settings(environ=None):
    """
    Build Settings from environment variables

    Args:
        environ (dict): Mapping to read from (defaults to os.environ)

    Returns:
        Settings: Resolved configuration
    """
    env = os.environ if environ is None else environ

    is_offline = _parse_bool(env.get('IS_OFFLINE', 'false'))
    region = env.get('AWS_REGION', env.get('AWS_DEFAULT_REGION', 'us-east-1'))

    dynamodb_endpoint_url = None
    sqs_endpoint_url = None
    queue_url = env.get('ORDERS_QUEUE_URL', '')
    if is_offline:
        dynamodb_endpoint_url = env.get('DYNAMODB_ENDPOINT_URL', 'http://localhost:8000')
        sqs_endpoint_url = env.get('SQS_ENDPOINT_URL', 'http://localhost:9324')
        queue_url = queue_url or f"{sqs_endpoint_url}/queue/{LOCAL_QUEUE_NAME}"

    return Settings(
        products_table=env.get('PRODUCTS_TABLE', 'products'),
        orders_table=env.get('ORDERS_TABLE', 'orders'),
        orders_user_index=env.get('ORDERS_USER_INDEX', 'UserIdIndex'),
        orders_topic_arn=env.get('ORDERS_TOPIC_ARN', ''),
        orders_queue_url=queue_url,
        region=region,
        is_offline=is_offline,
        dynamodb_endpoint_url=dynamodb_endpoint_url,
        sqs_endpoint_url=sqs_endpoint_url,
        local_user_id=env.get('LOCAL_USER_ID', 'test-user-123'),
        processing_delay_seconds=_parse_delay(env.get('ORDER_PROCESSING_DELAY_SECONDS', '1'), 1.0),
    )
