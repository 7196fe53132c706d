"""
SQS utilities for the order processing queue
"""

import json
import boto3
from botocore.exceptions import BotoCoreError, ClientError

import response_utils as resp
from exceptions import EnqueueError


def get_sqs_client(settings):
    if settings.sqs_endpoint_url:
        print(f"Creating SQS client with endpoint: {settings.sqs_endpoint_url}")
        return boto3.client('sqs', region_name=settings.region, endpoint_url=settings.sqs_endpoint_url)
    return boto3.client('sqs', region_name=settings.region)


class OrderQueue:
    """Point-to-point queue feeding the order processing consumer"""

    def __init__(self, sqs_client, queue_url):
        self.sqs = sqs_client
        self.queue_url = queue_url

    def enqueue(self, order):
        """
        Send the full order as the message body

        Returns:
            str: The SQS message id

        Raises:
            EnqueueError: If the message could not be sent
        """
        try:
            response = self.sqs.send_message(
                QueueUrl=self.queue_url,
                MessageBody=json.dumps(resp.convert_decimal(order))
            )
        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error']['Message']
            print(f"Failed to queue order {order.get('orderId')}. Error: {error_code} - {error_message}")
            raise EnqueueError("Failed to queue order for processing", e)
        except BotoCoreError as e:
            print(f"Failed to queue order {order.get('orderId')}: {str(e)}")
            raise EnqueueError("Failed to queue order for processing", e)

        print(f"Order {order.get('orderId')} queued for processing. MessageId: {response['MessageId']}")
        return response['MessageId']


def get_order_queue(settings):
    """Factory function to get the order processing queue"""
    return OrderQueue(get_sqs_client(settings), settings.orders_queue_url)
