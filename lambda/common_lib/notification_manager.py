"""
Notification Management Module
Publishes order lifecycle events to the orders topic
"""

import json
import boto3
from botocore.exceptions import BotoCoreError, ClientError

import response_utils as resp
from exceptions import PublishError

ORDER_CREATED = 'ORDER_CREATED'
ORDER_STATUS_UPDATED = 'ORDER_STATUS_UPDATED'
ORDER_COMPLETED = 'ORDER_COMPLETED'


def build_order_event(event_type, order):
    """Build the {type, order} payload published for every order transition"""
    return {
        'type': event_type,
        'order': resp.convert_decimal(order)
    }


class NotificationPublisher:
    """Publishes events to an SNS topic"""

    def __init__(self, sns_client, topic_arn):
        self.sns = sns_client
        self.topic_arn = topic_arn

    def publish(self, message):
        """
        Publish a message to the topic

        Delivery to subscribers is owned by SNS; there is no acknowledgment
        beyond the returned message id.

        Returns:
            str: The SNS message id

        Raises:
            PublishError: If SNS rejects the request
        """
        try:
            response = self.sns.publish(
                TopicArn=self.topic_arn,
                Message=json.dumps(message)
            )
        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error']['Message']
            print(f"Failed to publish notification. Error: {error_code} - {error_message}")
            raise PublishError("Failed to publish notification", e)
        except BotoCoreError as e:
            print(f"Failed to publish notification: {str(e)}")
            raise PublishError("Failed to publish notification", e)

        print(f"Notification published. MessageId: {response['MessageId']}")
        return response['MessageId']

    def publish_order_event(self, event_type, order):
        return self.publish(build_order_event(event_type, order))


class LocalNotificationPublisher(NotificationPublisher):
    """Stand-in used when running offline; logs instead of publishing"""

    def __init__(self, topic_arn=''):
        super().__init__(None, topic_arn)

    def publish(self, message):
        print(f"Mock SNS Publish: {json.dumps({'TopicArn': self.topic_arn, 'Message': message})}")
        return 'mock-message-id'


def get_notification_publisher(settings):
    """Factory function to get the publisher for the configured environment"""
    if settings.is_offline:
        return LocalNotificationPublisher(settings.orders_topic_arn)
    return NotificationPublisher(boto3.client('sns', region_name=settings.region), settings.orders_topic_arn)
