"""
Order Management Module
Handles order creation, queries, status updates and asynchronous processing

None of the multi-step workflows here are transactional. Each one is an
ordered list of independent remote calls; a failure after step i leaves
steps before i applied (for example an order stored but never announced).
"""

import json
import time
import uuid
from datetime import datetime, timezone

import permission_utils as perm
import validation_utils as valid
import notification_manager as notify
from business_logic_utils import dependency_failure
from exceptions import NotFoundError, ValidationError

PENDING = 'PENDING'
PROCESSING = 'PROCESSING'
COMPLETED = 'COMPLETED'


def utc_timestamp():
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T10:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class OrderManager:
    """Manages order-related business logic"""

    def __init__(self, store, publisher, queue, settings):
        self.store = store
        self.publisher = publisher
        self.queue = queue
        self.table = settings.orders_table
        self.user_index = settings.orders_user_index

    def create_order(self, identity, products):
        """
        Complete order creation workflow

        Steps, each independently failable and never rolled back:
          1. store the order
          2. publish ORDER_CREATED
          3. enqueue the order for processing

        Args:
            identity (CallerIdentity): Resolved caller, becomes the owner
            products (list): [{productId, quantity}, ...]

        Returns:
            dict: The stored order
        """
        user_id = perm.PermissionValidator.require_user(identity)

        valid_data, error_msg = valid.OrderDataValidator.validate_products(products)
        if not valid_data:
            raise ValidationError(error_msg)

        order = {
            'orderId': str(uuid.uuid4()),
            'userId': user_id,
            'products': products,
            'status': PENDING,
            'createdAt': utc_timestamp()
        }

        with dependency_failure("Could not create order"):
            self.store.put(self.table, order)
            self.publisher.publish_order_event(notify.ORDER_CREATED, order)
            self.queue.enqueue(order)

        print(f"Order {order['orderId']} created for user {user_id}")
        return order

    def get_orders_by_user(self, identity):
        user_id = perm.PermissionValidator.require_user(identity)

        with dependency_failure("Could not retrieve orders"):
            return self.store.query_by_index(self.table, self.user_index, 'userId', user_id)

    def get_order(self, identity, order_id):
        """Return a single order; only its creator may read it, admins included"""
        user_id = perm.PermissionValidator.require_user(identity)

        with dependency_failure("Could not retrieve order"):
            order = self.store.get(self.table, {'orderId': order_id})

        if not order:
            raise NotFoundError("Order not found")

        perm.PermissionValidator.check_ownership(order, user_id)
        return order

    def update_order_status(self, identity, order_id, status):
        """
        Set an order's status

        Any of the four statuses may be set from any current status; only
        membership in the status set is checked.
        """
        perm.PermissionValidator.require_user(identity)
        perm.PermissionValidator.require_role(identity, perm.ORDER_STATUS_ROLES)

        if not isinstance(order_id, str) or not order_id:
            raise ValidationError("orderId is required in path", 'orderId')

        valid_status, error_msg = valid.OrderDataValidator.validate_status(status)
        if not valid_status:
            raise ValidationError(error_msg)

        with dependency_failure("Could not update order status"):
            updated_order = self.store.update_field(
                self.table, {'orderId': order_id}, 'status', status, must_exist=True
            )
            if updated_order is None:
                raise NotFoundError("Order not found")
            self.publisher.publish_order_event(notify.ORDER_STATUS_UPDATED, updated_order)

        return updated_order


class OrderProcessor:
    """
    Queue consumer advancing orders PENDING -> PROCESSING -> COMPLETED

    Messages are handled one at a time and failures are isolated per
    message. Redelivered messages run the full sequence again, so the final
    status is still COMPLETED but ORDER_COMPLETED is published again.
    """

    def __init__(self, store, publisher, settings, sleep=time.sleep):
        self.store = store
        self.publisher = publisher
        self.table = settings.orders_table
        self.processing_delay = settings.processing_delay_seconds
        self.sleep = sleep

    @staticmethod
    def parse_order(body):
        try:
            order = json.loads(body)
        except (json.JSONDecodeError, TypeError):
            raise ValidationError("Message body is not valid JSON")
        if not isinstance(order, dict) or not isinstance(order.get('orderId'), str) or not order['orderId']:
            raise ValidationError("Message body does not contain an orderId", 'orderId')
        return order

    def process_order(self, order):
        """Run the processing sequence for one order and return the completed record"""
        key = {'orderId': order['orderId']}

        # Stands in for inventory checks, payment capture and so on
        if self.processing_delay:
            self.sleep(self.processing_delay)

        self.store.update_field(self.table, key, 'status', PROCESSING)

        completed_order = self.store.update_field(self.table, key, 'status', COMPLETED)
        self.publisher.publish_order_event(notify.ORDER_COMPLETED, completed_order)
        return completed_order

    def process_batch(self, records, logger=None):
        """
        Process a batch of SQS records

        Args:
            records (list): SQS records with messageId and body
            logger: Logger for per-message outcomes (print when omitted)

        Returns:
            dict: {"batchItemFailures": [{"itemIdentifier": messageId}, ...]}
        """
        log_info = logger.info if logger else print
        log_error = logger.error if logger else print

        batch_item_failures = []
        for record in records:
            message_id = record.get('messageId')
            try:
                order = self.parse_order(record.get('body'))
                completed_order = self.process_order(order)
                log_info(f"Order {completed_order.get('orderId')} completed (message {message_id})")
            except Exception as e:
                log_error(f"Error processing order from message {message_id}: {type(e).__name__}: {str(e)}")
                batch_item_failures.append({'itemIdentifier': message_id})

        log_info(f"Processed {len(records)} messages, {len(batch_item_failures)} failed")
        return {'batchItemFailures': batch_item_failures}


def get_order_manager(settings, store=None, publisher=None, queue=None):
    """Factory function to get OrderManager instance"""
    import db_utils as db
    import sqs_utils as sqs
    return OrderManager(
        store if store is not None else db.get_record_store(settings),
        publisher if publisher is not None else notify.get_notification_publisher(settings),
        queue if queue is not None else sqs.get_order_queue(settings),
        settings
    )


def get_order_processor(settings, store=None, publisher=None):
    """Factory function to get OrderProcessor instance"""
    import db_utils as db
    return OrderProcessor(
        store if store is not None else db.get_record_store(settings),
        publisher if publisher is not None else notify.get_notification_publisher(settings),
        settings
    )
