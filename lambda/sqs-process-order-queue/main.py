import os
import sys
import logging

# Add common_lib to path for imports
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'common_lib'))

from config_utils import load_settings
from order_manager import get_order_processor

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

settings = load_settings()
order_processor = get_order_processor(settings)


def lambda_handler(event, context):
    """
    Advance queued orders to COMPLETED

    Returns the ids of failed messages so SQS redelivers only those
    (ReportBatchItemFailures must be enabled on the event source mapping).
    """
    records = event.get('Records', [])
    logger.info(f"Processing {len(records)} order messages")

    return order_processor.process_batch(records, logger=logger)
