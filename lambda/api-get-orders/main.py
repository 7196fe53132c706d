import os
import sys

# Add common_lib to path for imports
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'common_lib'))

import auth_utils as auth
import request_utils as req
import response_utils as resp
import business_logic_utils as biz
from config_utils import load_settings
from order_manager import get_order_manager

settings = load_settings()
order_manager = get_order_manager(settings)


@biz.handle_business_logic_error
def lambda_handler(event, context):
    """List the caller's orders, or fetch one of them when orderId is in the path"""
    identity = auth.get_caller_identity(event, settings)
    order_id = req.get_path_param(event, 'orderId')

    if order_id:
        result = order_manager.get_order(identity, order_id)
    else:
        result = order_manager.get_orders_by_user(identity)

    return resp.success_response(result)
