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
    """Set an order's status (admin only)"""
    identity = auth.get_caller_identity(event, settings)
    order_id = req.get_path_param(event, 'orderId')
    status = req.get_body_param(event, 'status')

    order = order_manager.update_order_status(identity, order_id, status)

    return resp.success_response(order)
