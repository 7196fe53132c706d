import os
import sys

# Add common_lib to path for imports
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'common_lib'))

import auth_utils as auth
import request_utils as req
import response_utils as resp
import business_logic_utils as biz
from config_utils import load_settings
from product_manager import get_product_manager

settings = load_settings()
product_manager = get_product_manager(settings)


@biz.handle_business_logic_error
def lambda_handler(event, context):
    """Delete a product (admin only); deleting a missing product still succeeds"""
    identity = auth.get_caller_identity(event, settings)
    product_id = req.get_path_param(event, 'productId')

    result = product_manager.delete_product(identity, product_id)

    return resp.success_response(result)
