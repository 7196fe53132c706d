"""
Validation utilities for request payloads
Each validator returns a (valid, error_message) tuple
"""

ORDER_STATUSES = ('PENDING', 'PROCESSING', 'COMPLETED', 'CANCELLED')


class ProductDataValidator:
    """Validation for product payloads"""

    @staticmethod
    def validate_product_data(product_id, name):
        if not isinstance(product_id, str) or not isinstance(name, str):
            return False, '"productId" and "name" must be strings'
        if not product_id.strip() or not name.strip():
            return False, '"productId" and "name" must be non-empty strings'
        return True, ""

    @staticmethod
    def validate_product_name(name):
        if not isinstance(name, str):
            return False, '"name" must be a string'
        return True, ""


class OrderDataValidator:
    """Validation for order payloads"""

    @staticmethod
    def validate_products(products):
        if not isinstance(products, list) or len(products) == 0:
            return False, "Products array is required"

        for i, item in enumerate(products):
            if not isinstance(item, dict):
                return False, f"Product {i+1} must be an object"

            product_id = item.get('productId')
            if not isinstance(product_id, str) or not product_id:
                return False, f"Product {i+1}: productId must be a non-empty string"

            quantity = item.get('quantity')
            # bool is an int subclass
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                return False, f"Product {i+1}: quantity must be a positive integer"

        return True, ""

    @staticmethod
    def validate_status(status):
        if status not in ORDER_STATUSES:
            return False, "Invalid status"
        return True, ""
