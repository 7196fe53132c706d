"""
Product Management Module
Role-gated CRUD over single product records
"""

import permission_utils as perm
import validation_utils as valid
from business_logic_utils import dependency_failure
from exceptions import NotFoundError, ValidationError


class ProductManager:
    """Manages product records"""

    def __init__(self, store, settings):
        self.store = store
        self.table = settings.products_table

    @staticmethod
    def _require_product_id(product_id):
        if not isinstance(product_id, str) or not product_id:
            raise ValidationError("productId is required in path", "productId")

    def get_product(self, identity, product_id):
        perm.PermissionValidator.require_role(identity, perm.PRODUCT_READ_ROLES)
        self._require_product_id(product_id)

        with dependency_failure("Could not retrieve product"):
            product = self.store.get(self.table, {'productId': product_id})

        if not product:
            raise NotFoundError('Could not find product with provided "productId"')
        return product

    def create_product(self, identity, product_id, name):
        """
        Create a product

        The write is an unconditional put: an existing product with the same
        productId is silently overwritten.
        """
        perm.PermissionValidator.require_role(identity, perm.PRODUCT_WRITE_ROLES)

        valid_data, error_msg = valid.ProductDataValidator.validate_product_data(product_id, name)
        if not valid_data:
            raise ValidationError(error_msg)

        product = {'productId': product_id, 'name': name}
        with dependency_failure("Could not create product"):
            self.store.put(self.table, product)
        return product

    def update_product(self, identity, product_id, name):
        """
        Rename a product

        A productId that does not exist yet is created holding only the name
        (DynamoDB upsert-on-update).
        """
        perm.PermissionValidator.require_role(identity, perm.PRODUCT_WRITE_ROLES)
        self._require_product_id(product_id)

        valid_data, error_msg = valid.ProductDataValidator.validate_product_name(name)
        if not valid_data:
            raise ValidationError(error_msg)

        with dependency_failure("Could not update product"):
            return self.store.update_field(self.table, {'productId': product_id}, 'name', name)

    def delete_product(self, identity, product_id):
        perm.PermissionValidator.require_role(identity, perm.PRODUCT_WRITE_ROLES)
        self._require_product_id(product_id)

        with dependency_failure("Could not delete product"):
            self.store.delete(self.table, {'productId': product_id})
        return {"message": "Product deleted successfully"}


def get_product_manager(settings, store=None):
    """Factory function to get ProductManager instance"""
    if store is None:
        import db_utils as db
        store = db.get_record_store(settings)
    return ProductManager(store, settings)
