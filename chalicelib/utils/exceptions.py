__all__ = ["NotAuthorizedException", "AccessDenied", "RecordNotFound",
           "MandatoryFieldsAreNotFilled", "ValidationException", "SomeItemsAreNotAvailable", "OrderNotFound",
           "KitchenNotFound", "MenuItemNotFound", "BidNotFound", "EmptyCart", "MinimumOrderNotReached",
           "KitchenSwitchNotConfirmed", "InvalidStatusTransition", "DuplicateEmail", "BidNotAvailable"]


class NotAuthorizedException(Exception):
    pass


# Generic Exceptions
class AccessDenied(Exception):
    pass


class MandatoryFieldsAreNotFilled(Exception):
    pass


# Storage exceptions
class RecordNotFound(Exception):
    pass


# Validations exceptions
class ValidationException(Exception):
    pass


class SomeItemsAreNotAvailable(Exception):
    pass


class EmptyCart(Exception):
    pass


class MinimumOrderNotReached(Exception):
    pass


# Not found
class OrderNotFound(RecordNotFound):
    pass


class KitchenNotFound(RecordNotFound):
    pass


class MenuItemNotFound(RecordNotFound):
    pass


class BidNotFound(RecordNotFound):
    pass


# Conflicts
class KitchenSwitchNotConfirmed(Exception):
    LEVEL = 'info'


class InvalidStatusTransition(Exception):
    LEVEL = 'warning'


class DuplicateEmail(Exception):
    LEVEL = 'info'


class BidNotAvailable(Exception):
    LEVEL = 'warning'
