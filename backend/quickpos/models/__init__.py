from .catalog import PriceTier, Variation, Product
from .sales import OrderItem, Order
from .debts import Debt, DEBT_STATUS_PENDING, DEBT_STATUS_PAID
from .expenses import Disbursement
from .customers import Customer
from .storage import KeyValueEntry

__all__ = [
    'PriceTier', 'Variation', 'Product',
    'OrderItem', 'Order',
    'Debt', 'DEBT_STATUS_PENDING', 'DEBT_STATUS_PAID',
    'Disbursement',
    'Customer',
    'KeyValueEntry',
]
