"""Application-wide constants and configuration values.

Centralizes pricing rules, storage keys and API paths so the cart,
checkout and order views agree on them.
"""
from decimal import Decimal

# ============== PRICING ==============
FREE_SHIPPING_THRESHOLD = Decimal("1000")  # strictly greater than this ships free
FLAT_SHIPPING_FEE = Decimal("50")
TAX_RATE = Decimal("0.18")  # 18% GST, on subtotal only

# ============== STORAGE KEYS ==============
STORAGE_KEY_TOKEN = "token"
STORAGE_KEY_USER = "user"
STORAGE_KEY_CART = "cartItems"

# ============== ORDER API ==============
ORDERS_PATH = "/api/orders"
MY_ORDERS_PATH = "/api/orders/myorders"
DEFAULT_REQUEST_TIMEOUT = 15  # seconds

# ============== CHECKOUT ==============
PAYMENT_CASH_ON_DELIVERY = "cash_on_delivery"
DEFAULT_SHIPPING_STATE = "Gujarat"
DEFAULT_SHIPPING_COUNTRY = "India"

# ============== MESSAGES ==============
ORDER_FAILED_MESSAGE = "Order placement failed"
ORDERS_LOAD_FAILED_MESSAGE = "Failed to load orders"
