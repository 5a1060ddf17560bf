from affiliate_ops.models.category import Category
from affiliate_ops.models.account import Account, AccountStatus, PaymentDataStatus
from affiliate_ops.models.sales import SalesData
from affiliate_ops.models.user import User, UserRole, user_managed_accounts
from affiliate_ops.models.incentive import IncentiveRule, IncentiveTier

__all__ = [
    "Category",
    "Account",
    "AccountStatus",
    "PaymentDataStatus",
    "SalesData",
    "User",
    "UserRole",
    "user_managed_accounts",
    "IncentiveRule",
    "IncentiveTier",
]
