"""Service modules"""
from .account import AccountManager
from .aggregator import CoinAggregator
from .balance import BalanceReader
from .builder import TransactionBuilder
from .health import HealthFactorEvaluator
from .submission import Submitter

__all__ = [
    "AccountManager",
    "BalanceReader",
    "CoinAggregator",
    "HealthFactorEvaluator",
    "Submitter",
    "TransactionBuilder",
]
