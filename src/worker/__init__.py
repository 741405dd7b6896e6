"""Background workers for invoicing service"""
from .payment_reconciler import PaymentReconcilerWorker

__all__ = ["PaymentReconcilerWorker"]
