"""Services package."""

from schoolpay.services.signer import Signer
from schoolpay.services.gateway_client import GatewayClient, extract_redirect_url
from schoolpay.services.payment_service import PaymentService
from schoolpay.services.transaction_service import TransactionService
