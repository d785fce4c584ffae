"""
Seed script to populate orders and order statuses with sample transactions.
Run: python scripts/seed_data.py [count]
"""

import asyncio
import random
import sys
import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from schoolpay.database import get_db_context, init_db
from schoolpay.models.order import Order
from schoolpay.models.order_status import OrderStatus
from schoolpay.services.payment_service import generate_custom_order_id


SCHOOL_IDS = [
    "65b0e6293e9f76a9694d84b4",
    "65b0e6293e9f76a9694d84b5",
    "65b0e6293e9f76a9694d84b6",
]
TRUSTEE_ID = "65b0e552dd31950a9b41c5ba"
STATUSES = ["success", "pending", "failed"]
GATEWAYS = ["PhonePe", "Paytm", "Razorpay", "GooglePay"]
PAYMENT_MODES = ["upi", "card", "netbanking", "wallet"]


async def seed_transactions(count: int = 50):
    """Insert ``count`` orders, each with a settled status record."""
    await init_db()
    now = datetime.now(timezone.utc)
    
    async with get_db_context() as db:
        for i in range(1, count + 1):
            status = random.choice(STATUSES)
            amount = Decimal(random.randint(1000, 5999))
            created_at = now - timedelta(days=random.randint(0, 30), minutes=random.randint(0, 1440))
            
            order = Order(
                school_id=random.choice(SCHOOL_IDS),
                trustee_id=TRUSTEE_ID,
                student_info={
                    "name": f"Student {i}",
                    "id": f"STD{i:03d}",
                    "email": f"student{i}@example.com",
                },
                gateway_name=random.choice(GATEWAYS),
                custom_order_id=generate_custom_order_id(),
                created_at=created_at,
            )
            db.add(order)
            await db.flush()
            
            db.add(OrderStatus(
                collect_id=order.id,
                order_amount=amount,
                transaction_amount=amount if status == "success" else Decimal(0),
                payment_mode=random.choice(PAYMENT_MODES),
                payment_details=f"student{i}@upi",
                bank_reference=f"BNK{random.randint(100000, 999999)}",
                payment_message="Payment successful" if status == "success" else f"Payment {status}",
                status=status,
                error_message="Transaction declined" if status == "failed" else None,
                payment_time=created_at + timedelta(minutes=random.randint(1, 60)),
            ))
    
    print(f"Seeded {count} transactions")


if __name__ == "__main__":
    count = int(sys.argv[1]) if len(sys.argv) > 1 else 50
    asyncio.run(seed_transactions(count))
