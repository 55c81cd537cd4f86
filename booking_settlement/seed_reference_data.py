"""
Database seeding script for settlement reference data.

Creates the chart of accounts, the standard commission models and the
standard refund policies. Safe to re-run; existing rows are skipped.
Run this script after database is set up but before first use.
"""

import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from booking_settlement.app.db.session import SettlementSession
from booking_settlement.app.db.repositories import CommissionModelRepository, RefundPolicyRepository
from booking_settlement.app.domain.ledger.ledger import Ledger
from booking_settlement.app.domain.settlement.orchestrator import SettlementOrchestrator
from booking_settlement.app.models.refund_policy import RefundPolicy, RefundPolicyRule
from booking_settlement.app.models.settlement_enums import CommissionCalculationType, RefundPolicyType

COMMISSION_MODELS = [
    ("CM-1", {"en": "Standard Charter", "fa": "چارتری استاندارد", "ar": "الطيران العارض القياسي"},
     CommissionCalculationType.PERCENTAGE, "5", "2", "1.5"),
    ("CM-2", {"en": "Mahan Web Service", "fa": "وب‌سرویس ماهان", "ar": "خدمة ماهان الإلكترونية"},
     CommissionCalculationType.PERCENTAGE, "6", "1.5", "1"),
    ("CM-3", {"en": "Floating Model - Fixed Profit", "fa": "شناوری - سود ثابت", "ar": "النموذج العائم - ربح ثابت"},
     CommissionCalculationType.FIXED_AMOUNT, "0", "50000", "20000"),
    ("CM-4", {"en": "International Flights", "fa": "پروازهای بین‌المللی", "ar": "الرحلات الدولية"},
     CommissionCalculationType.PERCENTAGE, "8", "2.5", "2"),
]

# (id, name, type, [(hours_before_departure, penalty_percentage)])
REFUND_POLICIES = [
    ("RP-1", {"en": "Standard International Refund Policy", "fa": "سیاست استرداد استاندارد بین‌المللی",
              "ar": "سياسة استرداد قياسية دولية"},
     RefundPolicyType.INTERNATIONAL, [(72, "10"), (24, "50"), (0, "100")]),
    ("RP-2", {"en": "Flexible Domestic Refund Policy", "fa": "سیاست استرداد منعطف داخلی",
              "ar": "سياسة استرداد مرنة داخلية"},
     RefundPolicyType.DOMESTIC, [(24, "0"), (0, "80")]),
    ("RP-3", {"en": "Non-refundable (General)", "fa": "غیر قابل استرداد (عمومی)",
              "ar": "غير قابل للاسترداد (عام)"},
     None, [(0, "100")]),
]


async def seed_reference_data():
    """
    Seed reference data.
    
    Creates:
    - the default chart of accounts
    - commission models CM-1 .. CM-4
    - refund policies RP-1 .. RP-3
    """
    async with SettlementSession() as db:
        print("🌱 Starting reference data seeding...")
        
        created = await Ledger(db).seed_chart_of_accounts()
        await db.commit()
        print(f"✅ Chart of accounts: {created} accounts created")
        
        orchestrator = SettlementOrchestrator(db)
        commission_models = CommissionModelRepository(db)
        for model_id, name, calculation_type, charter, creator, web_service in COMMISSION_MODELS:
            if await commission_models.get(model_id) is not None:
                print(f"ℹ️  Commission model {model_id} already exists, skipping")
                continue
            await orchestrator.create_commission_model(
                model_id, name, calculation_type, Decimal(charter), Decimal(creator), Decimal(web_service)
            )
            print(f"✅ Created commission model {model_id} ({name['en']})")
        
        refund_policies = RefundPolicyRepository(db)
        for policy_id, name, policy_type, rules in REFUND_POLICIES:
            if await refund_policies.get(policy_id) is not None:
                print(f"ℹ️  Refund policy {policy_id} already exists, skipping")
                continue
            policy = await refund_policies.append(RefundPolicy(id=policy_id, name=name, policy_type=policy_type))
            for hours, percentage in rules:
                db.add(RefundPolicyRule(
                    policy_id=policy.id,
                    hours_before_departure=hours,
                    penalty_percentage=Decimal(percentage),
                ))
            print(f"✅ Created refund policy {policy_id} ({name['en']})")
        
        await db.commit()
        print("\n🎉 Reference data seeding completed successfully!")


if __name__ == "__main__":
    asyncio.run(seed_reference_data())
