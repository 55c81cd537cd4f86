"""
Default chart of accounts.

Account codes the settlement postings depend on, plus the full chart
seeded at system setup.
"""

from booking_settlement.app.models.settlement_enums import AccountType

ACCOUNTS_RECEIVABLE = "1020"
TAXES_PAYABLE = "2020"
CHARTER_COMMISSION_PAYABLE = "2040"
CREATOR_COMMISSION_PAYABLE = "2050"
NET_TICKET_REVENUE = "4011"
WEB_SERVICE_COMMISSION_REVENUE = "4012"
CANCELLATION_FEE_REVENUE = "4030"


def _name(en: str, fa: str, ar: str) -> dict:
    return {"en": en, "fa": fa, "ar": ar}


# (code, name, type, parent, is_parent); parents precede their children.
DEFAULT_CHART = [
    ("1000", _name("Assets", "دارایی‌ها", "الأصول"), AccountType.ASSET, None, True),
    ("1010", _name("Cash and Banks", "نقد و بانک", "النقدية والبنوك"), AccountType.ASSET, "1000", False),
    ("1020", _name("Accounts Receivable", "حساب‌های دریافتنی", "حسابات مدينة"), AccountType.ASSET, "1000", False),
    ("1030", _name("Prepayments", "پیش‌پرداخت‌ها", "دفعات مقدمة"), AccountType.ASSET, "1000", False),

    ("2000", _name("Liabilities", "بدهی‌ها", "الالتزامات"), AccountType.LIABILITY, None, True),
    ("2010", _name("Accounts Payable", "حساب‌های پرداختنی", "حسابات دائنة"), AccountType.LIABILITY, "2000", False),
    ("2020", _name("Taxes Payable", "مالیات‌های پرداختنی", "ضرائب مستحقة"), AccountType.LIABILITY, "2000", False),
    ("2030", _name("Unearned Revenue", "درآمدهای تحقق نیافته", "إيرادات غير مكتسبة"), AccountType.LIABILITY, "2000", False),
    ("2040", _name("Charterer Commission Payable", "کمیسیون چارترکننده پرداختنی", "عمولة الطيران العارض المستحقة"),
     AccountType.LIABILITY, "2000", False),
    ("2050", _name("Creator Commission Payable", "کمیسیون ایجادکننده پرداختنی", "عمولة المنشئ المستحقة"),
     AccountType.LIABILITY, "2000", False),

    ("3000", _name("Equity", "حقوق صاحبان سهام", "حقوق الملكية"), AccountType.EQUITY, None, True),
    ("3010", _name("Capital Stock", "سرمایه", "رأس المال"), AccountType.EQUITY, "3000", False),
    ("3020", _name("Retained Earnings", "سود انباشته", "أرباح محتجزة"), AccountType.EQUITY, "3000", False),

    ("4000", _name("Revenue", "درآمدها", "الإيرادات"), AccountType.REVENUE, None, True),
    ("4010", _name("Sales Revenue", "درآمدهای فروش", "إيرادات المبيعات"), AccountType.REVENUE, "4000", True),
    ("4011", _name("Net Ticket Revenue", "درآمد خالص بلیط", "صافي إيرادات التذاكر"), AccountType.REVENUE, "4010", False),
    ("4012", _name("Web Service Commission Revenue", "درآمد کمیسیون وب‌سرویس", "إيرادات عمولة الخدمة الإلكترونية"),
     AccountType.REVENUE, "4010", False),
    ("4020", _name("Service Fee Revenue", "درآمد کارمزد خدمات", "إيرادات رسوم الخدمة"), AccountType.REVENUE, "4000", False),
    ("4030", _name("Cancellation Fee Revenue", "درآمد جریمه کنسلی", "إيرادات غرامات الإلغاء"),
     AccountType.REVENUE, "4000", False),

    ("5000", _name("Expenses", "هزینه‌ها", "المصروفات"), AccountType.EXPENSE, None, True),
    ("5010", _name("Operating Expenses", "هزینه‌های عملیاتی", "مصروفات تشغيلية"), AccountType.EXPENSE, "5000", True),
    ("5011", _name("Salaries and Wages Expense", "هزینه حقوق و دستمزد", "مصروف الرواتب والأجور"),
     AccountType.EXPENSE, "5010", False),
    ("5012", _name("Rent Expense", "هزینه اجاره", "مصروف الإيجار"), AccountType.EXPENSE, "5010", False),
    ("5020", _name("Selling & Marketing Expenses", "هزینه‌های فروش و بازاریابی", "مصروفات البيع والتسويق"),
     AccountType.EXPENSE, "5000", True),
    ("5022", _name("Commission Expense", "هزینه کمیسیون", "مصروف العمولة"), AccountType.EXPENSE, "5020", False),
    ("5030", _name("General & Administrative Expenses", "هزینه‌های عمومی و اداری", "مصروفات عمومية وإدارية"),
     AccountType.EXPENSE, "5000", True),
    ("5032", _name("Bank Fees Expense", "هزینه کارمزد بانکی", "مصروف الرسوم البنكية"), AccountType.EXPENSE, "5030", False),
    ("5040", _name("Ticket Purchase Cost", "هزینه خرید بلیط", "تكلفة شراء التذاكر"), AccountType.EXPENSE, "5000", False),
]
