"""Fixed seed list of virtual accounts created at process start."""

from decimal import Decimal

from treasury_sim.models import Account, AccountType, Currency

SEED_ACCOUNTS: tuple[tuple[str, str, Currency, str, AccountType], ...] = (
    ("1", "Mpesa_KES_1", Currency.KES, "2500000.50", AccountType.MOBILE_MONEY),
    ("2", "Bank_USD_1", Currency.USD, "15000.75", AccountType.BANK_ACCOUNT),
    ("3", "Equity_KES_2", Currency.KES, "890000.25", AccountType.BANK_ACCOUNT),
    ("4", "Chase_USD_2", Currency.USD, "8500.00", AccountType.BANK_ACCOUNT),
    ("5", "GTBank_NGN_1", Currency.NGN, "12500000.00", AccountType.BANK_ACCOUNT),
    ("6", "Safaricom_KES_3", Currency.KES, "450000.80", AccountType.MOBILE_MONEY),
    ("7", "Wells_USD_3", Currency.USD, "22000.30", AccountType.BANK_ACCOUNT),
    ("8", "Zenith_NGN_2", Currency.NGN, "8750000.50", AccountType.BANK_ACCOUNT),
    ("9", "ABSA_KES_4", Currency.KES, "1200000.00", AccountType.BANK_ACCOUNT),
    ("10", "Access_NGN_3", Currency.NGN, "5500000.75", AccountType.BANK_ACCOUNT),
)


def default_accounts() -> list[Account]:
    """Return fresh copies of the seed accounts, in seed order."""
    return [
        Account(
            account_id=account_id,
            name=name,
            currency=currency,
            balance=Decimal(balance),
            account_type=account_type,
        )
        for account_id, name, currency, balance, account_type in SEED_ACCOUNTS
    ]
