# storefront/services/customer_service.py
import itertools
import re
from typing import List

from storefront.models import Address, CustomerData

FIRST_NAMES = ['Hans', 'Peter', 'Thomas', 'Michael', 'Andreas', 'Maria', 'Anna', 'Ursula', 'Sandra', 'Monika']
LAST_NAMES = ['Müller', 'Schmid', 'Schneider', 'Fischer', 'Weber', 'Meyer', 'Huber', 'Wagner', 'Becker', 'Hoffmann']
DUMMY_EMAIL_DOMAIN = "actindo.com"

_first_names = itertools.cycle(FIRST_NAMES)
_last_names = itertools.cycle(LAST_NAMES)

_UMLAUTS = str.maketrans({'ä': 'ae', 'ö': 'oe', 'ü': 'ue'})


def _email_part(name: str) -> str:
    return name.lower().translate(_UMLAUTS)


def fill_dummy_data() -> CustomerData:
    """Тестові дані клієнта для демо-оформлення; імена йдуть по колу."""
    first_name = next(_first_names); last_name = next(_last_names)
    return CustomerData(
        first_name=first_name, last_name=last_name,
        email=f"{_email_part(first_name)}.{_email_part(last_name)}@{DUMMY_EMAIL_DOMAIN}",
        phone="+41 79 123 45 67",
        address=Address(street="Bahnhofstrasse 1", city="Zürich", zip="8001", country="CH"),
    )


def reset_customer_data() -> CustomerData:
    return CustomerData()


# --- Валідація ---

def is_valid_email(text: str) -> str | None:
    text = text.strip()
    return text if re.fullmatch(r"[^@\s]+@[^@\s]+\.[^@\s]+", text) else None


def is_valid_phone(text: str) -> str | None:
    digits_only = re.sub(r'\D', '', text)
    match = re.match(r'^(?:0041|41|0)(\d{9})$', digits_only)
    if match: return f"+41{match.group(1)}"
    return None


def validate_customer(customer: CustomerData) -> List[str]:
    errors = []
    if not customer.first_name.strip(): errors.append("firstName")
    if not customer.last_name.strip(): errors.append("lastName")
    if not is_valid_email(customer.email): errors.append("email")
    if customer.phone and not is_valid_phone(customer.phone): errors.append("phone")
    return errors
