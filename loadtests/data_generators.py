"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names of the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

SIZES = ["XS", "S", "M", "L", "XL", None]


def user_data() -> dict:
    local = fake.user_name()[:20]
    return {
        "name": fake.name()[:100],
        "email": f"{local}.{uuid.uuid4().hex[:6]}@{fake.free_email_domain()}",
        "username": f"{local}-{uuid.uuid4().hex[:4]}",
        "credential": fake.sha256(),
        "phone": f"+1-{random.randint(200, 999)}-{random.randint(200, 999)}-{random.randint(1000, 9999)}",
    }


def shop_data() -> dict:
    return {
        "name": fake.company()[:255],
        "location": fake.city(),
        "description": fake.catch_phrase(),
    }


def product_data() -> dict:
    price = round(random.uniform(2.0, 80.0), 2)
    return {
        "name": fake.catch_phrase()[:255],
        "price": price,
        "regular_price": round(price * random.uniform(1.0, 1.4), 2),
        "brand": fake.company()[:100],
        "category": random.choice(["Apparel", "Home", "Toys", "Books"]),
        "stock": random.randint(10, 500),
    }


def cart_line_data(product_id: str, shop_id: str) -> dict:
    return {
        "product_id": product_id,
        "shop_id": shop_id,
        "quantity": random.randint(1, 3),
        "size": random.choice(SIZES),
    }


def deposit_amount() -> dict:
    return {"amount": round(random.uniform(200.0, 600.0), 2)}


def return_reason() -> str:
    return random.choice(["Wrong size", "Damaged on arrival", "Changed my mind", "Not as described"])
