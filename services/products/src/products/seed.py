import random
import uuid
from typing import List, Optional

from faker import Faker

from .models import Product

PRICE_MIN, PRICE_MAX = 10.0, 100.0
RATE_MIN, RATE_MAX = 0.0, 5.0
IMAGE_URL = "http://lorempixel.com/200/200?{token}"


def _uniform(rng: random.Random, low: float, high: float) -> float:
    # random.uniform may return ``high``; keep the interval half-open
    return low + rng.random() * (high - low)


def fake_product(fake: Faker, rng: random.Random) -> Product:
    return Product(
        id=uuid.UUID(int=rng.getrandbits(128), version=4).hex,
        name=fake.word(),
        description=fake.paragraph(),
        price=_uniform(rng, PRICE_MIN, PRICE_MAX),
        rate=_uniform(rng, RATE_MIN, RATE_MAX),
        image=IMAGE_URL.format(token=fake.uuid4().replace("-", "")),
    )


def fake_products(count: int, seed: Optional[int] = None) -> List[Product]:
    """Generate ``count`` sample products; ``seed`` makes the batch reproducible."""
    fake = Faker()
    rng = random.Random(seed)
    if seed is not None:
        fake.seed_instance(seed)
    return [fake_product(fake, rng) for _ in range(count)]
