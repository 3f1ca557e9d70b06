import argparse
import logging

from products.config import Settings, configure_logging
from products.seed import fake_products
from products.store import ProductStore

logger = logging.getLogger("products.seed_products")


def main():
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description="Seed synthetic products into the products table.")
    parser.add_argument("--count", type=int, default=settings.seed_count)
    parser.add_argument("--seed", type=int, default=None, help="random seed for reproducible data")
    args = parser.parse_args()

    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    configure_logging(settings)

    store = ProductStore(settings)
    products = fake_products(args.count, seed=args.seed)

    print(f"Inserting {len(products)} products into {settings.table_name} ({settings.region}) ...")
    for product in products:
        store.put(product)
        logger.info("put %s (%s)", product.id, product.name)
    print("Done.")


if __name__ == "__main__":
    main()
