from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.products.dtos import CreateProductDTO
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

SEED_PRODUCTS = [
    # name, category, description, wholesale, retail
    ("Widget", 1, "Standard widget", "10.00", "15.00"),
    ("Widget Pro", 1, "Reinforced widget for heavy use", "18.50", "29.90"),
    ("Gadget Basic", 2, "Entry-level gadget", "7.25", "12.00"),
    ("Gadget Plus", 2, "Gadget with extended battery", "21.00", "34.99"),
    ("Sprocket 12T", 3, "Twelve-tooth steel sprocket", "2.40", "4.10"),
    ("Sprocket 24T", 3, "Twenty-four-tooth steel sprocket", "3.80", "6.50"),
    ("Cable 2m", 4, "Braided two-metre cable", "1.90", "5.00"),
    ("Cable 5m", 4, "Braided five-metre cable", "3.10", "8.00"),
    ("Legacy Adapter", 4, "Discontinued adapter", "0.90", "2.50"),
]

DISCONTINUED = {"Legacy Adapter"}


class Command(BaseCommand):
    help = "Seed database with a small product catalogue for development."

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Seed even when products already exist.",
        )

    def handle(self, *args, **options):
        random.seed(42)

        if Product.objects.exists() and not options["force"]:
            self.stdout.write("Products already present; use --force to seed again.")
            return

        self.stdout.write("Seeding product catalogue...")
        service = ProductService(repository=ProductDjangoRepository())

        created = 0
        deactivated = 0
        for name, category, description, wholesale, retail in SEED_PRODUCTS:
            product = service.create_product(
                CreateProductDTO(
                    name=name,
                    category=category,
                    description=description,
                    wholesale_price=Decimal(wholesale),
                    retail_price=Decimal(retail),
                    quantity=random.randint(0, 250),
                )
            )
            created += 1
            if name in DISCONTINUED:
                service.delete_product(str(product.id))
                deactivated += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products={created}, inactive={deactivated}"
            )
        )
