from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from modules.categories.dtos import CategoryNameDTO
from modules.categories.models import CategoryModel
from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.services import CategoryService
from modules.products.dtos import CreateProductDTO
from modules.products.models import ProductModel
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

DEFAULT_CATEGORY = "Test Category"

SAMPLE_PRODUCTS = [
    {
        "name": "Basic Tee",
        "description": "Cotton t-shirt.",
        "price": Decimal("29.99"),
        "purchase_price": Decimal("12.50"),
        "variants": [
            {"sku": "TEE-001-S", "size": "S", "stock": 10},
            {"sku": "TEE-001-M", "size": "M", "stock": 15},
            {"sku": "TEE-001-L", "size": "L", "stock": 5},
        ],
    },
    {
        "name": "Canvas Tote",
        "description": "One-size tote bag.",
        "price": Decimal("19.90"),
        "variants": [{"sku": "TOTE-001", "size": "ONE", "stock": 25}],
    },
]


class Command(BaseCommand):
    help = "Seed the catalog with a default category and sample products."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete every product and category before seeding.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog data...")
        if options["reset"]:
            self._reset()

        categories = CategoryDjangoRepository()
        category = categories.find_by_name(DEFAULT_CATEGORY)
        if category is None:
            category = CategoryService(categories).create_category(
                CategoryNameDTO(name=DEFAULT_CATEGORY)
            )

        products = ProductDjangoRepository()
        service = ProductService(products, categories)
        created = 0
        for sample in SAMPLE_PRODUCTS:
            if products.find_by_name(sample["name"]):
                continue
            service.create_product(
                CreateProductDTO(category_id=category.id, **sample)
            )
            created += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: category={category.name}, products_created={created}"
            )
        )

    def _reset(self) -> None:
        self.stdout.write("Clearing products and categories...")
        ProductModel.objects.all().delete()
        CategoryModel.objects.all().delete()
