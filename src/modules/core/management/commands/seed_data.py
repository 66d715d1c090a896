from __future__ import annotations

import random
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.accounts.constants import UserRole
from modules.accounts.dtos import ActorDTO
from modules.accounts.models import Profile
from modules.catalog.models import CatalogProduct, ProductCategory
from modules.catalog.repositories.django_repository import CatalogProductDjangoRepository
from modules.orders.constants import (
    DEPARTMENT_STAGES,
    EXPEDITIONS,
    MARKETPLACE_LIST,
    SIZES,
    OrderType,
)
from modules.orders.dtos import CreateOrderDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService

SEED_USERS = [
    ("owner", "Rina Owner", UserRole.SUPERADMIN),
    ("admin", "Dimas Admin", UserRole.ADMIN_MARKETPLACE),
    ("setting", "Tim Setting", UserRole.SETTING),
    ("print", "Tim Print", UserRole.PRINT),
    ("press", "Tim Press", UserRole.PRESS),
    ("jahit", "Tim Jahit", UserRole.JAHIT),
    ("packing", "Tim Packing", UserRole.PACKING),
]

SEED_CATALOG = [
    ("Jersey Home 2024", ProductCategory.JERSEY),
    ("Jersey Away 2024", ProductCategory.JERSEY),
    ("Jersey Futsal Custom", ProductCategory.JERSEY),
    ("Kemeja PDH", ProductCategory.KEMEJA),
    ("Kaos Polos Cotton", ProductCategory.KAOS),
    ("Jaket Windbreaker", ProductCategory.JAKET),
]

PLAYER_NAMES = ["ANDI", "BUDI", "SITI", "RIZKY", "", "", "FAJAR", "DEWI"]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=40)
        parser.add_argument("--password", default="erfolgs123")

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        actors = self._seed_users(options["password"])
        products = self._seed_catalog()
        orders_created = self._seed_orders(actors, products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(actors)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self, password: str) -> dict[str, ActorDTO]:
        self.stdout.write("Creating users and profiles...")
        User = get_user_model()
        actors: dict[str, ActorDTO] = {}
        for username, fullname, role in SEED_USERS:
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(
                    username,
                    password=password,
                    is_staff=role == UserRole.SUPERADMIN,
                    is_superuser=role == UserRole.SUPERADMIN,
                )
            profile, _ = Profile.objects.get_or_create(
                user=user, defaults={"role": role, "fullname": fullname}
            )
            actors[role] = ActorDTO.from_profile(profile)
        self.stdout.write(self.style.SUCCESS("Creating users and profiles... Done!"))
        return actors

    def _seed_catalog(self) -> list[CatalogProduct]:
        self.stdout.write("Creating catalog...")
        products: list[CatalogProduct] = []
        for name, category in SEED_CATALOG:
            product = CatalogProduct.objects.alive().filter(name=name).first()
            if product is None:
                product = CatalogProduct.objects.create(name=name, category=category)
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating catalog... Done!"))
        return products

    def _seed_orders(
        self, actors: dict[str, ActorDTO], products: list[CatalogProduct], count: int
    ) -> int:
        self.stdout.write("Creating orders...")
        if Order.objects.alive().exists():
            self.stdout.write(self.style.WARNING("Skipping orders (already seeded)."))
            return 0

        service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_repository=CatalogProductDjangoRepository(),
        )
        owner = actors[UserRole.SUPERADMIN]
        admin = actors[UserRole.ADMIN_MARKETPLACE]
        stages = list(DEPARTMENT_STAGES)
        today = timezone.localdate()

        for index in range(count):
            order_type = OrderType.STOCK if random.random() < 0.25 else OrderType.PRE_ORDER
            back_name = random.choice(PLAYER_NAMES)
            order = service.create_order(
                CreateOrderDTO(
                    order_id=f"SEED-{today:%y%m%d}-{index:04d}",
                    product_id=random.choice(products).id,
                    size=random.choice(SIZES),
                    quantity=random.randint(1, 12),
                    back_name=back_name,
                    back_number=str(random.randint(1, 99)) if back_name else "",
                    marketplace=random.choice(MARKETPLACE_LIST),
                    expedition=random.choice(EXPEDITIONS),
                    tracking_number=f"JX{random.randint(10**9, 10**10 - 1)}",
                    order_date=today - timedelta(days=random.randint(0, 10)),
                    order_type=order_type,
                ),
                random.choice([owner, admin]),
            )

            # Walk the order part of the way down the pipeline
            first = stages.index("PACKING") if order_type == OrderType.STOCK else 0
            steps = random.randint(0, (len(stages) - first) * 2 + 1)
            for step in range(steps):
                department = stages[first + step // 2] if first + step // 2 < len(stages) else None
                if department is None:
                    order = service.confirm_completion(order.id, owner)
                    break
                worker = actors[department]
                if step % 2 == 0:
                    order = service.start_stage(order.id, worker)
                else:
                    order = service.complete_stage(order.id, worker)

            if order.is_terminal:
                continue
            if index % 17 == 5:
                service.cancel_order(order.id, admin, notes="Dibatalkan pembeli")
            elif index % 19 == 7:
                service.return_order(order.id, today, admin, notes="Salah ukuran")

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return count
