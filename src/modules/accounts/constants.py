"""Roles and navigation views of the admin panel."""

from django.db import models


class UserRole(models.TextChoices):
    SUPERADMIN = "SUPERADMIN", "Super Admin"
    ADMIN_MARKETPLACE = "ADMIN_MARKETPLACE", "Admin Marketplace"
    SETTING = "SETTING", "Tim Setting (Design)"
    PRINT = "PRINT", "Tim Print"
    PRESS = "PRESS", "Tim Press"
    JAHIT = "JAHIT", "Tim Jahit"
    PACKING = "PACKING", "Tim Packing & Shipping"


MANAGER_ROLES: frozenset[str] = frozenset(
    {UserRole.SUPERADMIN, UserRole.ADMIN_MARKETPLACE}
)


class ViewType(models.TextChoices):
    DASHBOARD = "DASHBOARD", "Dashboard"
    INPUT_ORDER = "INPUT_ORDER", "Input Order"
    ORDER_LIST = "ORDER_LIST", "Daftar Order"
    CATALOG = "CATALOG", "Katalog Produk"
    REPORT = "REPORT", "Laporan"
    TASKS = "TASKS", "Tugas Saya"


MANAGER_VIEWS: tuple[str, ...] = (
    ViewType.DASHBOARD,
    ViewType.INPUT_ORDER,
    ViewType.ORDER_LIST,
    ViewType.CATALOG,
)

UNKNOWN_ACTOR = "UNKNOWN"
