"""Menu catalog and pricing rules."""

from .catalog import DEFAULT_MENU, MENU_DOCUMENT, MenuCatalog
from .pricing import VEG_EXTRA_FEE, VEG_OPTIONS, change_protein_fee, veg_extras_fee

__all__ = [
    "DEFAULT_MENU",
    "MENU_DOCUMENT",
    "MenuCatalog",
    "VEG_EXTRA_FEE",
    "VEG_OPTIONS",
    "change_protein_fee",
    "veg_extras_fee",
]
