from pathlib import Path


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# Log directory
LOG_DIR = BASE_DIR / 'logs'

# Default shop definition consumed by the broadcast service
DEFAULT_SHOP_DEFINITION_PATH = BASE_DIR / 'shop.json'
