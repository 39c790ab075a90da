from decimal import Decimal
from pathlib import Path

from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

def money_filter(amount) -> str:
    """A Jinja2 filter rendering an amount with thousands separators and two decimals."""
    return f"{Decimal(str(amount)):,.2f}"

# Create a single, shared Jinja2Templates instance
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
# Add the custom filter to the environment
templates.env.filters["money"] = money_filter
