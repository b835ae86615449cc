"""Custom filters -- extending templates with Python functions.

Demonstrates ValueFilter for one-argument filters, VariadicFilter for
filters taking several arguments, and filters returning booleans that
drive sections. Filters are registered in the base context of the
environment configuration, so every template sees them.

Run:
    python app.py
"""

from pathlib import Path

from mustachio import Configuration, Environment, FileSystemLoader, ValueFilter, VariadicFilter

templates_dir = Path(__file__).parent / "templates"


# Several arguments: VariadicFilter receives all of them as boxes
def money(boxes) -> str:
    """Format amount as currency: money(amount) or money(amount, currency)."""
    amount = boxes[0].value
    currency = boxes[1].value if len(boxes) > 1 else "$"
    return f"{currency}{amount:,.2f}"


def pluralize(n: int) -> str:
    """Return singular or plural form based on count."""
    return "item" if n == 1 else "items"


def is_prime(n: int) -> bool:
    """Test if integer is prime."""
    if n < 2:
        return False
    return all(n % i != 0 for i in range(2, int(n**0.5) + 1))


filters = {
    "money": VariadicFilter(money),
    "pluralize": ValueFilter(pluralize),
    "is_prime": ValueFilter(is_prime),
    "line_total": ValueFilter(lambda item: item["price"] * item["qty"]),
    "euro": "€",
}

configuration = Configuration()
for key, value in filters.items():
    configuration = configuration.register_in_base_context(key, value)

env = Environment(loader=FileSystemLoader(templates_dir), configuration=configuration)

template = env.get_template("invoice")

output = template.render(
    total=1234.56,
    item_count=3,
    items=[
        {"name": "Widget A", "price": 19.99, "qty": 2},
        {"name": "Widget B", "price": 5.00, "qty": 1},
    ],
)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
