"""
File Service for CSV processing.
Handles header validation, line parsing and conversion of rows to products.
"""
import math
import uuid
from typing import List, Optional, Tuple
from catalog_ingest.core.exceptions import ValidationException
from catalog_ingest.models.product_model import Product

REQUIRED_COLUMNS = ('name', 'price')
PRODUCT_COLUMNS = ('name', 'description', 'price', 'category', 'stock', 'imageurl')


class ProductRow:
    """A candidate product read from one CSV line, before validation."""

    def __init__(self, name: str, description: str, price: str, category: str, stock: str, image_url: str):
        self.name = name
        self.description = description
        self.price = price
        self.category = category
        self.stock = stock
        self.image_url = image_url


class FileService:
    """Service for catalog file parsing and validation."""

    @staticmethod
    def normalize_lines(content: str) -> List[str]:
        """Normalize line endings, trim the file and split it into lines."""
        normalized = content.replace('\r\n', '\n').replace('\r', '\n').strip()
        if not normalized:
            return []
        return normalized.split('\n')

    @staticmethod
    def count_data_rows(content: str) -> int:
        """Number of lines after the header."""
        lines = FileService.normalize_lines(content)
        return max(len(lines) - 1, 0)

    @staticmethod
    def parse_csv_line(line: str) -> List[str]:
        """
        Split a CSV line on commas outside double quotes.

        Quotes toggle quoting and are dropped; doubled quotes are not treated
        as an escaped quote.
        """
        fields = []
        current = []
        in_quotes = False

        for ch in line:
            if ch == '"':
                in_quotes = not in_quotes
            elif ch == ',' and not in_quotes:
                fields.append(''.join(current))
                current = []
            else:
                current.append(ch)

        fields.append(''.join(current))
        return fields

    def parse_header(self, header_line: str) -> List[str]:
        """Lower-cased, trimmed header column names."""
        return [h.strip().lower() for h in self.parse_csv_line(header_line)]

    def validate_header(self, header_line: str) -> None:
        """
        Ensure the header carries the columns every product needs.

        Raises:
            ValidationException: If `name` or `price` is missing
        """
        headers = set(self.parse_header(header_line))
        if not all(column in headers for column in REQUIRED_COLUMNS):
            raise ValidationException("CSV must include 'name' and 'price' columns")

    def column_positions(self, header_line: str) -> dict:
        """Map each known product column to its index, or None when absent."""
        headers = self.parse_header(header_line)
        return {column: headers.index(column) if column in headers else None for column in PRODUCT_COLUMNS}

    @staticmethod
    def is_blank(fields: List[str]) -> bool:
        return len(fields) == 0 or all(not f.strip() for f in fields)

    @staticmethod
    def row_from_fields(fields: List[str], positions: dict) -> ProductRow:
        """Pick the known columns out of a parsed line."""
        def value(column: str) -> str:
            idx = positions.get(column)
            if idx is None or idx >= len(fields):
                return ''
            return fields[idx].strip()

        return ProductRow(
            name=value('name'),
            description=value('description'),
            price=value('price'),
            category=value('category'),
            stock=value('stock'),
            image_url=value('imageurl')
        )

    def validate_row(self, row: ProductRow) -> Tuple[Optional[str], Optional[float], Optional[float]]:
        """
        Validate a candidate product.

        Returns:
            (error, price, stock): error is None when the row is valid, in
            which case price and stock hold the parsed numbers
        """
        if not row.name:
            return "Product name is required", None, None

        price = self._parse_number(row.price or '0')
        if price is None or price <= 0:
            return "Price must be a positive number", None, None

        stock = self._parse_number(row.stock or '0')
        if stock is None:
            return "Stock must be a number", None, None
        if stock < 0:
            return "Stock cannot be negative", None, None

        if not row.category:
            return "Category is required", None, None
        if not row.description:
            return "Description is required", None, None

        return None, price, stock

    def to_product(self, row: ProductRow, price: float, stock: float, seller_id: str, batch_job_id: str) -> Product:
        """Build a Product from a validated row."""
        return Product(
            product_id=str(uuid.uuid4()),
            seller_id=seller_id,
            name=row.name,
            description=row.description,
            price=price,
            category=row.category,
            stock=stock,
            image_url=row.image_url,
            batch_job_id=batch_job_id
        )

    @staticmethod
    def _parse_number(raw: str) -> Optional[float]:
        try:
            number = float(raw)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
