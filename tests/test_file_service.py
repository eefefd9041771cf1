"""
Unit tests for FileService.
"""
import pytest
from catalog_ingest.core.exceptions import ValidationException
from catalog_ingest.services.file_service import FileService, ProductRow


def make_row(**overrides):
    values = {
        "name": "Widget",
        "description": "A useful widget",
        "price": "9.99",
        "category": "Tools",
        "stock": "5",
        "image_url": ""
    }
    values.update(overrides)
    return ProductRow(**values)


class TestFileService:
    @pytest.fixture
    def file_service(self):
        return FileService()

    def test_normalize_lines_handles_crlf_and_trailing_whitespace(self, file_service):
        content = "name,price\r\nA,1\rB,2\n\n"
        assert file_service.normalize_lines(content) == ["name,price", "A,1", "B,2"]

    def test_normalize_lines_empty(self, file_service):
        assert file_service.normalize_lines("  \n ") == []

    def test_count_data_rows(self, file_service):
        assert file_service.count_data_rows("name,price\nA,1\nB,2") == 2
        assert file_service.count_data_rows("name,price") == 0
        assert file_service.count_data_rows("") == 0

    def test_parse_csv_line_respects_quotes(self, file_service):
        line = 'Widget,"Red, large",9.99'
        assert file_service.parse_csv_line(line) == ["Widget", "Red, large", "9.99"]

    def test_parse_csv_line_keeps_empty_fields(self, file_service):
        assert file_service.parse_csv_line("a,,c,") == ["a", "", "c", ""]

    def test_validate_header_requires_name_and_price(self, file_service):
        file_service.validate_header(" Name , PRICE ,category")

        with pytest.raises(ValidationException) as exc_info:
            file_service.validate_header("name,description")
        assert exc_info.value.message == "CSV must include 'name' and 'price' columns"

    def test_column_positions(self, file_service):
        positions = file_service.column_positions("price,name,imageUrl")

        assert positions["price"] == 0
        assert positions["name"] == 1
        assert positions["imageurl"] == 2
        assert positions["stock"] is None

    def test_row_from_fields_tolerates_short_lines(self, file_service):
        positions = file_service.column_positions("name,price,category,description")
        row = file_service.row_from_fields([" Widget ", "4"], positions)

        assert row.name == "Widget"
        assert row.price == "4"
        assert row.category == ""

    def test_is_blank(self, file_service):
        assert file_service.is_blank(["", "  ", ""])
        assert not file_service.is_blank(["", "x"])

    def test_validate_row_valid(self, file_service):
        error, price, stock = file_service.validate_row(make_row())

        assert error is None
        assert price == 9.99
        assert stock == 5

    @pytest.mark.parametrize("overrides,expected", [
        ({"name": ""}, "Product name is required"),
        ({"price": "abc"}, "Price must be a positive number"),
        ({"price": "0"}, "Price must be a positive number"),
        ({"price": "-3"}, "Price must be a positive number"),
        ({"price": ""}, "Price must be a positive number"),
        ({"stock": "many"}, "Stock must be a number"),
        ({"stock": "-1"}, "Stock cannot be negative"),
        ({"category": ""}, "Category is required"),
        ({"description": ""}, "Description is required"),
    ])
    def test_validate_row_errors(self, file_service, overrides, expected):
        error, _, _ = file_service.validate_row(make_row(**overrides))
        assert error == expected

    def test_fractional_stock_is_accepted(self, file_service):
        error, _, stock = file_service.validate_row(make_row(stock="2.5"))

        assert error is None
        assert stock == 2.5

    def test_empty_stock_defaults_to_zero(self, file_service):
        error, _, stock = file_service.validate_row(make_row(stock=""))

        assert error is None
        assert stock == 0

    def test_to_product(self, file_service):
        product = file_service.to_product(make_row(image_url="https://img/1.png"), 9.99, 5, "seller-1", "job-1")

        assert product.product_id
        assert product.seller_id == "seller-1"
        assert product.batch_job_id == "job-1"
        assert product.image_url == "https://img/1.png"
        assert product.stock == 5
