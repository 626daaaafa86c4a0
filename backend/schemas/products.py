"""Product form schemas.

Numeric product fields stay decimal strings after normalization; a native
number sent in JSON is converted to its decimal string first.
"""
import re
from decimal import Decimal

from core.validation import (
    EachItem,
    FieldSpec,
    FieldType,
    NonEmpty,
    NumberToString,
    NumericString,
    RegexPattern,
    Required,
    Schema,
    StringLength,
    StringToBool,
    trim,
)

DECIMAL_PATTERN = r"^\d+(\.\d+)?\Z"


def _flag(name: str, **kwargs) -> FieldSpec:
    return FieldSpec(name, FieldType.BOOLEAN, coercion=StringToBool(), **kwargs)


def _string_list(name: str, **kwargs) -> FieldSpec:
    return FieldSpec(name, FieldType.ARRAY, item_type=FieldType.STRING, **kwargs)


PRODUCT_FORM = Schema(
    "product-form",
    (
        FieldSpec("name", constraints=(Required("Name is required"),)),
        FieldSpec("description", constraints=(Required("Description is required"),)),
        FieldSpec("category", constraints=(Required("Category is required"),)),
        FieldSpec(
            "price",
            coercion=NumberToString(),
            constraints=(
                Required("Price is required"),
                RegexPattern(DECIMAL_PATTERN, flags=re.ASCII, description="decimal").with_message(
                    "Must be a valid number"
                ),
            ),
        ),
        FieldSpec("instock_count", default="0", coercion=NumberToString()),
        FieldSpec("rating_count", default="0", coercion=NumberToString()),
        _flag("is_feature", default=False),
        _flag("is_new_arrival", default=False),
        _string_list("sizes", default_factory=list),
        _string_list("colors", default_factory=list),
        FieldSpec("images", FieldType.FILE, optional=True),
    ),
    description="Create a product",
)

PRODUCT_CREATE = Schema(
    "product-create",
    (
        FieldSpec(
            "name",
            transforms=(trim,),
            constraints=(
                Required("Product name is required"),
                StringLength(min_length=2, max_length=100).with_message(
                    "Product name must be between 2 and 100 characters"
                ),
            ),
        ),
        FieldSpec(
            "description",
            transforms=(trim,),
            constraints=(
                Required("Product description is required"),
                StringLength(min_length=10, max_length=1000).with_message(
                    "Description must be between 10 and 1000 characters"
                ),
            ),
        ),
        FieldSpec(
            "price",
            coercion=NumberToString(),
            constraints=(
                Required("Price is required"),
                NumericString(min_value=Decimal("0.01")).with_message("Price must be a positive number greater than 0"),
            ),
        ),
        FieldSpec(
            "instock_count",
            coercion=NumberToString(),
            constraints=(
                Required("Stock count is required"),
                NumericString(min_value=0, integer_only=True).with_message(
                    "Stock count must be a non-negative integer"
                ),
            ),
        ),
        FieldSpec(
            "category",
            transforms=(trim,),
            constraints=(
                Required("Category is required"),
                StringLength(min_length=2, max_length=50).with_message(
                    "Category must be between 2 and 50 characters"
                ),
            ),
        ),
        _string_list(
            "sizes",
            type_message="All sizes must be non-empty strings",
            constraints=(
                Required("At least one size is required"),
                EachItem(NonEmpty(strip_whitespace=False)).with_message("All sizes must be non-empty strings"),
            ),
        ),
        _string_list(
            "colors",
            type_message="All colors must be non-empty strings",
            constraints=(
                Required("At least one color is required"),
                EachItem(NonEmpty(strip_whitespace=False)).with_message("All colors must be non-empty strings"),
            ),
        ),
        _flag(
            "is_new_arrival",
            type_message="New arrival status must be true or false",
            constraints=(Required("New arrival status is required"),),
        ),
        _flag(
            "is_feature",
            type_message="Feature status must be true or false",
            constraints=(Required("Feature status is required"),),
        ),
        FieldSpec(
            "rating_count",
            coercion=NumberToString(),
            constraints=(
                Required("Rating count is required"),
                NumericString(min_value=0, max_value=5).with_message("Rating count must be a number between 0 and 5"),
            ),
        ),
        FieldSpec("images", FieldType.FILE, optional=True),
    ),
    description="Strict product create rules: every field required and range-checked",
)

PRODUCT_UPDATE = Schema(
    "product-update",
    (
        FieldSpec(
            "name",
            optional=True,
            transforms=(trim,),
            constraints=(
                StringLength(min_length=2, max_length=100).with_message(
                    "Product name must be between 2 and 100 characters"
                ),
            ),
        ),
        FieldSpec(
            "description",
            optional=True,
            transforms=(trim,),
            constraints=(
                StringLength(min_length=10, max_length=1000).with_message(
                    "Description must be between 10 and 1000 characters"
                ),
            ),
        ),
        FieldSpec(
            "price",
            optional=True,
            coercion=NumberToString(),
            constraints=(
                NumericString(min_value=Decimal("0.01")).with_message("Price must be a positive number greater than 0"),
            ),
        ),
        FieldSpec(
            "instock_count",
            optional=True,
            coercion=NumberToString(),
            constraints=(
                NumericString(min_value=0, integer_only=True).with_message(
                    "Stock count must be a non-negative integer"
                ),
            ),
        ),
        FieldSpec(
            "category",
            optional=True,
            transforms=(trim,),
            constraints=(
                StringLength(min_length=2, max_length=50).with_message(
                    "Category must be between 2 and 50 characters"
                ),
            ),
        ),
        _string_list(
            "sizes",
            optional=True,
            constraints=(EachItem(NonEmpty(strip_whitespace=False)).with_message("All sizes must be non-empty strings"),),
        ),
        _string_list(
            "colors",
            optional=True,
            constraints=(EachItem(NonEmpty(strip_whitespace=False)).with_message("All colors must be non-empty strings"),),
        ),
        _flag("is_new_arrival", optional=True),
        _flag("is_feature", optional=True),
        FieldSpec(
            "rating_count",
            optional=True,
            coercion=NumberToString(),
            constraints=(
                NumericString(min_value=0, max_value=5).with_message("Rating count must be a number between 0 and 5"),
            ),
        ),
        FieldSpec("images", FieldType.FILE, optional=True),
    ),
    description="Partial product update",
)

SCHEMAS = (PRODUCT_FORM, PRODUCT_CREATE, PRODUCT_UPDATE)
