"""Product domain constants.

``SORTABLE_FIELDS`` is the allow-list for ``sort_by`` in filtered
queries: public (transfer) names and their snake_case spellings map to
model fields.
"""

SORTABLE_FIELDS: dict[str, str] = {
    "name": "name",
    "category": "category",
    "wholesaleprice": "wholesale_price",
    "wholesale_price": "wholesale_price",
    "retailprice": "retail_price",
    "retail_price": "retail_price",
    "quantity": "quantity",
    "productcode": "product_code",
    "product_code": "product_code",
    "createdon": "created_on",
    "created_on": "created_on",
    "updatedon": "updated_on",
    "updated_on": "updated_on",
}

DEFAULT_SORT_FIELD = "created_on"

PRODUCT_CODE_PREFIX = "PRD"

PRODUCT_CODE_MAX_RETRIES = 5

# Column limits shared by the model and the input DTOs.
NAME_MAX_LENGTH = 255
IMAGE_URL_MAX_LENGTH = 500
ALT_TEXT_MAX_LENGTH = 255
MAX_COUNT = 2_147_483_647
