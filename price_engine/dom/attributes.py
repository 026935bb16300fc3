"""
Атрибуты разметки, в которых встречается цена.
"""

# Человекочитаемая цена ("$8.48", "Price: 12,99 €")
LABEL_ATTRIBUTES = ["aria-label"]

# Цена в data-* атрибутах: "$8.48" или машинное "8.48"
PRICE_DATA_ATTRIBUTES = [
    "data-price",
    "data-amount",
    "data-value",
    "data-cost",
    "data-currency-value",
    "data-price-value",
    "data-product-price",
    "data-sale-price",
    "data-regular-price",
    "data-original-price",
    "data-current-price",
    "data-raw-price",
    "data-item-price",
]

# Валюта для машинных значений
CURRENCY_DATA_ATTRIBUTES = [
    "data-currency",
    "data-currency-code",
    "data-price-currency",
]

# schema.org: <meta itemprop="price" content="8.48">
ITEMPROP_PRICE = "price"
ITEMPROP_CURRENCY = "priceCurrency"

# Узлы, текст которых не является видимым текстом страницы
SKIPPED_TAGS = {"script", "style", "noscript", "template"}
