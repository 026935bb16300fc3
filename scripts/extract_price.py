#!/usr/bin/env python3
"""
Распознавание цены из HTML файла или строки.

Использование:
    # Цена в строке
    python scripts/extract_price.py --text "Only $19.99 today"

    # Цены в элементах HTML страницы
    python scripts/extract_price.py page.html --selector ".price" --hostname www.amazon.com

    # Европейские разделители
    python scripts/extract_price.py --text "Preis: 1.234,56 €" --thousands spacesAndDots --decimal comma

    # Паттерн старого API (find_prices)
    python scripts/extract_price.py --text "$20.00 (2h 30m)" --find-prices --reverse
"""

import argparse
import json
import sys
from pathlib import Path

from bs4 import BeautifulSoup
from loguru import logger

# Добавляем корень проекта в путь
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from price_engine import PriceEngine, Settings
from price_engine.config.settings import LOG_LEVEL


def build_settings(args: argparse.Namespace) -> Settings:
    return Settings(
        currency_symbol=args.symbol,
        currency_code=args.code,
        thousands=None if args.thousands == "auto" else args.thousands,
        decimal=None if args.decimal == "auto" else args.decimal,
        is_reverse_search=args.reverse,
    )


def run(args: argparse.Namespace) -> int:
    """Главная функция: печатает результаты в JSON, код возврата 1 если цены нет."""
    settings = build_settings(args)
    engine = PriceEngine.create()

    if args.text is not None:
        if args.find_prices:
            info = engine.find_prices(args.text, settings)
            print(json.dumps(info.to_dict() if info else None, ensure_ascii=False, indent=2))
            return 0 if info else 1
        result = engine.extract_price(args.text, settings, hostname=args.hostname)
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return 0 if result.found else 1

    if not args.source:
        logger.error("Укажите HTML файл или --text")
        return 2

    html_path = Path(args.source)
    if not html_path.is_file():
        logger.error(f"Файл не найден: {html_path}")
        return 2

    soup = BeautifulSoup(html_path.read_text(encoding="utf-8"), "html.parser")
    nodes = soup.select(args.selector) if args.selector else [soup.body or soup]
    logger.info(f"Узлов для распознавания: {len(nodes)}")

    results = [engine.extract_price(node, settings, hostname=args.hostname) for node in nodes]
    print(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))
    return 0 if any(r.found for r in results) else 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Распознавание цен в HTML и тексте")
    parser.add_argument("source", nargs="?", help="Путь к HTML файлу")
    parser.add_argument("--text", help="Распознать цену в строке")
    parser.add_argument("--selector", help="CSS селектор элементов с ценой")
    parser.add_argument("--hostname", help="Hostname страницы (включает обработчики сайтов)")
    parser.add_argument("--symbol", default="$", help="Символ валюты из настроек")
    parser.add_argument("--code", default="USD", help="ISO код валюты из настроек")
    parser.add_argument("--thousands", default="commas", help="commas | spacesAndDots | auto")
    parser.add_argument("--decimal", default="dot", help="dot | comma | auto")
    parser.add_argument("--reverse", action="store_true", help="Искать уже аннотированные цены")
    parser.add_argument("--find-prices", action="store_true", help="Вывести паттерн старого API")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Уровень логирования loguru")
    args = parser.parse_args()

    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=args.log_level.upper(),
    )
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
