# generate_catalog.py
# Purpose:
#  - scan p<N>.html product pages in the site root
#  - scan img/p<N>.<ext> product images
#  - synthesize placeholder product data (name, price, category, delivery)
#  - write catalogocompleto.html
#
# Usage:
#   python generate_catalog.py
# Options:
#   python generate_catalog.py --seed 42   (reproducible placeholder values)

import argparse
import json
import logging
import random
import re
import sys
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from site_errors import ErrorKind, SiteError, list_dir, report, write_text

logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parent
SOURCE_FOLDER = ROOT
IMAGES_FOLDER = ROOT / "img"
OUTPUT_FILE = ROOT / "catalogocompleto.html"

PRODUCT_PAGE_PATTERN = re.compile(r"p(\d+)\.html")
PRODUCT_IMAGE_PATTERN = re.compile(r"p(\d+)\.(png|jpg|jpeg|gif|webp)", re.IGNORECASE)

MAX_PRODUCT_ID = 100
DEFAULT_IMAGE = "https://via.placeholder.com/250x250?text=No+Image"

PRICE_RANGE = (25, 80)
CATEGORY_RANGE = (1, 3)
DELIVERY_RANGE = (3, 10)


@dataclass
class CatalogItem:
    id: int
    name: str
    price: int
    image: str
    category: str
    delivery_days: int

    def to_json(self) -> dict:
        d = asdict(self)
        d["deliveryDays"] = d.pop("delivery_days")
        return d


class PlaceholderValues(Protocol):
    def price(self) -> int: ...
    def category_index(self) -> int: ...
    def delivery_days(self) -> int: ...


class RandomPlaceholders:
    """
    Placeholder values drawn uniformly from the fixed ranges.
    Not derived from any real product data.
    """

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def price(self) -> int:
        return self._rng.randint(*PRICE_RANGE)

    def category_index(self) -> int:
        return self._rng.randint(*CATEGORY_RANGE)

    def delivery_days(self) -> int:
        return self._rng.randint(*DELIVERY_RANGE)


def _match_id(pattern: re.Pattern, name: str) -> Optional[int]:
    m = pattern.fullmatch(name)
    if not m:
        return None
    pid = int(m.group(1))
    if pid < 1 or pid > MAX_PRODUCT_ID:
        return None
    return pid


def scan_product_pages(folder: Path) -> list[int]:
    """
    ids of p<N>.html pages, unique, ascending, capped at MAX_PRODUCT_ID
    """
    try:
        names = list_dir(folder)
    except SiteError as err:
        report(err, logger)
        return []

    logger.info("Scanning folder: %s (%d files)", folder, len(names))
    ids = set()
    for name in names:
        pid = _match_id(PRODUCT_PAGE_PATTERN, name)
        if pid is None:
            continue
        ids.add(pid)
        logger.info("Found product page: %s (ID: %d)", name, pid)
    return sorted(ids)


def scan_product_images(folder: Path) -> dict[int, str]:
    """
    {id: "img/<file>"}; a missing folder is created and yields {}
    """
    if not folder.exists():
        logger.warning("Images folder not found, creating: %s", folder)
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            report(SiteError(ErrorKind.DIRECTORY_UNREADABLE, f"cannot create folder: {exc}", folder), logger)
        return {}

    try:
        names = list_dir(folder)
    except SiteError as err:
        report(err, logger)
        return {}

    images: dict[int, str] = {}
    for name in names:
        pid = _match_id(PRODUCT_IMAGE_PATTERN, name)
        if pid is None or pid in images:
            continue
        # web path relative to the catalog page
        images[pid] = f"{folder.name}/{name}"
        logger.info("Found product image: %s (ID: %d)", name, pid)
    return images


def build_catalog_item(pid: int, image_path: Optional[str], values: PlaceholderValues) -> CatalogItem:
    return CatalogItem(
        id=pid,
        name=f"Pelúcia {pid}",
        price=values.price(),
        image=image_path or DEFAULT_IMAGE,
        category=f"Categoria {values.category_index()}",
        delivery_days=values.delivery_days(),
    )


def generate_product_data(ids: list[int], images: dict[int, str], values: PlaceholderValues) -> dict[int, CatalogItem]:
    return {pid: build_catalog_item(pid, images.get(pid), values) for pid in ids}


EMPTY_STATE_HTML = """
                    <div class="col-span-full text-center py-12">
                        <i class="fas fa-info-circle text-4xl text-gray-300 mb-4"></i>
                        <h3 class="text-xl font-medium text-gray-700 mb-2">Nenhum produto disponível</h3>
                        <p class="text-gray-500">Adicione arquivos p*.html para ver produtos aqui.</p>
                    </div>
"""

# Placeholders: __PRODUCT_COUNT__, __EMPTY_STATE__, __GENERATED_AT__, __PRODUCT_DATA__
PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="pt-BR">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Heartmade Pelúcias - Catálogo completo</title>
    <script src="https://cdn.tailwindcss.com"></script>
    <link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.4.0/css/all.min.css">
    <style>
        .plush-card:hover { transform: translateY(-5px); box-shadow: 0 10px 25px rgba(0, 0, 0, 0.1); }
        .plush-image { height: 250px; object-fit: contain; transition: all 0.3s ease; margin-bottom: 0.5rem; }
        .plush-card:hover .plush-image { transform: scale(1.05); }
        .nav-link:hover { color: #f59e0b; }
        .logo-img, .lettering-logo { height: 60px; width: auto; transition: transform 0.3s ease; }
        .logo-img:hover, .lettering-logo:hover { transform: scale(1.05); }
        input[type="range"]::-webkit-slider-thumb {
            -webkit-appearance: none; appearance: none;
            width: 16px; height: 16px; background: #f59e0b; cursor: pointer; border-radius: 50%;
        }
        input[type="range"]::-moz-range-thumb {
            width: 16px; height: 16px; background: #f59e0b; cursor: pointer; border-radius: 50%;
        }
    </style>
</head>
<body class="bg-gray-50 font-sans">
    <header class="bg-white shadow-md sticky top-0 z-50">
        <div class="container mx-auto px-4 py-3 flex justify-between items-center">
            <a href="index.html" class="flex items-center space-x-3">
                <img src="logo.png" alt="Heartmade Pelúcias" class="logo-img">
                <img src="letteringlogo.png" alt="Heartmade Pelúcias Lettering" class="lettering-logo">
            </a>
            <nav class="hidden md:flex space-x-8">
                <a href="catalogocompleto.html" class="nav-link text-gray-700 hover:text-amber-600 font-medium">Catálogo completo</a>
                <a href="maisvendidos.html" class="nav-link text-gray-700 hover:text-amber-600 font-medium">Mais vendidos</a>
                <a href="categorias.html" class="nav-link text-gray-700 hover:text-amber-600 font-medium">Categorias</a>
                <a href="contato.html" class="nav-link text-gray-700 hover:text-amber-600 font-medium">Contato</a>
            </nav>
            <button class="md:hidden p-2 text-gray-600" id="mobile-menu-button"><i class="fas fa-bars"></i></button>
        </div>
        <div class="md:hidden hidden bg-white py-2 px-4 shadow-md" id="mobile-menu">
            <a href="catalogocompleto.html" class="block py-2 text-gray-700 hover:text-amber-600">Catálogo completo</a>
            <a href="maisvendidos.html" class="block py-2 text-gray-700 hover:text-amber-600">Mais vendidos</a>
            <a href="categorias.html" class="block py-2 text-gray-700 hover:text-amber-600">Categorias</a>
            <a href="contato.html" class="block py-2 text-gray-700 hover:text-amber-600">Contato</a>
        </div>
    </header>

    <main class="container mx-auto px-4 py-8">
        <div class="flex flex-col md:flex-row gap-8">
            <div class="w-full md:w-64 bg-white p-6 rounded-lg shadow-md h-fit">
                <h3 class="font-bold text-lg mb-4 text-gray-800">Filtros</h3>
                <div class="mb-6">
                    <h4 class="font-medium text-gray-700 mb-3">Categorias</h4>
                    <div class="space-y-2">
                        <label class="flex items-center space-x-2"><input type="checkbox" class="rounded text-amber-600" value="Categoria 1"><span>Categoria 1</span></label>
                        <label class="flex items-center space-x-2"><input type="checkbox" class="rounded text-amber-600" value="Categoria 2"><span>Categoria 2</span></label>
                        <label class="flex items-center space-x-2"><input type="checkbox" class="rounded text-amber-600" value="Categoria 3"><span>Categoria 3</span></label>
                    </div>
                </div>
                <div class="mb-6">
                    <h4 class="font-medium text-gray-700 mb-3">Preço Máximo (R$)</h4>
                    <input type="range" min="20" max="200" value="200" class="w-full mb-2" id="price-range">
                    <div class="flex justify-between text-sm text-gray-600">
                        <span>R$20</span><span id="price-value">R$200</span><span>R$200</span>
                    </div>
                </div>
                <button class="w-full bg-amber-600 hover:bg-amber-700 text-white py-2 px-4 rounded transition" id="apply-filters">Aplicar filtros</button>
            </div>

            <div class="flex-1">
                <div class="bg-white p-4 rounded-lg shadow-md mb-6 flex justify-between items-center">
                    <div class="text-gray-600">
                        Mostrando <span class="font-medium" id="product-count">__PRODUCT_COUNT__</span> produtos
                        <span class="text-xs text-gray-400">(Atualizado automaticamente)</span>
                    </div>
                    <div class="flex items-center space-x-2">
                        <span class="text-gray-600">Ordenar por:</span>
                        <select class="border rounded px-3 py-1 focus:outline-none focus:ring-2 focus:ring-amber-200" id="sort-by">
                            <option value="relevance">Mais relevantes</option>
                            <option value="latest">Mais recentes</option>
                            <option value="price-asc">Menor preço</option>
                            <option value="price-desc">Maior preço</option>
                        </select>
                    </div>
                </div>
                <div class="grid grid-cols-1 sm:grid-cols-2 md:grid-cols-3 lg:grid-cols-4 gap-6" id="plush-catalog">__EMPTY_STATE__</div>
            </div>
        </div>
    </main>

    <footer class="bg-gray-800 text-white py-10">
        <div class="container mx-auto px-4 text-center">
            <h3 class="text-xl font-bold mb-4">Heartmade Pelúcias</h3>
            <div class="flex justify-center space-x-4 mt-4">
                <a href="#" class="text-gray-400 hover:text-white"><i class="fab fa-whatsapp"></i></a>
                <a href="#" class="text-gray-400 hover:text-white"><i class="fab fa-instagram"></i></a>
            </div>
            <p class="border-t border-gray-700 mt-10 pt-6 text-gray-400">&copy; Heartmade Pelúcias. Todos direitos reservados.</p>
        </div>
    </footer>

    <script>
        // Auto-generated product data - DO NOT MODIFY MANUALLY
        // Generated on: __GENERATED_AT__
        const availableProducts = [
__PRODUCT_DATA__
        ];

        let currentFilteredProducts = [...availableProducts];
        let maxPrice = 200;

        document.getElementById('mobile-menu-button').addEventListener('click', function() {
            document.getElementById('mobile-menu').classList.toggle('hidden');
        });

        const priceRange = document.getElementById('price-range');
        const priceValue = document.getElementById('price-value');
        priceRange.oninput = function() { priceValue.innerHTML = "R$" + this.value; };

        function applyFilters() {
            const selected = Array.from(document.querySelectorAll('input[type="checkbox"]:checked')).map(cb => cb.value);
            let filtered = availableProducts;
            if (maxPrice < 200) {
                filtered = filtered.filter(item => item.price <= maxPrice);
            }
            if (selected.length > 0) {
                filtered = filtered.filter(item => selected.includes(item.category));
            }
            currentFilteredProducts = filtered;
            renderPlushItems(currentFilteredProducts);
        }

        function renderPlushItems(items) {
            const container = document.getElementById('plush-catalog');
            const countSpan = document.getElementById('product-count');
            if (items.length === 0) {
                if (availableProducts.length > 0) {
                    container.innerHTML = `
                        <div class="col-span-full text-center py-12">
                            <i class="fas fa-search text-4xl text-gray-300 mb-4"></i>
                            <h3 class="text-xl font-medium text-gray-700 mb-2">Nenhum produto encontrado</h3>
                            <p class="text-gray-500">Tente ajustar os filtros para ver mais produtos.</p>
                        </div>`;
                }
                countSpan.textContent = '0';
                return;
            }
            container.innerHTML = '';
            items.forEach((item) => {
                const el = document.createElement('div');
                el.className = 'bg-white rounded-lg overflow-hidden shadow-md plush-card transition duration-300';
                el.innerHTML = `
                    <a href="p${item.id}.html" class="block">
                        <div class="p-4">
                            <img src="${item.image}" alt="${item.name}" class="plush-image w-full rounded-lg mb-4">
                            <h3 class="font-medium text-gray-800 mb-1">${item.name}</h3>
                            <p class="text-amber-600 font-bold">R$${item.price.toFixed(2)}</p>
                            <p class="text-gray-500 text-sm mt-1">Prazo: ${item.deliveryDays} dias</p>
                        </div>
                    </a>`;
                container.appendChild(el);
            });
            countSpan.textContent = items.length;
        }

        document.getElementById('sort-by').addEventListener('change', function() {
            const sorted = [...currentFilteredProducts];
            switch (this.value) {
                case 'relevance':
                case 'latest':
                    sorted.sort((a, b) => a.id - b.id);
                    break;
                case 'price-asc':
                    sorted.sort((a, b) => a.price - b.price);
                    break;
                case 'price-desc':
                    sorted.sort((a, b) => b.price - a.price);
                    break;
            }
            renderPlushItems(sorted);
        });

        document.getElementById('apply-filters').addEventListener('click', function() {
            maxPrice = parseInt(priceRange.value);
            priceValue.innerHTML = "R$" + maxPrice;
            applyFilters();
        });

        document.querySelectorAll('input[type="checkbox"]').forEach(cb => cb.addEventListener('change', applyFilters));

        document.addEventListener('DOMContentLoaded', function() { renderPlushItems(availableProducts); });
    </script>
</body>
</html>
"""


def render_catalog_html(ids: list[int], products: dict[int, CatalogItem], generated_at: Optional[datetime] = None) -> str:
    generated_at = generated_at or datetime.now()
    # values go in unescaped; names/categories are our own placeholders
    rows = ",\n".join(
        "            " + json.dumps(products[pid].to_json(), ensure_ascii=False)
        for pid in ids
    )
    return (
        PAGE_TEMPLATE
        .replace("__PRODUCT_COUNT__", str(len(ids)))
        .replace("__EMPTY_STATE__", EMPTY_STATE_HTML if not ids else "")
        .replace("__GENERATED_AT__", generated_at.strftime("%d/%m/%Y %H:%M:%S"))
        .replace("__PRODUCT_DATA__", rows)
    )


def generate_catalog(
    source_folder: Path = SOURCE_FOLDER,
    images_folder: Path = IMAGES_FOLDER,
    output_file: Path = OUTPUT_FILE,
    values: Optional[PlaceholderValues] = None,
) -> bool:
    values = values or RandomPlaceholders()

    if not source_folder.is_dir():
        report(SiteError(ErrorKind.DIRECTORY_UNREADABLE, "source folder not found", source_folder), logger)
        return False

    ids = scan_product_pages(source_folder)
    images = scan_product_images(images_folder)

    with_images = [pid for pid in ids if pid in images]
    without_images = [pid for pid in ids if pid not in images]
    if without_images:
        logger.warning("Products without images (placeholder used): %s", ", ".join(map(str, without_images)))

    products = generate_product_data(ids, images, values)
    html = render_catalog_html(ids, products)

    try:
        write_text(output_file, html)
    except SiteError as err:
        report(err, logger)
        return False

    print(f"OK: scanned {len(ids)} product pages, {len(images)} images")
    print(f"OK: wrote {output_file.name}")
    if ids:
        print(f"With custom images: {len(with_images)}, with placeholder: {len(without_images)}")
    return True


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Generate catalogocompleto.html from p<N>.html pages")
    ap.add_argument("--seed", type=int, default=None, help="seed for the placeholder price/category/delivery values")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    # failures are logged by generate_catalog; no separate exit code
    generate_catalog(SOURCE_FOLDER, IMAGES_FOLDER, OUTPUT_FILE, values=RandomPlaceholders(args.seed))
    return 0


if __name__ == "__main__":
    sys.exit(main())
